"""Conciliación de deudas y recibos de un asociado (estado de cuenta)."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from src.application.dtos import AccountStatement, LedgerEntry
from src.domain.entities import PagoAsociado, ReciboPagoAsociado

ZERO = Decimal("0")


def build_statement(
    asociado_id: str,
    debts: Iterable[PagoAsociado],
    receipts: Iterable[ReciboPagoAsociado],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> AccountStatement:
    """
    Une deudas (débitos, por fecha de vencimiento) y recibos (créditos, por
    fecha de pago) en una secuencia cronológica con saldo acumulado.

    Con rango de fechas, las transacciones fuera de ``[start, end]`` se
    excluyen antes de ordenar y el saldo se calcula solo sobre la ventana:
    no se arrastra saldo inicial de movimientos anteriores.
    """
    rows: list[tuple[date, str, Decimal, Decimal, str]] = []
    for debt in debts:
        if debt.asociado_id == asociado_id:
            rows.append((debt.fecha_vencimiento, debt.concepto, debt.monto_bs, ZERO, debt.id))
    for receipt in receipts:
        if receipt.asociado_id == asociado_id:
            rows.append(
                (
                    receipt.fecha_pago,
                    f"Recibo de Pago #{receipt.comprobante_numero}",
                    ZERO,
                    receipt.monto_total_bs,
                    receipt.id,
                )
            )

    rows = [row for row in rows if _in_window(row[0], start, end)]
    # sort estable: en la misma fecha las deudas quedan antes que los recibos
    rows.sort(key=lambda row: row[0])

    statement = AccountStatement(asociado_id=asociado_id, period_start=start, period_end=end)
    balance = ZERO
    for entry_date, description, debit, credit, source_id in rows:
        balance += debit - credit
        statement.entries.append(
            LedgerEntry(
                date=entry_date,
                description=description,
                debit=debit,
                credit=credit,
                balance=balance,
                source_id=source_id,
            )
        )
    return statement


def _in_window(value: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def pending_debts(debts: Iterable[PagoAsociado], asociado_id: str) -> list[PagoAsociado]:
    """Deudas pendientes del asociado, de la más antigua a la más reciente."""
    pending = [d for d in debts if d.asociado_id == asociado_id and d.is_pending]
    return sorted(pending, key=lambda d: d.fecha_vencimiento)


def total_pending(debts: Iterable[PagoAsociado], asociado_id: str) -> Decimal:
    return sum((d.monto_bs for d in pending_debts(debts, asociado_id)), ZERO)


def is_overdue(debt: PagoAsociado, today: date) -> bool:
    return debt.is_pending and debt.fecha_vencimiento < today
