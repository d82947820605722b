"""Libro Diario y Libro Mayor derivados de facturas y gastos.

Cada factura activa y cada gasto producen un asiento de partida doble. El
Libro Mayor agrupa las líneas por cuenta con saldo acumulado (debe - haber).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional

import pandas as pd
import structlog

from src.application.config import CompanyConfig, RatesConfig
from src.application.dtos import JournalEntry, JournalLine
from src.application.financials import calculate_financial_details
from src.domain.entities import Expense, Invoice, PaymentStatus

logger = structlog.get_logger()

ZERO = Decimal("0")

DEFAULT_CASH_ACCOUNT = "Caja/Banco"
INGRESOS_FLETE = "Ingresos por Servicios de Flete"
INGRESOS_MANEJO = "Ingresos por Manejo"
INGRESOS_SEGURO = "Ingresos por Seguro"
DESCUENTOS_VENTAS = "Descuentos en Ventas"
IVA_DEBITO = "IVA Débito Fiscal"
IVA_CREDITO = "IVA Crédito Fiscal"
IPOSTEL_POR_PAGAR = "Retenciones IPOSTEL por Pagar"
IGTF_POR_PAGAR = "IGTF por Pagar"

DIARIO_COLUMNS = ["Fecha", "Asiento", "Cuenta", "Debe", "Haber", "Descripción"]
MAYOR_COLUMNS = ["Cuenta", "Fecha", "Descripción", "Debe", "Haber", "Saldo"]
MAYOR_SUMMARY_COLUMNS = ["Cuenta", "Total Debe", "Total Haber", "Saldo Final"]


def _cuentas_por_cobrar(client_name: str) -> str:
    return f"Cuentas por Cobrar - {client_name}"


def _cuentas_por_pagar(supplier_name: str) -> str:
    return f"Cuentas por Pagar - {supplier_name}"


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


def invoice_entry(
    invoice: Invoice,
    company: CompanyConfig,
    rates: RatesConfig | None = None,
    payment_methods: Mapping[str, str] | None = None,
) -> JournalEntry:
    """
    Asiento de venta. Debe: caja (flete pagado y cobrado) o cuentas por cobrar,
    más descuento. Haber: flete, manejo, seguro e impuestos.

    Un flete a destino ya cobrado se registra contra cuentas por cobrar y luego
    se traslada a caja dentro del mismo asiento.
    """
    financials = calculate_financial_details(invoice.guide, company, rates)
    cash = (payment_methods or {}).get(invoice.guide.payment_method_id, DEFAULT_CASH_ACCOUNT)
    receivable = _cuentas_por_cobrar(invoice.client_name)
    paid = invoice.payment_status is PaymentStatus.PAGADA

    lines = []
    if paid and invoice.guide.payment_type == "flete-pagado":
        lines.append(JournalLine(cash, debit=financials.total))
    else:
        lines.append(JournalLine(receivable, debit=financials.total))
    if paid and invoice.guide.payment_type == "flete-destino":
        lines.append(JournalLine(cash, debit=financials.total))
        lines.append(JournalLine(receivable, credit=financials.total))

    lines.append(JournalLine(INGRESOS_FLETE, credit=financials.freight))
    if financials.handling > 0:
        lines.append(JournalLine(INGRESOS_MANEJO, credit=financials.handling))
    if financials.insurance_cost > 0:
        lines.append(JournalLine(INGRESOS_SEGURO, credit=financials.insurance_cost))
    if financials.discount > 0:
        lines.append(JournalLine(DESCUENTOS_VENTAS, debit=financials.discount))
    if financials.iva > 0:
        lines.append(JournalLine(IVA_DEBITO, credit=financials.iva))
    if financials.ipostel > 0:
        lines.append(JournalLine(IPOSTEL_POR_PAGAR, credit=financials.ipostel))
    if financials.igtf > 0:
        lines.append(JournalLine(IGTF_POR_PAGAR, credit=financials.igtf))

    return JournalEntry(
        source_id=invoice.id,
        date=invoice.date,
        description=f"Venta según Factura {invoice.invoice_number}",
        lines=tuple(lines),
    )


def expense_entry(
    expense: Expense, payment_methods: Mapping[str, str] | None = None
) -> JournalEntry:
    """
    Asiento de compra: gasto e IVA crédito al debe; caja o cuentas por pagar
    al haber. Sin base imponible registrada, la base es el monto menos el IVA.
    """
    vat = expense.vat_amount or ZERO
    base = expense.taxable_base if expense.taxable_base is not None else expense.amount - vat
    supplier = expense.supplier_name or ""
    number = f" {expense.invoice_number}" if expense.invoice_number else ""

    lines = [JournalLine(f"Gasto - {expense.category}", debit=base)]
    if vat > 0:
        lines.append(JournalLine(IVA_CREDITO, debit=vat))
    if expense.status == "Pagado":
        cash = (payment_methods or {}).get(expense.payment_method_id, DEFAULT_CASH_ACCOUNT)
        lines.append(JournalLine(cash, credit=expense.amount))
    else:
        lines.append(JournalLine(_cuentas_por_pagar(supplier), credit=expense.amount))

    return JournalEntry(
        source_id=expense.id,
        date=expense.date,
        description=f"Compra según Factura{number} de {supplier}",
        lines=tuple(lines),
    )


def journal_entries(
    invoices: Iterable[Invoice],
    expenses: Iterable[Expense],
    company: CompanyConfig,
    rates: RatesConfig | None = None,
    payment_methods: Mapping[str, str] | None = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[JournalEntry]:
    """Asientos de facturas activas y gastos en ``[start, end]``, en orden cronológico."""
    entries = [
        invoice_entry(inv, company, rates, payment_methods)
        for inv in invoices
        if inv.is_active and _in_range(inv.date, start, end)
    ]
    entries.extend(
        expense_entry(exp, payment_methods)
        for exp in expenses
        if _in_range(exp.date, start, end)
    )
    entries.sort(key=lambda e: e.date)

    unbalanced = [e.source_id for e in entries if not e.is_balanced]
    if unbalanced:
        logger.warning("journal_entries_unbalanced", source_ids=unbalanced)
    return entries


def libro_diario(entries: Iterable[JournalEntry]) -> pd.DataFrame:
    rows = [
        {
            "Fecha": entry.date,
            "Asiento": number,
            "Cuenta": line.account,
            "Debe": line.debit,
            "Haber": line.credit,
            "Descripción": entry.description,
        }
        for number, entry in enumerate(entries, start=1)
        for line in entry.lines
    ]
    df = pd.DataFrame(rows, columns=DIARIO_COLUMNS)
    logger.info("libro_diario_built", rows=len(df))
    return df


def libro_mayor(entries: Iterable[JournalEntry]) -> pd.DataFrame:
    """Movimientos por cuenta (orden alfabético) con saldo acumulado."""
    by_account: dict[str, list[dict]] = {}
    for entry in entries:
        for line in entry.lines:
            by_account.setdefault(line.account, []).append(
                {
                    "Cuenta": line.account,
                    "Fecha": entry.date,
                    "Descripción": entry.description,
                    "Debe": line.debit,
                    "Haber": line.credit,
                }
            )

    rows = []
    for account in sorted(by_account):
        balance = ZERO
        for movement in sorted(by_account[account], key=lambda m: m["Fecha"]):
            balance += movement["Debe"] - movement["Haber"]
            rows.append({**movement, "Saldo": balance})

    df = pd.DataFrame(rows, columns=MAYOR_COLUMNS)
    logger.info("libro_mayor_built", accounts=len(by_account), rows=len(df))
    return df


def mayor_summary(mayor: pd.DataFrame) -> pd.DataFrame:
    """Totales del debe y del haber y saldo final de cada cuenta del Libro Mayor."""
    rows = []
    for account, group in mayor.groupby("Cuenta", sort=True):
        rows.append(
            {
                "Cuenta": account,
                "Total Debe": sum(group["Debe"], ZERO),
                "Total Haber": sum(group["Haber"], ZERO),
                "Saldo Final": group["Saldo"].iloc[-1],
            }
        )
    return pd.DataFrame(rows, columns=MAYOR_SUMMARY_COLUMNS)
