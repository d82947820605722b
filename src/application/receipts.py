"""Registro de pagos de asociados: borrador de recibo validado al confirmar."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from src.domain.entities import DebtStatus, DetallePago, PagoAsociado, ReciboPagoAsociado
from src.domain.exceptions import ValidationError

DEFAULT_PAYMENT_TYPE = "Transferencia"


@dataclass
class ReceiptDraft:
    """
    Estado del formulario de pago antes de confirmar.

    Se acumula libremente (selección de deudas, filas de detalle) y solo se
    valida en ``build``, que retorna el recibo o lanza ``ValidationError``.
    """

    asociado_id: str
    fecha_pago: date
    tasa_bcv: Decimal
    selected_ids: list[str] = field(default_factory=list)
    detalles: list[DetallePago] = field(default_factory=list)

    @classmethod
    def for_pending(
        cls,
        asociado_id: str,
        pending: Iterable[PagoAsociado],
        fecha_pago: date,
        tasa_bcv: Decimal,
    ) -> "ReceiptDraft":
        """Preselecciona todas las deudas pendientes con una sola forma de pago por el total."""
        pending = [p for p in pending if p.asociado_id == asociado_id and p.is_pending]
        total = sum((p.monto_bs for p in pending), Decimal("0"))
        return cls(
            asociado_id=asociado_id,
            fecha_pago=fecha_pago,
            tasa_bcv=tasa_bcv,
            selected_ids=[p.id for p in pending],
            detalles=[DetallePago(tipo=DEFAULT_PAYMENT_TYPE, monto=total)],
        )

    def toggle(self, debt_id: str) -> None:
        if debt_id in self.selected_ids:
            self.selected_ids.remove(debt_id)
        else:
            self.selected_ids.append(debt_id)

    def add_detalle(self, detalle: DetallePago) -> None:
        self.detalles.append(detalle)

    def remove_detalle(self, index: int) -> None:
        del self.detalles[index]

    def total_a_pagar(self, pending: Iterable[PagoAsociado]) -> Decimal:
        selected = set(self.selected_ids)
        return sum((p.monto_bs for p in pending if p.id in selected), Decimal("0"))

    @property
    def total_pagado(self) -> Decimal:
        return sum((d.monto for d in self.detalles), Decimal("0"))

    def diferencia(self, pending: Iterable[PagoAsociado]) -> Decimal:
        return self.total_a_pagar(pending) - self.total_pagado

    def can_confirm(self, pending: Iterable[PagoAsociado]) -> bool:
        pending = list(pending)
        return bool(self.selected_ids) and self.diferencia(pending) == 0

    def build(
        self,
        pending: Iterable[PagoAsociado],
        receipt_id: str,
        comprobante_numero: str,
    ) -> ReciboPagoAsociado:
        pending_by_id = {
            p.id: p for p in pending if p.asociado_id == self.asociado_id and p.is_pending
        }
        if not self.selected_ids:
            raise ValidationError(
                "no_debts_selected", "Debe seleccionar al menos un concepto a pagar"
            )
        unknown = [i for i in self.selected_ids if i not in pending_by_id]
        if unknown:
            raise ValidationError(
                "unknown_debt", f"Deudas no pendientes o de otro asociado: {unknown}"
            )

        total = self.total_a_pagar(pending_by_id.values())
        if total != self.total_pagado:
            raise ValidationError(
                "amount_mismatch",
                f"El monto pagado ({self.total_pagado}) debe ser igual al total a pagar ({total})",
            )

        return ReciboPagoAsociado(
            id=receipt_id,
            comprobante_numero=comprobante_numero,
            asociado_id=self.asociado_id,
            fecha_pago=self.fecha_pago,
            monto_total_bs=total,
            tasa_bcv=self.tasa_bcv,
            pagos_ids=tuple(self.selected_ids),
            detalles_pago=tuple(self.detalles),
        )


def settle_debts(
    debts: Iterable[PagoAsociado], receipt: ReciboPagoAsociado
) -> list[PagoAsociado]:
    """Marca como pagadas las deudas referenciadas por el recibo; el resto queda igual."""
    settled = set(receipt.pagos_ids)
    return [
        replace(d, status=DebtStatus.PAGADO, recibo_id=receipt.id) if d.id in settled else d
        for d in debts
    ]


def next_comprobante_numero(receipts: Iterable[ReciboPagoAsociado]) -> str:
    """Correlativo ``C-00000001`` a partir del mayor comprobante existente."""
    highest = 0
    for r in receipts:
        digits = r.comprobante_numero.removeprefix("C-")
        if digits.isdigit():
            highest = max(highest, int(digits))
    return f"C-{highest + 1:08d}"


def find_receipt_for_debt(
    receipts: Iterable[ReciboPagoAsociado], debt_id: str
) -> Optional[ReciboPagoAsociado]:
    for r in receipts:
        if debt_id in r.pagos_ids:
            return r
    return None
