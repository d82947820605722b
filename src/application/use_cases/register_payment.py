"""Registro de pagos de asociados con recibo y liquidación de deudas."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable

import structlog

from src.application.audit import REGISTRAR_PAGO
from src.application.debts import new_id
from src.application.ledger import pending_debts
from src.application.ports.audit import AuditRecorder
from src.application.ports.key_value_store import KeyValueStore
from src.application.ports.repository import CollectionRepository
from src.application.receipts import ReceiptDraft, next_comprobante_numero, settle_debts
from src.domain.entities import PagoAsociado, ReciboPagoAsociado, User

logger = structlog.get_logger()


@dataclass(frozen=True)
class RegisterPaymentUseCase:
    debts: CollectionRepository[PagoAsociado]
    receipts: CollectionRepository[ReciboPagoAsociado]
    audit: AuditRecorder
    store: KeyValueStore
    id_factory: Callable[[], str] = new_id

    def prepare(self, asociado_id: str, fecha_pago: date, tasa_bcv: Decimal) -> ReceiptDraft:
        """Borrador con todas las deudas pendientes seleccionadas."""
        pending = pending_debts(self.debts.list_all(), asociado_id)
        return ReceiptDraft.for_pending(asociado_id, pending, fecha_pago, tasa_bcv)

    def execute(self, draft: ReceiptDraft, user: User) -> ReciboPagoAsociado:
        """
        Valida el borrador y registra el recibo.

        Si la validación falla se lanza ``ValidationError`` y no se escribe nada.
        El recibo y las deudas liquidadas se escriben en una sola transacción.
        """
        all_debts = self.debts.list_all()
        existing_receipts = self.receipts.list_all()
        receipt = draft.build(
            pending_debts(all_debts, draft.asociado_id),
            receipt_id=self.id_factory(),
            comprobante_numero=next_comprobante_numero(existing_receipts),
        )

        self.store.set_many(
            {
                self.receipts.collection: self.receipts.to_records([*existing_receipts, receipt]),
                self.debts.collection: self.debts.to_records(settle_debts(all_debts, receipt)),
            }
        )

        self.audit.log_action(
            user,
            REGISTRAR_PAGO,
            f"Recibo {receipt.comprobante_numero} por {receipt.monto_total_bs} Bs. "
            f"({len(receipt.pagos_ids)} conceptos)",
            target_id=receipt.id,
        )
        logger.info(
            "receipt_registered",
            receipt_id=receipt.id,
            comprobante=receipt.comprobante_numero,
            asociado_id=receipt.asociado_id,
            total_bs=str(receipt.monto_total_bs),
        )
        return receipt
