"""Generación y eliminación de deudas de asociados."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import structlog

from src.application.audit import ELIMINAR_DEUDA, GENERAR_DEUDA
from src.application.config import AppConfig
from src.application.debts import (
    APPLY_TO_ACTIVE,
    bulk_debts,
    cargo_production_debt,
    manual_debt,
    new_id,
    passenger_production_debt,
)
from src.application.dtos import DebtGenerationResult
from src.application.ports.audit import AuditRecorder
from src.application.ports.repository import CollectionRepository
from src.application.receipts import find_receipt_for_debt
from src.domain.entities import Asociado, Invoice, PagoAsociado, ReciboPagoAsociado, User
from src.domain.exceptions import DebtInUseError

logger = structlog.get_logger()


@dataclass(frozen=True)
class GenerateDebtsUseCase:
    debts: CollectionRepository[PagoAsociado]
    receipts: CollectionRepository[ReciboPagoAsociado]
    asociados: CollectionRepository[Asociado]
    invoices: CollectionRepository[Invoice]
    audit: AuditRecorder
    config: AppConfig
    id_factory: Callable[[], str] = new_id

    def manual(
        self,
        asociado_id: str,
        concepto: str,
        monto_bs: Decimal,
        fecha_vencimiento: date,
        user: User,
        cuotas: str = "",
        monto_usd: Optional[Decimal] = None,
    ) -> DebtGenerationResult:
        asociado = self.asociados.get(asociado_id)
        debt = manual_debt(
            asociado.id,
            concepto,
            monto_bs,
            fecha_vencimiento,
            cuotas=cuotas,
            monto_usd=monto_usd,
            id_factory=self.id_factory,
        )
        return self._persist([debt], user, f"Deuda '{debt.concepto}' para {asociado.nombre}")

    def bulk(
        self,
        concepto: str,
        monto_bs: Decimal,
        fecha_vencimiento: date,
        user: User,
        cuotas: str = "",
        monto_usd: Optional[Decimal] = None,
        apply_to: str = APPLY_TO_ACTIVE,
    ) -> DebtGenerationResult:
        created = bulk_debts(
            self.asociados.list_all(),
            concepto,
            monto_bs,
            fecha_vencimiento,
            cuotas=cuotas,
            monto_usd=monto_usd,
            apply_to=apply_to,
            id_factory=self.id_factory,
        )
        return self._persist(
            created, user, f"Deuda masiva '{concepto}' para {len(created)} asociados ({apply_to})"
        )

    def passenger_production(
        self,
        asociado_id: str,
        tarifa: str,
        today: date,
        user: User,
        bcv_rate: Optional[Decimal] = None,
    ) -> DebtGenerationResult:
        asociado = self.asociados.get(asociado_id)
        debt = passenger_production_debt(
            asociado,
            tarifa,
            bcv_rate if bcv_rate is not None else self.config.company.bcv_rate,
            today,
            config=self.config.production,
            id_factory=self.id_factory,
        )
        return self._persist([debt], user, f"{debt.concepto} para {asociado.nombre}")

    def cargo_production(
        self,
        asociado_id: str,
        start: date,
        end: date,
        today: date,
        user: User,
        bcv_rate: Optional[Decimal] = None,
    ) -> DebtGenerationResult:
        asociado = self.asociados.get(asociado_id)
        debt = cargo_production_debt(
            asociado,
            self.invoices.list_all(),
            start,
            end,
            bcv_rate if bcv_rate is not None else self.config.company.bcv_rate,
            today,
            config=self.config.production,
            id_factory=self.id_factory,
        )
        return self._persist([debt], user, f"{debt.concepto} para {asociado.nombre}")

    def delete(self, debt_id: str, user: User) -> None:
        """Elimina una deuda; prohibido si algún recibo la referencia."""
        debt = self.debts.get(debt_id)
        receipt = find_receipt_for_debt(self.receipts.list_all(), debt_id)
        if receipt is not None:
            raise DebtInUseError(debt_id, receipt.id)
        if debt.recibo_id:
            raise DebtInUseError(debt_id, debt.recibo_id)

        self.debts.delete(debt_id)
        self.audit.log_action(
            user, ELIMINAR_DEUDA, f"Deuda '{debt.concepto}' eliminada", target_id=debt_id
        )
        logger.info("debt_deleted", debt_id=debt_id, asociado_id=debt.asociado_id)

    def _persist(
        self, created: list[PagoAsociado], user: User, details: str
    ) -> DebtGenerationResult:
        self.debts.save_all([*self.debts.list_all(), *created])
        result = DebtGenerationResult(created=created)
        target_id = created[0].asociado_id if len(created) == 1 else None
        self.audit.log_action(user, GENERAR_DEUDA, details, target_id=target_id)
        logger.info("debts_generated", count=result.count, total_bs=str(result.total_bs))
        return result
