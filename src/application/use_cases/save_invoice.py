"""Guarda una factura recalculando valor declarado y total desde su guía."""

from dataclasses import dataclass, replace

import structlog

from src.application.audit import GUARDAR_FACTURA
from src.application.config import AppConfig
from src.application.financials import calculate_financial_details, with_merchandise
from src.application.ports.audit import AuditRecorder
from src.application.ports.repository import CollectionRepository
from src.domain.entities import Invoice, User

logger = structlog.get_logger()


@dataclass(frozen=True)
class SaveInvoiceUseCase:
    invoices: CollectionRepository[Invoice]
    audit: AuditRecorder
    config: AppConfig

    def execute(self, invoice: Invoice, user: User) -> Invoice:
        guide = with_merchandise(
            invoice.guide,
            invoice.guide.merchandise,
            self.config.company.cost_per_kg,
            self.config.rates.volumetric_divisor,
        )
        financials = calculate_financial_details(guide, self.config.company, self.config.rates)
        saved = replace(invoice, guide=guide, total_amount=financials.total)

        self.invoices.upsert(saved)
        self.audit.log_action(
            user,
            GUARDAR_FACTURA,
            f"Factura {saved.invoice_number} guardada por {saved.total_amount} Bs.",
            target_id=saved.id,
        )
        logger.info(
            "invoice_saved",
            invoice_id=saved.id,
            invoice_number=saved.invoice_number,
            total=str(saved.total_amount),
        )
        return saved
