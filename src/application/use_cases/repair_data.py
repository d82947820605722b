from dataclasses import dataclass

import structlog

from src.application import consistency
from src.application.audit import CORREGIR_DATOS
from src.application.dtos import ConsistencyReport
from src.application.ports.audit import AuditRecorder
from src.application.ports.key_value_store import KeyValueStore
from src.application.ports.repository import CollectionRepository
from src.domain.entities import Expense, Invoice, Office, User, Vehicle

logger = structlog.get_logger()


@dataclass(frozen=True)
class RepairDataUseCase:
    invoices: CollectionRepository[Invoice]
    vehicles: CollectionRepository[Vehicle]
    expenses: CollectionRepository[Expense]
    offices: CollectionRepository[Office]
    store: KeyValueStore
    audit: AuditRecorder

    def scan(self) -> ConsistencyReport:
        remesas = self.store.get("remesas") or []
        report = consistency.scan(
            self.invoices.list_all(),
            self.vehicles.list_all(),
            self.expenses.list_all(),
            self.offices.list_all(),
            remesa_ids=[r["id"] for r in remesas if isinstance(r, dict) and r.get("id")],
        )
        logger.info("consistency_scanned", issues=report.issue_count)
        return report

    def repair(self, user: User) -> ConsistencyReport:
        """Anula las referencias colgantes encontradas y retorna el reporte previo."""
        report = self.scan()
        if report.is_clean:
            return report

        if report.orphan_vehicle_invoices or report.orphan_remesa_invoices:
            self.invoices.save_all(consistency.fix_invoices(self.invoices.list_all(), report))
        if report.orphan_office_expenses:
            self.expenses.save_all(consistency.fix_expenses(self.expenses.list_all(), report))

        self.audit.log_action(
            user,
            CORREGIR_DATOS,
            f"Se corrigieron {report.issue_count} referencias huérfanas",
        )
        logger.info("consistency_repaired", issues=report.issue_count)
        return report
