"""Cableado de repositorios por colección sobre un único almacén."""

from dataclasses import dataclass

from src.application.ports.key_value_store import KeyValueStore
from src.application.record_mapper import RecordMapper
from src.infrastructure.json_repository import JsonCollectionRepository


@dataclass(frozen=True)
class Repositories:
    invoices: JsonCollectionRepository
    asociados: JsonCollectionRepository
    debts: JsonCollectionRepository
    receipts: JsonCollectionRepository
    expenses: JsonCollectionRepository
    offices: JsonCollectionRepository
    vehicles: JsonCollectionRepository
    audit_log: JsonCollectionRepository


def build_repositories(store: KeyValueStore, mapper: RecordMapper | None = None) -> Repositories:
    m = mapper or RecordMapper()
    return Repositories(
        invoices=JsonCollectionRepository(
            store, "invoices", m.invoice_to_record, m.invoice_from_record
        ),
        asociados=JsonCollectionRepository(
            store, "asociados", m.asociado_to_record, m.asociado_from_record
        ),
        debts=JsonCollectionRepository(
            store, "pagosAsociados", m.pago_to_record, m.pago_from_record
        ),
        receipts=JsonCollectionRepository(
            store, "recibosPagoAsociados", m.recibo_to_record, m.recibo_from_record
        ),
        expenses=JsonCollectionRepository(
            store, "expenses", m.expense_to_record, m.expense_from_record
        ),
        offices=JsonCollectionRepository(
            store, "offices", m.office_to_record, m.office_from_record
        ),
        vehicles=JsonCollectionRepository(
            store, "vehicles", m.vehicle_to_record, m.vehicle_from_record
        ),
        audit_log=JsonCollectionRepository(
            store, "auditLog", m.audit_log_to_record, m.audit_log_from_record
        ),
    )
