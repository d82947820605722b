"""Fixtures de integración: almacén SQLite real en tmp_path y casos de uso cableados.

Componentes reales: SqliteKeyValueStore, JsonCollectionRepository, RecordMapper, AuditTrail.
La confirmación interactiva del operador se simula en cada prueba de respaldo.
"""

from itertools import count

import pytest

from src.application.audit import AuditTrail
from src.application.use_cases.generate_debts import GenerateDebtsUseCase
from src.application.use_cases.register_payment import RegisterPaymentUseCase
from src.application.use_cases.repair_data import RepairDataUseCase
from src.application.use_cases.save_invoice import SaveInvoiceUseCase
from src.infrastructure.repositories import build_repositories
from src.infrastructure.sqlite_store import SqliteKeyValueStore


@pytest.fixture
def store(tmp_path):
    s = SqliteKeyValueStore(db_path=str(tmp_path / "cooperativa.db"))
    s.set_many({"companyInfo": {"name": "Cooperativa Test"}, "users": [{"id": "u-1"}]})
    yield s
    s.close()


@pytest.fixture
def repos(store):
    return build_repositories(store)


@pytest.fixture
def id_factory():
    counter = count(1)
    return lambda: f"id-{next(counter):04d}"


@pytest.fixture
def audit_trail(repos, id_factory):
    return AuditTrail(repos.audit_log, id_factory=id_factory)


@pytest.fixture
def generate_debts(repos, audit_trail, app_config, id_factory):
    return GenerateDebtsUseCase(
        debts=repos.debts,
        receipts=repos.receipts,
        asociados=repos.asociados,
        invoices=repos.invoices,
        audit=audit_trail,
        config=app_config,
        id_factory=id_factory,
    )


@pytest.fixture
def register_payment(repos, store, audit_trail, id_factory):
    return RegisterPaymentUseCase(
        debts=repos.debts,
        receipts=repos.receipts,
        audit=audit_trail,
        store=store,
        id_factory=id_factory,
    )


@pytest.fixture
def save_invoice(repos, audit_trail, app_config):
    return SaveInvoiceUseCase(invoices=repos.invoices, audit=audit_trail, config=app_config)


@pytest.fixture
def repair_data(repos, store, audit_trail):
    return RepairDataUseCase(
        invoices=repos.invoices,
        vehicles=repos.vehicles,
        expenses=repos.expenses,
        offices=repos.offices,
        store=store,
        audit=audit_trail,
    )
