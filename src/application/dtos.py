from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from src.domain.entities import Expense, Invoice, PagoAsociado


@dataclass(frozen=True)
class LedgerEntry:
    date: date
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    source_id: str


@dataclass
class AccountStatement:
    """Estado de cuenta de un asociado (cronológico, con saldo acumulado)."""

    asociado_id: str
    entries: list[LedgerEntry] = field(default_factory=list)
    period_start: Optional[date] = None
    period_end: Optional[date] = None

    @property
    def total_debit(self) -> Decimal:
        return sum((e.debit for e in self.entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((e.credit for e in self.entries), Decimal("0"))

    @property
    def balance(self) -> Decimal:
        return self.entries[-1].balance if self.entries else Decimal("0")

    @property
    def is_filtered(self) -> bool:
        return self.period_start is not None or self.period_end is not None


@dataclass(frozen=True)
class CargoProduction:
    """Resultado del cálculo de producción de carga antes de generar la deuda."""

    invoices: tuple[Invoice, ...]
    total_facturado: Decimal
    deuda: Decimal


@dataclass
class MergePlan:
    """Registros del respaldo que no existen en el estado actual, por colección."""

    new_records: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    @property
    def total_new(self) -> int:
        return sum(len(records) for records in self.new_records.values())

    @property
    def is_empty(self) -> bool:
        return self.total_new == 0

    def counts(self) -> dict[str, int]:
        return {key: len(records) for key, records in self.new_records.items() if records}


@dataclass
class RestoreResult:
    mode: str  # merge | overwrite
    applied: bool = False
    keys_written: list[str] = field(default_factory=list)
    records_added: int = 0


@dataclass
class ConsistencyReport:
    orphan_vehicle_invoices: list[Invoice] = field(default_factory=list)
    orphan_remesa_invoices: list[Invoice] = field(default_factory=list)
    orphan_office_expenses: list[Expense] = field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return (
            len(self.orphan_vehicle_invoices)
            + len(self.orphan_remesa_invoices)
            + len(self.orphan_office_expenses)
        )

    @property
    def is_clean(self) -> bool:
        return self.issue_count == 0


@dataclass
class DebtGenerationResult:
    created: list[PagoAsociado] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.created)

    @property
    def total_bs(self) -> Decimal:
        return sum((d.monto_bs for d in self.created), Decimal("0"))


@dataclass(frozen=True)
class JournalLine:
    account: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class JournalEntry:
    """Asiento contable generado a partir de una factura o un gasto."""

    source_id: str
    date: date
    description: str
    lines: tuple[JournalLine, ...]

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit
