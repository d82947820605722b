from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from src.application.config import ProductionConfig
from src.application.debts import (
    APPLY_TO_ALL,
    TARIFA_BS,
    TARIFA_DIVISA,
    bs_to_usd,
    bulk_debts,
    calculate_cargo_production,
    cargo_production_debt,
    manual_debt,
    passenger_production_debt,
    usd_to_bs,
)
from src.domain.entities import AsociadoStatus, DebtStatus, InvoiceStatus
from src.domain.exceptions import ValidationError

TODAY = date(2024, 3, 8)


@pytest.fixture
def ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


class TestConversion:
    def test_bs_to_usd_rounds_to_cents(self):
        assert bs_to_usd(Decimal("100"), Decimal("36.5")) == Decimal("2.74")

    def test_usd_to_bs(self):
        assert usd_to_bs(Decimal("50"), Decimal("36.5")) == Decimal("1825.00")

    @pytest.mark.parametrize("rate", [Decimal("0"), Decimal("-1")])
    def test_invalid_rate(self, rate):
        with pytest.raises(ValidationError) as exc:
            bs_to_usd(Decimal("100"), rate)
        assert exc.value.code == "invalid_rate"


class TestManualDebt:
    def test_creates_pending_debt(self, ids):
        debt = manual_debt(
            "as-1", " Cuota ", Decimal("120"), date(2024, 4, 1), cuotas="1/3", id_factory=ids
        )
        assert debt.id == "id-1"
        assert debt.concepto == "Cuota"
        assert debt.status is DebtStatus.PENDIENTE
        assert debt.recibo_id is None

    def test_missing_concepto(self):
        with pytest.raises(ValidationError) as exc:
            manual_debt("as-1", "  ", Decimal("10"), TODAY)
        assert exc.value.code == "missing_field"

    @pytest.mark.parametrize("monto", [Decimal("0"), Decimal("-5")])
    def test_non_positive_amount(self, monto):
        with pytest.raises(ValidationError) as exc:
            manual_debt("as-1", "Cuota", monto, TODAY)
        assert exc.value.code == "invalid_amount"


class TestBulkDebts:
    @pytest.fixture
    def asociados(self, make_asociado):
        return [
            make_asociado(id="as-1"),
            make_asociado(id="as-2", status=AsociadoStatus.INACTIVO),
            make_asociado(id="as-3"),
            make_asociado(id="as-4", status=AsociadoStatus.SUSPENDIDO),
        ]

    def test_active_only_by_default(self, asociados, ids):
        debts = bulk_debts(asociados, "Seguro", Decimal("30"), TODAY, id_factory=ids)
        assert [d.asociado_id for d in debts] == ["as-1", "as-3"]
        assert len({d.id for d in debts}) == 2

    def test_all_asociados(self, asociados, ids):
        debts = bulk_debts(
            asociados, "Seguro", Decimal("30"), TODAY, apply_to=APPLY_TO_ALL, id_factory=ids
        )
        assert len(debts) == 4
        assert all(d.monto_bs == Decimal("30") for d in debts)

    def test_no_recipients(self, make_asociado):
        inactive = [make_asociado(status=AsociadoStatus.INACTIVO)]
        with pytest.raises(ValidationError) as exc:
            bulk_debts(inactive, "Seguro", Decimal("30"), TODAY)
        assert exc.value.code == "empty_recipients"

    def test_invalid_target(self, asociados):
        with pytest.raises(ValidationError) as exc:
            bulk_debts(asociados, "Seguro", Decimal("30"), TODAY, apply_to="Algunos")
        assert exc.value.code == "invalid_target"


class TestPassengerProduction:
    def test_divisa_tariff(self, make_asociado, ids):
        debt = passenger_production_debt(
            make_asociado(), TARIFA_DIVISA, Decimal("40"), TODAY, id_factory=ids
        )
        assert debt.monto_usd == Decimal("50")
        assert debt.monto_bs == Decimal("2000")
        assert debt.concepto == "Producción de Pasajeros (Tarifa $50)"
        assert debt.fecha_vencimiento == TODAY
        assert debt.cuotas == "Única"

    def test_bs_tariff(self, make_asociado):
        debt = passenger_production_debt(make_asociado(), TARIFA_BS, Decimal("40"), TODAY)
        assert debt.monto_bs == Decimal("2800")
        assert debt.concepto == "Producción de Pasajeros (Tarifa $70)"

    def test_configured_tariff(self, make_asociado):
        config = ProductionConfig(passenger_tariff_divisa_usd=Decimal("55"))
        debt = passenger_production_debt(
            make_asociado(), TARIFA_DIVISA, Decimal("2"), TODAY, config=config
        )
        assert debt.monto_bs == Decimal("110")

    def test_unknown_tariff(self, make_asociado):
        with pytest.raises(ValidationError) as exc:
            passenger_production_debt(make_asociado(), "euros", Decimal("40"), TODAY)
        assert exc.value.code == "invalid_tariff"


class TestCargoProduction:
    @pytest.fixture
    def invoices(self, make_invoice):
        return [
            make_invoice(id="i-1", date=date(2024, 3, 1), total_amount=Decimal("400")),
            make_invoice(id="i-2", date=date(2024, 3, 7), total_amount=Decimal("200")),
            make_invoice(id="i-3", date=date(2024, 3, 8), total_amount=Decimal("999")),
            make_invoice(
                id="i-4",
                date=date(2024, 3, 2),
                total_amount=Decimal("300"),
                status=InvoiceStatus.ANULADA,
            ),
            make_invoice(
                id="i-5",
                date=date(2024, 3, 2),
                total_amount=Decimal("700"),
                client_id_number="V-99999999",
            ),
        ]

    def test_sums_active_invoices_in_range_for_asociado(self, make_asociado, invoices):
        result = calculate_cargo_production(
            make_asociado(), invoices, date(2024, 3, 1), date(2024, 3, 7)
        )
        assert [inv.id for inv in result.invoices] == ["i-1", "i-2"]
        assert result.total_facturado == Decimal("600")
        assert result.deuda == Decimal("150")

    def test_creates_debt(self, make_asociado, invoices, ids):
        debt = cargo_production_debt(
            make_asociado(),
            invoices,
            date(2024, 3, 1),
            date(2024, 3, 7),
            Decimal("40"),
            TODAY,
            id_factory=ids,
        )
        assert debt.monto_bs == Decimal("150")
        assert debt.monto_usd == Decimal("3.75")
        assert debt.concepto == "Producción de Carga Semanal (2024-03-01 al 2024-03-07)"

    def test_no_production(self, make_asociado, invoices):
        with pytest.raises(ValidationError) as exc:
            cargo_production_debt(
                make_asociado(),
                invoices,
                date(2024, 4, 1),
                date(2024, 4, 7),
                Decimal("40"),
                TODAY,
            )
        assert exc.value.code == "no_production"

    def test_inverted_range(self, make_asociado, invoices):
        with pytest.raises(ValidationError) as exc:
            calculate_cargo_production(
                make_asociado(), invoices, date(2024, 3, 7), date(2024, 3, 1)
            )
        assert exc.value.code == "invalid_range"
