from datetime import date
from decimal import Decimal

from src.application.ledger import build_statement, is_overdue, pending_debts, total_pending
from src.domain.entities import DebtStatus


class TestBuildStatement:
    def test_full_payment_leaves_zero_balance(self, make_debt, make_receipt):
        debts = [
            make_debt(id="d-1", monto_bs=Decimal("100"), fecha_vencimiento=date(2024, 1, 5)),
            make_debt(id="d-2", monto_bs=Decimal("50"), fecha_vencimiento=date(2024, 1, 15)),
        ]
        receipts = [make_receipt(monto_total_bs=Decimal("150"), pagos_ids=("d-1", "d-2"))]

        statement = build_statement("as-1", debts, receipts)

        assert [e.balance for e in statement.entries] == [
            Decimal("100"),
            Decimal("150"),
            Decimal("0"),
        ]
        assert statement.balance == Decimal("0")
        assert statement.total_debit == Decimal("150")
        assert statement.total_credit == Decimal("150")

    def test_partial_payment_leaves_remaining_debt(self, make_debt, make_receipt):
        debts = [
            make_debt(id="d-1", monto_bs=Decimal("100")),
            make_debt(id="d-2", monto_bs=Decimal("50")),
        ]
        receipts = [make_receipt(monto_total_bs=Decimal("100"), pagos_ids=("d-1",))]

        assert build_statement("as-1", debts, receipts).balance == Decimal("50")

    def test_chronological_order_and_descriptions(self, make_debt, make_receipt):
        debts = [make_debt(id="d-2", fecha_vencimiento=date(2024, 2, 1), concepto="Febrero")]
        receipts = [make_receipt(fecha_pago=date(2024, 1, 20), comprobante_numero="C-00000007")]
        debts.append(make_debt(id="d-1", fecha_vencimiento=date(2024, 1, 1), concepto="Enero"))

        entries = build_statement("as-1", debts, receipts).entries

        assert [e.description for e in entries] == [
            "Enero",
            "Recibo de Pago #C-00000007",
            "Febrero",
        ]
        assert entries[1].credit == Decimal("100")
        assert entries[1].debit == Decimal("0")

    def test_same_day_debt_before_receipt(self, make_debt, make_receipt):
        same_day = date(2024, 1, 10)
        statement = build_statement(
            "as-1",
            [make_debt(fecha_vencimiento=same_day)],
            [make_receipt(fecha_pago=same_day)],
        )
        assert [e.source_id for e in statement.entries] == ["d-1", "r-1"]
        assert statement.entries[0].balance == Decimal("100")

    def test_ignores_other_asociados(self, make_debt, make_receipt):
        statement = build_statement(
            "as-1",
            [make_debt(asociado_id="as-2")],
            [make_receipt(asociado_id="as-2")],
        )
        assert statement.entries == []
        assert statement.balance == Decimal("0")

    def test_date_filter_is_inclusive(self, make_debt):
        debts = [
            make_debt(id="d-1", fecha_vencimiento=date(2024, 1, 1)),
            make_debt(id="d-2", fecha_vencimiento=date(2024, 1, 10)),
            make_debt(id="d-3", fecha_vencimiento=date(2024, 1, 20)),
            make_debt(id="d-4", fecha_vencimiento=date(2024, 1, 21)),
        ]
        statement = build_statement(
            "as-1", debts, [], start=date(2024, 1, 10), end=date(2024, 1, 20)
        )
        assert [e.source_id for e in statement.entries] == ["d-2", "d-3"]
        assert statement.is_filtered

    def test_filtered_balance_starts_at_zero(self, make_debt, make_receipt):
        debts = [
            make_debt(id="d-1", fecha_vencimiento=date(2023, 12, 1), monto_bs=Decimal("500")),
            make_debt(id="d-2", fecha_vencimiento=date(2024, 1, 10), monto_bs=Decimal("80")),
        ]
        receipts = [make_receipt(fecha_pago=date(2024, 1, 15), monto_total_bs=Decimal("30"))]

        statement = build_statement("as-1", debts, receipts, start=date(2024, 1, 1))

        assert [e.balance for e in statement.entries] == [Decimal("80"), Decimal("50")]

    def test_filtered_window_equals_filtering_full_transactions(self, make_debt, make_receipt):
        debts = [
            make_debt(id=f"d-{day}", fecha_vencimiento=date(2024, 1, day), monto_bs=Decimal(day))
            for day in (2, 9, 16, 23, 30)
        ]
        receipts = [
            make_receipt(id=f"r-{day}", fecha_pago=date(2024, 1, day), monto_total_bs=Decimal("5"))
            for day in (5, 16, 28)
        ]
        start, end = date(2024, 1, 9), date(2024, 1, 28)

        full = build_statement("as-1", debts, receipts)
        windowed = build_statement("as-1", debts, receipts, start=start, end=end)

        expected_ids = [e.source_id for e in full.entries if start <= e.date <= end]
        assert [e.source_id for e in windowed.entries] == expected_ids
        assert windowed.balance == windowed.total_debit - windowed.total_credit


class TestPendingDebts:
    def test_pending_sorted_by_due_date(self, make_debt):
        debts = [
            make_debt(id="d-2", fecha_vencimiento=date(2024, 2, 1)),
            make_debt(id="d-1", fecha_vencimiento=date(2024, 1, 1)),
            make_debt(id="d-3", status=DebtStatus.PAGADO, recibo_id="r-1"),
            make_debt(id="d-4", asociado_id="as-2"),
        ]
        assert [d.id for d in pending_debts(debts, "as-1")] == ["d-1", "d-2"]

    def test_total_pending(self, make_debt):
        debts = [
            make_debt(id="d-1", monto_bs=Decimal("100")),
            make_debt(id="d-2", monto_bs=Decimal("25.50")),
            make_debt(id="d-3", monto_bs=Decimal("70"), status=DebtStatus.PAGADO),
        ]
        assert total_pending(debts, "as-1") == Decimal("125.50")

    def test_is_overdue(self, make_debt):
        debt = make_debt(fecha_vencimiento=date(2024, 1, 10))
        assert is_overdue(debt, date(2024, 1, 11))
        assert not is_overdue(debt, date(2024, 1, 10))
        assert not is_overdue(make_debt(status=DebtStatus.PAGADO), date(2030, 1, 1))
