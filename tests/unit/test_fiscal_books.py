from datetime import date
from decimal import Decimal

import pytest

from src.application.fiscal_books import (
    COMPRAS_AMOUNTS,
    COMPRAS_COLUMNS,
    VENTAS_AMOUNTS,
    VENTAS_COLUMNS,
    book_totals,
    is_fiscally_relevant,
    libro_de_compras,
    libro_de_ventas,
)
from src.domain.entities import Expense, InvoiceStatus


def _expense(**overrides) -> Expense:
    defaults = {
        "id": "e-1",
        "date": date(2024, 2, 10),
        "description": "Repuestos",
        "category": "Mantenimiento",
        "amount": Decimal("116"),
        "supplier_rif": "J-123",
        "supplier_name": "Repuestos CA",
        "invoice_number": "A-77",
        "control_number": "00-77",
        "taxable_base": Decimal("100"),
        "vat_amount": Decimal("16"),
    }
    defaults.update(overrides)
    return Expense(**defaults)


class TestLibroDeCompras:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"supplier_rif": None},
            {"supplier_rif": "  "},
            {"invoice_number": "N/A"},
            {"invoice_number": ""},
        ],
    )
    def test_not_relevant_without_rif_or_invoice(self, overrides):
        assert not is_fiscally_relevant(_expense(**overrides))

    def test_rows_sorted_by_date(self):
        expenses = [
            _expense(id="e-2", date=date(2024, 2, 20), invoice_number="A-78"),
            _expense(id="e-3", invoice_number="N/A"),
            _expense(id="e-1", date=date(2024, 2, 1)),
        ]
        df = libro_de_compras(expenses)

        assert list(df.columns) == COMPRAS_COLUMNS
        assert list(df["Nº Factura"]) == ["A-77", "A-78"]

    def test_totals_are_exact(self):
        df = libro_de_compras([_expense(), _expense(id="e-2", amount=Decimal("0.10"))])
        totals = book_totals(df, COMPRAS_AMOUNTS)
        assert totals["Total Compra"] == Decimal("116.10")
        assert totals["IVA"] == Decimal("32")

    def test_empty_book(self):
        df = libro_de_compras([])
        assert df.empty
        assert book_totals(df, COMPRAS_AMOUNTS)["IVA"] == Decimal("0")


class TestLibroDeVentas:
    def test_amounts_from_financials(self, make_invoice, company):
        df = libro_de_ventas([make_invoice()], company)

        assert list(df.columns) == VENTAS_COLUMNS
        row = df.iloc[0]
        assert row["Total Venta"] == Decimal("48.8")
        assert row["Base Imponible"] == Decimal("40")
        assert row["IVA"] == Decimal("6.4")
        assert row["IPOSTEL"] == Decimal("2.4")
        assert row["Estado"] == "Activa"

    def test_annulled_invoice_has_zero_amounts(self, make_invoice, company):
        invoices = [
            make_invoice(id="a", date=date(2024, 3, 2)),
            make_invoice(id="b", invoice_number="F-0000", status=InvoiceStatus.ANULADA),
        ]
        df = libro_de_ventas(invoices, company)

        assert list(df["Nº Factura"]) == ["F-0000", "F-0001"]
        assert df.iloc[0]["Estado"] == "Anulada"
        assert book_totals(df.iloc[[0]], VENTAS_AMOUNTS)["Total Venta"] == Decimal("0")
        assert book_totals(df, VENTAS_AMOUNTS)["Total Venta"] == Decimal("48.8")
