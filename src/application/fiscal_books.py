"""Libros fiscales (formato SENIAT) como DataFrames: Libro de Compras y de Ventas."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import pandas as pd
import structlog

from src.application.config import CompanyConfig, RatesConfig
from src.application.financials import calculate_financial_details
from src.domain.entities import Expense, Invoice

logger = structlog.get_logger()

ZERO = Decimal("0")

COMPRAS_COLUMNS = [
    "Fecha",
    "Nº Factura",
    "Nº Control",
    "Proveedor",
    "RIF Proveedor",
    "Total Compra",
    "Base Imponible",
    "IVA",
]
COMPRAS_AMOUNTS = ["Total Compra", "Base Imponible", "IVA"]

VENTAS_COLUMNS = [
    "Fecha",
    "Nº Factura",
    "Nº Control",
    "Cliente",
    "RIF Cliente",
    "Estado",
    "Total Venta",
    "Base Imponible",
    "IVA",
    "IPOSTEL",
]
VENTAS_AMOUNTS = ["Total Venta", "Base Imponible", "IVA", "IPOSTEL"]


def _has_value(value: str | None) -> bool:
    if not value:
        return False
    cleaned = value.strip()
    return cleaned != "" and cleaned.upper() != "N/A"


def is_fiscally_relevant(expense: Expense) -> bool:
    """Un gasto entra al libro solo con RIF de proveedor y número de factura reales."""
    return _has_value(expense.supplier_rif) and _has_value(expense.invoice_number)


def libro_de_compras(expenses: Iterable[Expense]) -> pd.DataFrame:
    rows = [
        {
            "Fecha": exp.date,
            "Nº Factura": exp.invoice_number,
            "Nº Control": exp.control_number or "",
            "Proveedor": exp.supplier_name or "",
            "RIF Proveedor": exp.supplier_rif,
            "Total Compra": exp.amount or ZERO,
            "Base Imponible": exp.taxable_base or ZERO,
            "IVA": exp.vat_amount or ZERO,
        }
        for exp in expenses
        if is_fiscally_relevant(exp)
    ]
    df = pd.DataFrame(rows, columns=COMPRAS_COLUMNS)
    df = df.sort_values("Fecha", kind="stable").reset_index(drop=True)
    logger.info("libro_compras_built", rows=len(df))
    return df


def libro_de_ventas(
    invoices: Iterable[Invoice],
    company: CompanyConfig,
    rates: RatesConfig | None = None,
) -> pd.DataFrame:
    """Facturas por fecha; las anuladas figuran con montos en cero."""
    rows = []
    for inv in invoices:
        base = {
            "Fecha": inv.date,
            "Nº Factura": inv.invoice_number,
            "Nº Control": inv.control_number,
            "Cliente": inv.client_name,
            "RIF Cliente": inv.client_id_number,
            "Estado": inv.status.value,
        }
        if inv.is_active:
            financials = calculate_financial_details(inv.guide, company, rates)
            amounts = {
                "Total Venta": financials.total,
                "Base Imponible": financials.subtotal,
                "IVA": financials.iva,
                "IPOSTEL": financials.ipostel,
            }
        else:
            amounts = dict.fromkeys(VENTAS_AMOUNTS, ZERO)
        rows.append({**base, **amounts})

    df = pd.DataFrame(rows, columns=VENTAS_COLUMNS)
    df = df.sort_values("Fecha", kind="stable").reset_index(drop=True)
    logger.info("libro_ventas_built", rows=len(df))
    return df


def book_totals(df: pd.DataFrame, columns: Iterable[str]) -> dict[str, Decimal]:
    """Totales exactos (Decimal) de las columnas de montos de un libro."""
    return {col: sum(df[col], ZERO) for col in columns}
