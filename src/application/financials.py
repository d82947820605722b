"""Cálculo de peso facturable y de los montos de una guía de envío.

Funciones puras: no leen configuración global ni tocan persistencia, así que
pueden invocarse en cada edición de la guía.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable

from src.application.config import CompanyConfig, RatesConfig
from src.domain.entities import Financials, Invoice, Merchandise, ShippingGuide
from src.domain.value_objects import USD

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_VOLUMETRIC_DIVISOR = Decimal("5000")


def volumetric_weight(item: Merchandise, divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR) -> Decimal:
    """Peso volumétrico por unidad: largo × ancho × alto (cm) / divisor."""
    return (item.length * item.width * item.height) / divisor


def item_billable_weight(item: Merchandise, divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR) -> Decimal:
    return max(item.weight, volumetric_weight(item, divisor)) * item.quantity


def billable_weight(
    items: Iterable[Merchandise], divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR
) -> Decimal:
    """Σ max(peso real, peso volumétrico) × cantidad."""
    return sum((item_billable_weight(item, divisor) for item in items), ZERO)


def declared_value(
    items: Iterable[Merchandise],
    cost_per_kg: Decimal,
    divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR,
) -> Decimal:
    return billable_weight(items, divisor) * cost_per_kg


def with_merchandise(
    guide: ShippingGuide,
    items: Iterable[Merchandise],
    cost_per_kg: Decimal,
    divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR,
) -> ShippingGuide:
    """Retorna copia de la guía con la mercancía nueva y el valor declarado recalculado."""
    items = tuple(items)
    return replace(
        guide,
        merchandise=items,
        declared_value=declared_value(items, cost_per_kg, divisor),
    )


def calculate_financial_details(
    guide: ShippingGuide,
    company: CompanyConfig,
    rates: RatesConfig | None = None,
) -> Financials:
    """Deriva flete, seguro, manejo, descuento, impuestos y total de una guía."""
    rates = rates or RatesConfig()
    if not guide.merchandise:
        return Financials()

    total_weight = billable_weight(guide.merchandise, rates.volumetric_divisor)
    freight = total_weight * company.cost_per_kg

    insurance_cost = (
        guide.declared_value * guide.insurance_percentage / HUNDRED
        if guide.has_insurance
        else ZERO
    )
    handling = company.handling_fee if total_weight > 0 else ZERO

    gross = freight + insurance_cost + handling
    discount = gross * guide.discount_percentage / HUNDRED if guide.has_discount else ZERO
    subtotal = gross - discount

    ipostel = subtotal * rates.ipostel_rate
    iva = subtotal * rates.iva_rate
    # IGTF solo aplica a pagos en divisas
    igtf = (subtotal + ipostel + iva) * rates.igtf_rate if guide.payment_currency == USD else ZERO

    return Financials(
        freight=freight,
        insurance_cost=insurance_cost,
        handling=handling,
        discount=discount,
        subtotal=subtotal,
        ipostel=ipostel,
        iva=iva,
        igtf=igtf,
        total=subtotal + ipostel + iva + igtf,
    )


def invoice_chargeable_weight(
    invoice: Invoice, divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR
) -> Decimal:
    """Peso facturable total de la guía asociada a una factura."""
    return billable_weight(invoice.guide.merchandise, divisor)
