from decimal import Decimal
from typing import Iterable

from src.application.financials import DEFAULT_VOLUMETRIC_DIVISOR, item_billable_weight
from src.domain.entities import InventoryItem, Invoice, ShippingStatus


def derive_inventory_from_invoices(
    invoices: Iterable[Invoice], divisor: Decimal = DEFAULT_VOLUMETRIC_DIVISOR
) -> list[InventoryItem]:
    """Solo la mercancía de facturas activas que aún no han sido entregadas."""
    inventory: list[InventoryItem] = []
    for invoice in invoices:
        if not invoice.is_active or invoice.shipping_status is ShippingStatus.ENTREGADA:
            continue
        for index, item in enumerate(invoice.guide.merchandise):
            inventory.append(
                InventoryItem(
                    id=f"{invoice.id}-{index}",
                    sku=f"SKU-{invoice.id[-4:]}-{index}",
                    name=item.description,
                    description=f"Parte de la factura {invoice.invoice_number}",
                    stock=item.quantity,
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    shipping_status=invoice.shipping_status,
                    weight=item_billable_weight(item, divisor),
                )
            )
    return inventory
