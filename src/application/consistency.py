"""Escaneo bajo demanda de referencias huérfanas entre colecciones.

Las correcciones anulan la referencia colgante; nunca borran en cascada.
"""

from dataclasses import replace
from typing import Iterable

from src.application.dtos import ConsistencyReport
from src.domain.entities import Expense, Invoice, Office, Vehicle


def scan(
    invoices: Iterable[Invoice],
    vehicles: Iterable[Vehicle],
    expenses: Iterable[Expense],
    offices: Iterable[Office],
    remesa_ids: Iterable[str] = (),
) -> ConsistencyReport:
    invoices = list(invoices)
    vehicle_ids = {v.id for v in vehicles}
    office_ids = {o.id for o in offices}
    remesa_ids = set(remesa_ids)

    return ConsistencyReport(
        orphan_vehicle_invoices=[
            inv for inv in invoices if inv.vehicle_id and inv.vehicle_id not in vehicle_ids
        ],
        orphan_remesa_invoices=[
            inv for inv in invoices if inv.remesa_id and inv.remesa_id not in remesa_ids
        ],
        orphan_office_expenses=[
            exp for exp in expenses if exp.office_id and exp.office_id not in office_ids
        ],
    )


def fix_invoices(invoices: Iterable[Invoice], report: ConsistencyReport) -> list[Invoice]:
    """Desasigna vehículo y/o remesa inexistentes de las facturas reportadas."""
    orphan_vehicle = {inv.id for inv in report.orphan_vehicle_invoices}
    orphan_remesa = {inv.id for inv in report.orphan_remesa_invoices}
    fixed = []
    for inv in invoices:
        if inv.id in orphan_vehicle:
            inv = replace(inv, vehicle_id=None)
        if inv.id in orphan_remesa:
            inv = replace(inv, remesa_id=None)
        fixed.append(inv)
    return fixed


def fix_expenses(expenses: Iterable[Expense], report: ConsistencyReport) -> list[Expense]:
    orphan = {exp.id for exp in report.orphan_office_expenses}
    return [replace(exp, office_id=None) if exp.id in orphan else exp for exp in expenses]
