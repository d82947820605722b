"""Fixtures compartidas: fábricas de entidades con valores por defecto razonables."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.application.config import AppConfig, CompanyConfig
from src.domain.entities import (
    Asociado,
    Invoice,
    Merchandise,
    PagoAsociado,
    ReciboPagoAsociado,
    ShippingGuide,
    User,
)


@pytest.fixture
def company():
    return CompanyConfig(name="Cooperativa Test", cost_per_kg=Decimal("5"), bcv_rate=Decimal("40"))


@pytest.fixture
def app_config(company):
    return AppConfig(company=company)


@pytest.fixture
def user():
    return User(id="u-1", name="Operador", username="operador")


@pytest.fixture
def make_guide():
    def _make(**overrides) -> ShippingGuide:
        defaults = {
            "guide_number": "G-001",
            "date": date(2024, 3, 1),
            "merchandise": (Merchandise(quantity=2, weight=Decimal("3"), description="Cajas"),),
        }
        defaults.update(overrides)
        return ShippingGuide(**defaults)

    return _make


@pytest.fixture
def make_invoice(make_guide):
    def _make(**overrides) -> Invoice:
        defaults = {
            "id": "inv-0001",
            "invoice_number": "F-0001",
            "control_number": "00-0001",
            "date": date(2024, 3, 1),
            "client_name": "Juan Pérez",
            "client_id_number": "V-12345678",
            "total_amount": Decimal("100"),
            "guide": make_guide(),
        }
        defaults.update(overrides)
        return Invoice(**defaults)

    return _make


@pytest.fixture
def make_asociado():
    def _make(**overrides) -> Asociado:
        defaults = {
            "id": "as-1",
            "codigo": "A-001",
            "nombre": "Pedro Gómez",
            "cedula": "V-12345678",
        }
        defaults.update(overrides)
        return Asociado(**defaults)

    return _make


@pytest.fixture
def make_debt():
    def _make(**overrides) -> PagoAsociado:
        defaults = {
            "id": "d-1",
            "asociado_id": "as-1",
            "concepto": "Cuota mensual",
            "monto_bs": Decimal("100"),
            "fecha_vencimiento": date(2024, 1, 10),
        }
        defaults.update(overrides)
        return PagoAsociado(**defaults)

    return _make


@pytest.fixture
def make_receipt():
    def _make(**overrides) -> ReciboPagoAsociado:
        defaults = {
            "id": "r-1",
            "comprobante_numero": "C-00000001",
            "asociado_id": "as-1",
            "fecha_pago": date(2024, 1, 20),
            "monto_total_bs": Decimal("100"),
            "tasa_bcv": Decimal("40"),
            "pagos_ids": ("d-1",),
        }
        defaults.update(overrides)
        return ReciboPagoAsociado(**defaults)

    return _make
