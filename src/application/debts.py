"""Generación de deudas de asociados: manual, masiva y por producción."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional

from src.application.config import ProductionConfig
from src.application.dtos import CargoProduction
from src.domain.entities import Asociado, AsociadoStatus, Invoice, PagoAsociado
from src.domain.exceptions import ValidationError
from src.domain.value_objects import USD, VES, Money

IdFactory = Callable[[], str]

APPLY_TO_ACTIVE = "Activo"
APPLY_TO_ALL = "Todos"

TARIFA_DIVISA = "divisa"
TARIFA_BS = "bs"


def new_id() -> str:
    return str(uuid.uuid4())


def bs_to_usd(monto_bs: Decimal, bcv_rate: Decimal) -> Decimal:
    _require_rate(bcv_rate)
    return Money(monto_bs, VES).convert(bcv_rate).amount


def usd_to_bs(monto_usd: Decimal, bcv_rate: Decimal) -> Decimal:
    _require_rate(bcv_rate)
    return Money(monto_usd, USD).convert(bcv_rate).amount


def _require_rate(bcv_rate: Decimal) -> None:
    if bcv_rate <= 0:
        raise ValidationError("invalid_rate", f"La tasa BCV debe ser positiva: {bcv_rate}")


def _require_debt_fields(concepto: str, monto_bs: Decimal) -> None:
    if not concepto or not concepto.strip():
        raise ValidationError("missing_field", "El concepto de la deuda es requerido")
    if monto_bs <= 0:
        raise ValidationError("invalid_amount", f"El importe debe ser mayor a cero: {monto_bs}")


def manual_debt(
    asociado_id: str,
    concepto: str,
    monto_bs: Decimal,
    fecha_vencimiento: date,
    cuotas: str = "",
    monto_usd: Optional[Decimal] = None,
    id_factory: IdFactory = new_id,
) -> PagoAsociado:
    _require_debt_fields(concepto, monto_bs)
    return PagoAsociado(
        id=id_factory(),
        asociado_id=asociado_id,
        concepto=concepto.strip(),
        cuotas=cuotas,
        monto_bs=monto_bs,
        monto_usd=monto_usd,
        fecha_vencimiento=fecha_vencimiento,
    )


def bulk_debts(
    asociados: Iterable[Asociado],
    concepto: str,
    monto_bs: Decimal,
    fecha_vencimiento: date,
    cuotas: str = "",
    monto_usd: Optional[Decimal] = None,
    apply_to: str = APPLY_TO_ACTIVE,
    id_factory: IdFactory = new_id,
) -> list[PagoAsociado]:
    """Misma deuda para todos los asociados o solo para los activos."""
    _require_debt_fields(concepto, monto_bs)
    if apply_to not in (APPLY_TO_ACTIVE, APPLY_TO_ALL):
        raise ValidationError("invalid_target", f"Destino de deuda masiva inválido: {apply_to}")

    recipients = [
        a for a in asociados if apply_to == APPLY_TO_ALL or a.status is AsociadoStatus.ACTIVO
    ]
    if not recipients:
        raise ValidationError("empty_recipients", "No hay asociados a los cuales generar la deuda")

    return [
        manual_debt(
            asociado_id=a.id,
            concepto=concepto,
            monto_bs=monto_bs,
            fecha_vencimiento=fecha_vencimiento,
            cuotas=cuotas,
            monto_usd=monto_usd,
            id_factory=id_factory,
        )
        for a in recipients
    ]


def passenger_production_debt(
    asociado: Asociado,
    tarifa: str,
    bcv_rate: Decimal,
    today: date,
    config: ProductionConfig | None = None,
    id_factory: IdFactory = new_id,
) -> PagoAsociado:
    """Tarifa fija en USD (pago en divisa física o equivalente en Bs.) × tasa BCV."""
    config = config or ProductionConfig()
    tariffs = {
        TARIFA_DIVISA: config.passenger_tariff_divisa_usd,
        TARIFA_BS: config.passenger_tariff_bs_usd,
    }
    if tarifa not in tariffs:
        raise ValidationError("invalid_tariff", f"Tarifa de pasajeros desconocida: {tarifa}")
    _require_rate(bcv_rate)

    tariff_usd = tariffs[tarifa]
    return PagoAsociado(
        id=id_factory(),
        asociado_id=asociado.id,
        concepto=f"Producción de Pasajeros (Tarifa ${tariff_usd:.0f})",
        cuotas="Única",
        monto_bs=tariff_usd * bcv_rate,
        monto_usd=tariff_usd,
        fecha_vencimiento=today,
    )


def calculate_cargo_production(
    asociado: Asociado,
    invoices: Iterable[Invoice],
    start: date,
    end: date,
    config: ProductionConfig | None = None,
) -> CargoProduction:
    """
    Suma los totales de las facturas activas del asociado (cédula = documento
    del cliente) emitidas en ``[start, end]`` y aplica la cuota de carga.
    """
    config = config or ProductionConfig()
    if start > end:
        raise ValidationError("invalid_range", f"Rango de fechas inválido: {start} > {end}")

    relevant = tuple(
        inv
        for inv in invoices
        if inv.is_active
        and inv.client_id_number.strip() == asociado.cedula.strip()
        and start <= inv.date <= end
    )
    total = sum((inv.total_amount for inv in relevant), Decimal("0"))
    return CargoProduction(invoices=relevant, total_facturado=total, deuda=total * config.cargo_share)


def cargo_production_debt(
    asociado: Asociado,
    invoices: Iterable[Invoice],
    start: date,
    end: date,
    bcv_rate: Decimal,
    today: date,
    config: ProductionConfig | None = None,
    id_factory: IdFactory = new_id,
) -> PagoAsociado:
    calculation = calculate_cargo_production(asociado, invoices, start, end, config)
    if calculation.deuda <= 0:
        raise ValidationError(
            "no_production",
            f"No hay producción de carga para {asociado.nombre} entre {start} y {end}",
        )
    return PagoAsociado(
        id=id_factory(),
        asociado_id=asociado.id,
        concepto=f"Producción de Carga Semanal ({start.isoformat()} al {end.isoformat()})",
        cuotas="Única",
        monto_bs=calculation.deuda,
        monto_usd=bs_to_usd(calculation.deuda, bcv_rate),
        fecha_vencimiento=today,
    )
