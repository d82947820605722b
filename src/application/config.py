"""Configuración de la aplicación cargada desde YAML."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

KNOWN_COLLECTIONS: tuple[str, ...] = (
    "invoices",
    "clients",
    "suppliers",
    "companyInfo",
    "categories",
    "users",
    "roles",
    "vehicles",
    "offices",
    "shippingTypes",
    "paymentMethods",
    "expenses",
    "inventory",
    "expenseCategories",
    "auditLog",
    "assets",
    "assetCategories",
    "asociados",
    "certificados",
    "pagosAsociados",
    "recibosPagoAsociados",
    "remesas",
    "appErrors",
)


@dataclass(frozen=True)
class CompanyConfig:
    name: str
    rif: str = ""
    cost_per_kg: Decimal = Decimal("0")
    bcv_rate: Decimal = Decimal("1")
    handling_fee: Decimal = Decimal("10")


@dataclass(frozen=True)
class RatesConfig:
    ipostel_rate: Decimal = Decimal("0.06")
    iva_rate: Decimal = Decimal("0.16")
    igtf_rate: Decimal = Decimal("0.03")
    volumetric_divisor: Decimal = Decimal("5000")


@dataclass(frozen=True)
class ProductionConfig:
    passenger_tariff_divisa_usd: Decimal = Decimal("50")
    passenger_tariff_bs_usd: Decimal = Decimal("70")
    cargo_share: Decimal = Decimal("0.25")


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "data/cooperativa.db"


@dataclass(frozen=True)
class BackupConfig:
    required_keys: tuple[str, ...] = ("companyInfo", "users")
    merge_keys: tuple[str, ...] = tuple(
        k for k in KNOWN_COLLECTIONS if k not in ("companyInfo", "appErrors")
    )


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"


@dataclass(frozen=True)
class AppConfig:
    company: CompanyConfig
    rates: RatesConfig = field(default_factory=RatesConfig)
    production: ProductionConfig = field(default_factory=ProductionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str | Path) -> AppConfig:
    """Carga y valida la configuración desde un archivo YAML."""
    path = Path(config_path).resolve()
    if not path.exists():
        msg = f"Archivo de configuración no encontrado: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        msg = f"YAML inválido: se esperaba dict, se obtuvo {type(raw).__name__}"
        raise ValueError(msg)

    _validate_required_keys(raw)

    return AppConfig(
        company=_build_company_config(raw.get("company", {})),
        rates=RatesConfig(**_decimals(raw.get("rates", {}), "rates")),
        production=ProductionConfig(**_decimals(raw.get("production", {}), "production")),
        storage=StorageConfig(**raw.get("storage", {})),
        backup=_build_backup_config(raw.get("backup", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
    )


def _validate_required_keys(raw: dict[str, Any]) -> None:
    """Valida que las secciones requeridas existan en el YAML."""
    required = {"company"}
    missing = required - set(raw.keys())
    if missing:
        msg = f"Secciones requeridas faltantes en YAML: {sorted(missing)}"
        raise ValueError(msg)


def _build_company_config(data: dict[str, Any]) -> CompanyConfig:
    if "name" not in data:
        msg = "company.name es requerido"
        raise ValueError(msg)
    data = dict(data)
    name = str(data.pop("name"))
    rif = str(data.pop("rif", ""))
    return CompanyConfig(name=name, rif=rif, **_decimals(data, "company"))


def _build_backup_config(data: dict[str, Any]) -> BackupConfig:
    """Construye BackupConfig, convirtiendo listas a tuplas para frozen dataclass."""
    data = dict(data)
    for key in ("required_keys", "merge_keys"):
        if key in data:
            data[key] = tuple(data[key])
    return BackupConfig(**data)


def _decimals(data: dict[str, Any], section: str) -> dict[str, Decimal]:
    """Convierte los valores numéricos de una sección a Decimal vía str."""
    result = {}
    for key, value in data.items():
        try:
            result[key] = Decimal(str(value))
        except InvalidOperation as e:
            msg = f"{section}.{key} debe ser numérico: {value!r}"
            raise ValueError(msg) from e
    return result
