"""Respaldo y restauración del estado persistido (fusión aditiva o sobrescritura)."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import structlog

from src.application.config import KNOWN_COLLECTIONS, BackupConfig
from src.application.dtos import MergePlan
from src.application.ports.key_value_store import KeyValueStore
from src.domain.exceptions import BackupFormatError

logger = structlog.get_logger()


def validate_backup(
    data: Any, required_keys: Iterable[str] = BackupConfig().required_keys
) -> dict[str, Any]:
    """Verifica la forma del respaldo antes de tocar cualquier clave persistida."""
    if not isinstance(data, dict):
        raise BackupFormatError(
            f"El archivo de respaldo es inválido: se esperaba un objeto, se obtuvo {type(data).__name__}"
        )
    missing = [key for key in required_keys if data.get(key) is None]
    if missing:
        raise BackupFormatError(
            f"El archivo de respaldo es inválido o está corrupto. Claves faltantes: {missing}"
        )
    return data


def plan_merge(
    current: Mapping[str, Any],
    backup: Mapping[str, Any],
    keys: Iterable[str] = BackupConfig().merge_keys,
) -> MergePlan:
    """
    Por cada colección conocida, selecciona los registros del respaldo cuyo id
    no existe en la colección actual. Registros sin id se ignoran.
    """
    plan = MergePlan()
    for key in keys:
        backup_items = backup.get(key)
        current_items = current.get(key) or []
        if not isinstance(backup_items, list) or not isinstance(current_items, list):
            continue

        seen = {item.get("id") for item in current_items if isinstance(item, dict)}
        new_items = []
        for item in backup_items:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            if item["id"] in seen:
                continue
            seen.add(item["id"])
            new_items.append(item)
        if new_items:
            plan.new_records[key] = new_items
    return plan


def load_current(store: KeyValueStore, keys: Iterable[str]) -> dict[str, Any]:
    return {key: store.get(key) for key in keys}


def apply_merge(store: KeyValueStore, plan: MergePlan) -> list[str]:
    """Agrega los registros nuevos al final de cada colección. Nunca modifica ni borra."""
    updates: dict[str, list[Any]] = {}
    for key, new_items in plan.new_records.items():
        if not new_items:
            continue
        current = store.get(key) or []
        if not isinstance(current, list):
            continue
        updates[key] = [*current, *new_items]

    if updates:
        store.set_many(updates)
    logger.info("backup_merge_applied", keys=sorted(updates), records=plan.total_new)
    return sorted(updates)


def apply_overwrite(store: KeyValueStore, backup: Mapping[str, Any]) -> list[str]:
    """Reemplaza clave por clave el estado persistido con los valores del respaldo."""
    store.set_many(dict(backup))
    logger.info("backup_overwrite_applied", keys=sorted(backup))
    return sorted(backup)


def export_backup(
    store: KeyValueStore, keys: Iterable[str] = KNOWN_COLLECTIONS
) -> dict[str, Any]:
    """Instantánea de las claves persistidas, lista para serializar como JSON."""
    snapshot = {}
    for key in keys:
        value = store.get(key)
        if value is not None:
            snapshot[key] = value
    logger.info("backup_exported", keys=sorted(snapshot))
    return snapshot
