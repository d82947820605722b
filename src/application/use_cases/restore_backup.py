"""Restauración de respaldos: fusión aditiva o sobrescritura, siempre confirmada."""

from dataclasses import dataclass, field
from typing import Any, Callable

import structlog

from src.application.audit import RESTAURAR_RESPALDO
from src.application.backup import (
    apply_merge,
    apply_overwrite,
    export_backup,
    load_current,
    plan_merge,
    validate_backup,
)
from src.application.config import KNOWN_COLLECTIONS, BackupConfig
from src.application.dtos import MergePlan, RestoreResult
from src.application.ports.audit import AuditRecorder
from src.application.ports.key_value_store import KeyValueStore
from src.domain.entities import User
from src.domain.exceptions import ValidationError

logger = structlog.get_logger()

MODE_MERGE = "merge"
MODE_OVERWRITE = "overwrite"


def describe_plan(plan: MergePlan) -> str:
    lines = [f"Se agregarán {plan.total_new} registros nuevos:"]
    lines.extend(f"  - {key}: {count}" for key, count in sorted(plan.counts().items()))
    lines.append("Los registros existentes no se modificarán. ¿Desea continuar?")
    return "\n".join(lines)


OVERWRITE_WARNING = (
    "¡ADVERTENCIA! Esta acción reemplazará todos los datos actuales con los del "
    "respaldo. Los cambios no guardados se perderán. ¿Desea continuar?"
)


@dataclass(frozen=True)
class RestoreBackupUseCase:
    store: KeyValueStore
    audit: AuditRecorder
    confirm: Callable[[str], bool]
    config: BackupConfig = field(default_factory=BackupConfig)

    def execute(self, data: Any, mode: str, user: User) -> RestoreResult:
        if mode not in (MODE_MERGE, MODE_OVERWRITE):
            raise ValidationError("invalid_mode", f"Modo de restauración desconocido: {mode}")

        backup = validate_backup(data, self.config.required_keys)
        if mode == MODE_MERGE:
            return self._merge(backup, user)
        return self._overwrite(backup, user)

    def export(self) -> dict[str, Any]:
        return export_backup(self.store, KNOWN_COLLECTIONS)

    def _merge(self, backup: dict[str, Any], user: User) -> RestoreResult:
        current = load_current(self.store, self.config.merge_keys)
        plan = plan_merge(current, backup, self.config.merge_keys)
        result = RestoreResult(mode=MODE_MERGE)

        if plan.is_empty:
            logger.info("backup_merge_nothing_new")
            return result
        if not self.confirm(describe_plan(plan)):
            logger.info("backup_restore_cancelled", mode=MODE_MERGE)
            return result

        result.keys_written = apply_merge(self.store, plan)
        result.records_added = plan.total_new
        result.applied = True
        self.audit.log_action(
            user,
            RESTAURAR_RESPALDO,
            f"Fusión de respaldo: {plan.total_new} registros agregados",
        )
        return result

    def _overwrite(self, backup: dict[str, Any], user: User) -> RestoreResult:
        result = RestoreResult(mode=MODE_OVERWRITE)
        if not self.confirm(OVERWRITE_WARNING):
            logger.info("backup_restore_cancelled", mode=MODE_OVERWRITE)
            return result

        result.keys_written = apply_overwrite(self.store, backup)
        result.applied = True
        self.audit.log_action(
            user,
            RESTAURAR_RESPALDO,
            f"Respaldo restaurado por sobrescritura ({len(result.keys_written)} claves)",
        )
        return result
