"""Bitácora de auditoría: quién hizo qué y cuándo."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable, Optional

import structlog

from src.application.ports.repository import CollectionRepository
from src.domain.entities import AuditLog, User

logger = structlog.get_logger()

GENERAR_DEUDA = "GENERAR_DEUDA"
REGISTRAR_PAGO = "REGISTRAR_PAGO"
ELIMINAR_DEUDA = "ELIMINAR_DEUDA"
GUARDAR_FACTURA = "GUARDAR_FACTURA"
RESTAURAR_RESPALDO = "RESTAURAR_RESPALDO"
CORREGIR_DATOS = "CORREGIR_DATOS"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuditTrail:
    """Implementa ``AuditRecorder`` sobre la colección ``auditLog`` (más reciente primero)."""

    def __init__(
        self,
        repository: CollectionRepository[AuditLog],
        id_factory: Callable[[], str],
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repository = repository
        self._id_factory = id_factory
        self._clock = clock

    def log_action(
        self, user: User, action: str, details: str, target_id: Optional[str] = None
    ) -> AuditLog:
        entry = AuditLog(
            id=self._id_factory(),
            timestamp=self._clock(),
            user_id=user.id,
            user_name=user.name,
            action=action,
            details=details,
            target_id=target_id,
        )
        self._repository.save_all([entry, *self._repository.list_all()])
        logger.info("audit_logged", action=action, user=user.name, target_id=target_id)
        return entry
