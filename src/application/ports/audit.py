from typing import Optional, Protocol

from src.domain.entities import User


class AuditRecorder(Protocol):
    def log_action(
        self, user: User, action: str, details: str, target_id: Optional[str] = None
    ) -> None: ...
