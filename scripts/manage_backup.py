"""Exporta o restaura respaldos JSON del estado de la cooperativa.

Usage:
    python scripts/manage_backup.py export <archivo.json> [path/to/config.yaml]
    python scripts/manage_backup.py merge <archivo.json> [path/to/config.yaml]
    python scripts/manage_backup.py overwrite <archivo.json> [path/to/config.yaml]
"""

import getpass
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from src.application.audit import AuditTrail
from src.application.config import load_config
from src.application.debts import new_id
from src.application.use_cases.restore_backup import RestoreBackupUseCase
from src.domain.entities import User
from src.domain.exceptions import BackupFormatError, ValidationError
from src.infrastructure.logging_config import close_log_file, setup_logging
from src.infrastructure.repositories import build_repositories
from src.infrastructure.sqlite_store import SqliteKeyValueStore

COMMANDS = ("export", "merge", "overwrite")


def ask_confirmation(message: str) -> bool:
    print(message)
    return input("[s/N] ").strip().lower() in ("s", "si", "sí", "y", "yes")


def main() -> int:
    if len(sys.argv) < 3 or sys.argv[1] not in COMMANDS:
        print(__doc__)
        return 2
    command, backup_path = sys.argv[1], Path(sys.argv[2])
    config_path = sys.argv[3] if len(sys.argv) > 3 else "configs/configuration.yaml"
    config = load_config(config_path)

    setup_logging(
        log_level=config.logging.level,
        log_dir=Path(config.logging.log_dir) if config.logging.log_to_file else None,
    )
    logger = structlog.get_logger()
    logger.info("manage_backup_starting", command=command, file=str(backup_path))

    store = SqliteKeyValueStore(db_path=config.storage.db_path)
    try:
        repos = build_repositories(store)
        use_case = RestoreBackupUseCase(
            store=store,
            audit=AuditTrail(repos.audit_log, id_factory=new_id),
            confirm=ask_confirmation,
            config=config.backup,
        )

        if command == "export":
            snapshot = use_case.export()
            backup_path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
            logger.info("backup_written", file=str(backup_path), keys=len(snapshot))
            return 0

        operator = getpass.getuser()
        user = User(id=f"cli:{operator}", name=operator, username=operator)
        try:
            data = json.loads(backup_path.read_text(encoding="utf-8"))
            result = use_case.execute(data, command, user)
        except (json.JSONDecodeError, BackupFormatError, ValidationError) as e:
            logger.error("backup_restore_failed", error=str(e))
            return 1

        logger.info(
            "manage_backup_finished",
            mode=result.mode,
            applied=result.applied,
            keys=result.keys_written,
            records_added=result.records_added,
        )
        return 0
    finally:
        store.close()
        close_log_file()


if __name__ == "__main__":
    sys.exit(main())
