"""Almacén clave-valor en SQLite: cada colección es una clave con su valor JSON."""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Mapping

import structlog

logger = structlog.get_logger()

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

_UPSERT = """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
             ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at"""


class SqliteKeyValueStore:
    """Persistencia del estado completo de la aplicación, una fila por clave."""

    def __init__(self, db_path: str) -> None:
        path = Path(db_path)
        if db_path != ":memory:":
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._conn.commit()
        logger.info("sqlite_store_initialized", db_path=db_path)

    def get(self, key: str) -> Any | None:
        cursor = self._conn.execute("SELECT value FROM kv_store WHERE key=?", (key,))
        row = cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, Any]) -> None:
        """Todas las claves se escriben en una transacción; si una falla, ninguna queda."""
        now = datetime.now(UTC).isoformat()
        rows = [(key, json.dumps(value, ensure_ascii=False), now) for key, value in values.items()]
        with self._conn:
            self._conn.executemany(_UPSERT, rows)
        logger.debug("sqlite_store_written", keys=sorted(values))

    def keys(self) -> list[str]:
        cursor = self._conn.execute("SELECT key FROM kv_store ORDER BY key")
        return [row[0] for row in cursor.fetchall()]

    def delete(self, key: str) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM kv_store WHERE key=?", (key,))
        logger.info("sqlite_store_key_deleted", key=key)

    def close(self) -> None:
        """Cierra la conexión a la base de datos."""
        self._conn.close()
