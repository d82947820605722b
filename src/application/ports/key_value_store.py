"""Port para el almacén clave-valor donde vive el estado persistido."""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None:
        """Retorna el valor JSON deserializado de la clave, o None si no existe."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Reemplaza por completo el valor de la clave."""
        ...

    def set_many(self, values: Mapping[str, Any]) -> None:
        """Escribe varias claves en una sola transacción (todas o ninguna)."""
        ...

    def keys(self) -> list[str]: ...

    def delete(self, key: str) -> None: ...
