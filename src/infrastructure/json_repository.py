"""Repositorio de una colección sobre el almacén clave-valor."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

import structlog

from src.application.ports.key_value_store import KeyValueStore
from src.domain.exceptions import RecordNotFoundError

logger = structlog.get_logger()

T = TypeVar("T")


class JsonCollectionRepository(Generic[T]):
    """
    Lee y escribe una colección completa como lista de registros JSON.

    La conversión registro <-> entidad la aportan ``to_record`` y
    ``from_record`` (normalmente métodos de ``RecordMapper``). Cada entidad
    debe exponer un atributo ``id``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        collection: str,
        to_record: Callable[[T], dict],
        from_record: Callable[[dict], T],
    ) -> None:
        self._store = store
        self.collection = collection
        self._to_record = to_record
        self._from_record = from_record

    def list_all(self) -> list[T]:
        raw = self._store.get(self.collection) or []
        return [self._from_record(row) for row in raw]

    def to_records(self, items: list[T]) -> list[dict]:
        return [self._to_record(item) for item in items]

    def save_all(self, items: list[T]) -> None:
        self._store.set(self.collection, self.to_records(items))
        logger.debug("collection_saved", collection=self.collection, count=len(items))

    def get(self, record_id: str) -> T:
        for item in self.list_all():
            if item.id == record_id:  # type: ignore[attr-defined]
                return item
        raise RecordNotFoundError(self.collection, record_id)

    def upsert(self, item: T) -> None:
        items = self.list_all()
        item_id = item.id  # type: ignore[attr-defined]
        for i, existing in enumerate(items):
            if existing.id == item_id:  # type: ignore[attr-defined]
                items[i] = item
                break
        else:
            items.append(item)
        self.save_all(items)

    def delete(self, record_id: str) -> None:
        items = self.list_all()
        remaining = [item for item in items if item.id != record_id]  # type: ignore[attr-defined]
        if len(remaining) == len(items):
            raise RecordNotFoundError(self.collection, record_id)
        self.save_all(remaining)
