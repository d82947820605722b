from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


class CollectionRepository(Protocol, Generic[T]):
    """Una colección persistida: se lee completa y se escribe completa."""

    collection: str

    def list_all(self) -> list[T]: ...

    def to_records(self, items: list[T]) -> list[dict]:
        """Registros JSON listos para escribir junto a otras colecciones."""
        ...

    def save_all(self, items: list[T]) -> None: ...

    def get(self, record_id: str) -> T:
        """Lanza RecordNotFoundError si el id no existe."""
        ...

    def upsert(self, item: T) -> None: ...

    def delete(self, record_id: str) -> None: ...
