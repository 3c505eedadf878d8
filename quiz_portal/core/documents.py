"""JSON codec between domain records and store documents."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from quiz_portal.core.storage import KeyValueStore

T = TypeVar("T")


class CorruptDocumentError(Exception):
    """Raised when a stored document cannot be decoded into domain records."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Document {key!r} is corrupt: {reason}")
        self.key = key


class DocumentCollection(Generic[T]):
    """A list of records persisted under one key as a JSON array."""

    def __init__(self, store: KeyValueStore, key: str, item_type: type[T]) -> None:
        self._store = store
        self._key = key
        self._adapter: TypeAdapter[list[T]] = TypeAdapter(list[item_type])

    @property
    def key(self) -> str:
        return self._key

    def exists(self) -> bool:
        return self._store.read(self._key) is not None

    def load(self) -> list[T] | None:
        document = self._store.read(self._key)
        if document is None:
            return None
        try:
            return self._adapter.validate_json(document)
        except ValidationError as exc:
            raise CorruptDocumentError(self._key, str(exc)) from exc

    def load_or_empty(self) -> list[T]:
        items = self.load()
        return items if items is not None else []

    def save(self, items: list[T]) -> None:
        self._store.write(self._key, self._adapter.dump_json(items).decode("utf-8"))


class DocumentRecord(Generic[T]):
    """A single record persisted under one key as a JSON object."""

    def __init__(self, store: KeyValueStore, key: str, item_type: type[T]) -> None:
        self._store = store
        self._key = key
        self._adapter: TypeAdapter[T] = TypeAdapter(item_type)

    def load(self) -> T | None:
        document = self._store.read(self._key)
        if document is None:
            return None
        try:
            return self._adapter.validate_json(document)
        except ValidationError as exc:
            raise CorruptDocumentError(self._key, str(exc)) from exc

    def save(self, item: T) -> None:
        self._store.write(self._key, self._adapter.dump_json(item).decode("utf-8"))

    def clear(self) -> None:
        self._store.remove(self._key)
