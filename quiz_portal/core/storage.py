"""Key-value document stores backing the quiz portal.

Every key maps to one opaque text document that is always read and written
whole. Reading a key that was never written returns ``None``; callers decide
whether that means "seed defaults" or "empty".

Two backends are provided:

* ``MemoryStore`` keeps documents in a dict and is what the tests use.
* ``FileStore`` keeps one ``<key>.json`` file per key in a data directory.

Concurrent writers are not coordinated. Two processes writing the same key
simply race and the last write wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from quiz_portal.constants.storage_constants import DOCUMENT_SUFFIX

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Whole-document read/write interface shared by all backends."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, document: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store that lives as long as the process."""

    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self._documents: dict[str, str] = dict(documents or {})

    def read(self, key: str) -> str | None:
        return self._documents.get(key)

    def write(self, key: str, document: str) -> None:
        self._documents[key] = document

    def remove(self, key: str) -> None:
        self._documents.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._documents)


class FileStore:
    """Stores each document as a UTF-8 file inside ``data_dir``."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir).resolve()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def read(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, document: str) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._path_for(key).write_text(document, encoding="utf-8")
        _logger.debug("Wrote document %s (%d bytes)", key, len(document))

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid document key: {key!r}")
        return self._data_dir / f"{key}{DOCUMENT_SUFFIX}"
