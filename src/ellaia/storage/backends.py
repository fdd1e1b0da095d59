"""Key/value string storage backends.

These play the role of browser local storage: a flat namespace of string
keys mapping to string values, with no locking and no partial writes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from ellaia.shared.errors import StorageError

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Base class for string key/value stores."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value for *key*, or ``None`` if it was never written."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*.  Removing a missing key is a no-op."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every stored key."""


class MemoryStorage(StorageBackend):
    """Process-local storage backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage(StorageBackend):
    """Storage persisted as one ``<key>.json`` file per key.

    Values are written wholesale on every ``set_item``.  Several processes
    pointed at the same directory race with last-write-wins.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}{self.SUFFIX}"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {path}: {exc}") from exc

    def keys(self) -> list[str]:
        if not self._directory.exists():
            return []
        return sorted(p.stem for p in self._directory.glob(f"*{self.SUFFIX}"))
