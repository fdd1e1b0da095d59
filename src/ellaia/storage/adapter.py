"""Persistent store adapter: named collections over a key/value backend.

Each collection is one JSON array stored under ``<prefix><name>`` and
rewritten in full on every write.  The five blog collections are seeded from
the bundled fixtures the first time they are found missing.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ellaia.shared.errors import FixtureError, StorageError
from ellaia.storage.backends import StorageBackend
from ellaia.storage.fixtures import FixtureLoader

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "ellaia_"
SEEDED_COLLECTIONS: tuple[str, ...] = ("posts", "categories", "authors", "comments", "tags")


class StoreAdapter:
    """Reads and writes whole collections and owns fixture seeding."""

    def __init__(
        self,
        backend: StorageBackend,
        fixtures: FixtureLoader | None = None,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self._backend = backend
        self._fixtures = fixtures or FixtureLoader()
        self._prefix = prefix

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def fixtures(self) -> FixtureLoader:
        return self._fixtures

    @property
    def prefix(self) -> str:
        return self._prefix

    def storage_key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    # ── Collection access ────────────────────────────────────────

    def read_collection(self, name: str) -> list[dict[str, Any]] | None:
        """Return the stored records for *name*, or ``None`` if never written.

        Raises StorageError if the stored value is not a JSON array.
        """
        raw = self._backend.get_item(self.storage_key(name))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Corrupt %s collection in storage", name)
            raise StorageError(f"Stored {name} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise StorageError(f"Stored {name} is not a JSON array")
        return data

    def write_collection(self, name: str, records: list[dict[str, Any]]) -> None:
        """Overwrite the whole collection *name* with *records*."""
        payload = json.dumps(records, ensure_ascii=False)
        self._backend.set_item(self.storage_key(name), payload)

    def load_fixture(self, name: str) -> list[dict[str, Any]]:
        """Load the bundled fixture for *name*.  Raises FixtureError."""
        return self._fixtures.load(name)

    # ── Seeding ──────────────────────────────────────────────────

    def seed_if_absent(self, names: tuple[str, ...] = SEEDED_COLLECTIONS) -> list[str]:
        """Seed every collection in *names* that has no stored data.

        Failures are logged and skipped so that startup never aborts.
        Returns the names actually seeded.
        """
        seeded: list[str] = []
        for name in names:
            try:
                if self._backend.get_item(self.storage_key(name)) is not None:
                    continue
                records = self.load_fixture(name)
                self.write_collection(name, records)
            except (FixtureError, StorageError) as exc:
                logger.warning("Failed to seed %s from fixtures: %s", name, exc)
                continue
            logger.info("Seeded %s with %d records", name, len(records))
            seeded.append(name)
        return seeded

    def reset(self) -> list[str]:
        """Drop every seeded collection and seed again from fixtures.

        Intended for development use.
        """
        for name in SEEDED_COLLECTIONS:
            self._backend.remove_item(self.storage_key(name))
        logger.info("Cleared %d collections", len(SEEDED_COLLECTIONS))
        return self.seed_if_absent()
