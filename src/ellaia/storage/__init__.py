"""Storage layer: key/value backends, fixture loading and collection access."""

from ellaia.storage.adapter import DEFAULT_PREFIX, SEEDED_COLLECTIONS, StoreAdapter
from ellaia.storage.backends import JsonFileStorage, MemoryStorage, StorageBackend
from ellaia.storage.fixtures import DEFAULT_FIXTURES_DIR, FixtureLoader

__all__ = [
    "DEFAULT_FIXTURES_DIR",
    "DEFAULT_PREFIX",
    "FixtureLoader",
    "JsonFileStorage",
    "MemoryStorage",
    "SEEDED_COLLECTIONS",
    "StorageBackend",
    "StoreAdapter",
]
