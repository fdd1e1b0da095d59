"""Error types shared across the data layer."""

from __future__ import annotations


class EllaiaError(Exception):
    """Base error for the ellaia data layer."""


class StorageError(EllaiaError):
    """A storage backend could not read or write a value."""


class FixtureError(EllaiaError):
    """A bundled fixture could not be loaded."""


class RecordNotFoundError(EllaiaError):
    """No record with the requested id exists in a collection."""

    def __init__(self, entity: str, record_id: str) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} with id {record_id} not found")


class InvalidInputError(EllaiaError):
    """A create or update payload failed validation before any I/O."""
