"""Cross-domain helpers: errors, slugs, timestamps and the entity service base."""

from ellaia.shared.errors import (
    EllaiaError,
    FixtureError,
    InvalidInputError,
    RecordNotFoundError,
    StorageError,
)
from ellaia.shared.slugs import name_sort_key, slugify

__all__ = [
    "EllaiaError",
    "FixtureError",
    "InvalidInputError",
    "RecordNotFoundError",
    "StorageError",
    "name_sort_key",
    "slugify",
]
