"""Tag domain models."""

from __future__ import annotations

from ellaia.shared.errors import InvalidInputError
from ellaia.shared.models import PatchModel, WireModel
from ellaia.shared.slugs import slugify

MIN_TAG_NAME_LENGTH = 2


class Tag(WireModel):
    id: str
    slug: str
    name: str


class TagCreate(PatchModel):
    name: str


class TagUpdate(PatchModel):
    name: str | None = None


def validate_tag_name(name: str) -> str:
    """Return the trimmed *name*, or raise InvalidInputError."""
    trimmed = name.strip()
    if not trimmed:
        raise InvalidInputError("Tag name is required")
    if len(trimmed) < MIN_TAG_NAME_LENGTH:
        raise InvalidInputError(
            f"Tag name must be at least {MIN_TAG_NAME_LENGTH} characters long"
        )
    if not slugify(trimmed):
        raise InvalidInputError("Tag name must contain at least one letter or digit")
    return trimmed
