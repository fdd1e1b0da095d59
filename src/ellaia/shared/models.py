"""Base pydantic types shared by every entity model.

Records are stored and bundled as camelCase JSON (``coverImage``,
``publishedAt``) while Python code uses snake_case attributes.  ``WireModel``
bridges the two: it accepts either spelling on input and ``to_record()``
produces the stored form.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def as_utc(value: datetime) -> datetime:
    """Convert *value* to UTC, reading a naive datetime as already UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class WireModel(BaseModel):
    """Model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Dump to the JSON-compatible stored form."""
        return self.model_dump(mode="json", by_alias=True)


def isoformat(value: datetime) -> str:
    """Serialize *value* the way pydantic writes UTC datetimes (``...Z``)."""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


class PatchModel(WireModel):
    """Create or partial-update payload.

    Unknown fields are rejected.  ``to_patch()`` emits only fields the caller
    set to a value, so a patch can never overwrite more than its caller
    named and ``None`` means "leave unchanged".
    """

    model_config = ConfigDict(extra="forbid")

    def to_patch(self) -> dict[str, Any]:
        """Dump only the fields the caller set."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)
