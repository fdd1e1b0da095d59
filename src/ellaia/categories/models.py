"""Category domain models."""

from __future__ import annotations


from ellaia.shared.models import PatchModel, UtcDatetime, WireModel


class Category(WireModel):
    id: str
    slug: str
    name: str
    description: str = ""
    color: str = ""
    created_at: UtcDatetime | None = None


class CategoryCreate(PatchModel):
    name: str
    description: str = ""
    color: str = ""


class CategoryUpdate(PatchModel):
    name: str | None = None
    description: str | None = None
    color: str | None = None
