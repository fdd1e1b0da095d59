"""Tags domain."""

from ellaia.tags.models import Tag, TagCreate, TagUpdate, validate_tag_name
from ellaia.tags.services import TagsService

__all__ = [
    "Tag",
    "TagCreate",
    "TagUpdate",
    "TagsService",
    "validate_tag_name",
]
