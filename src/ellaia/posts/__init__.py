"""Posts domain: blog post models, filters and the posts service."""

from ellaia.posts.models import (
    Post,
    PostCreate,
    PostFilters,
    PostStatus,
    PostUpdate,
    PostWithRelations,
    reading_time,
)
from ellaia.posts.services import PostsService

__all__ = [
    "Post",
    "PostCreate",
    "PostFilters",
    "PostStatus",
    "PostUpdate",
    "PostWithRelations",
    "PostsService",
    "reading_time",
]
