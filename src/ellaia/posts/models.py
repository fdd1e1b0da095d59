"""Post domain models: the stored record, create/update payloads and filters."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ellaia.authors.models import Author
from ellaia.categories.models import Category
from ellaia.comments.models import Comment
from ellaia.shared.models import PatchModel, UtcDatetime, WireModel

WORDS_PER_MINUTE = 200


class PostStatus(StrEnum):
    """Publication state of a post."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Post(WireModel):
    """A blog post as stored in the ``posts`` collection."""

    id: str
    slug: str
    title: str
    excerpt: str = ""
    content: str = ""
    cover_image: str = ""
    status: PostStatus = PostStatus.DRAFT
    published_at: UtcDatetime | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime
    author_id: str
    category_id: str
    tags: list[str] = Field(default_factory=list)
    reading_time: int = 1
    views: int = 0
    likes: int = 0

    @field_validator("published_at", mode="before")
    @classmethod
    def blank_published_at_is_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class PostCreate(PatchModel):
    """Caller-supplied fields for a new post."""

    title: str
    excerpt: str
    content: str
    cover_image: str = ""
    author_id: str
    category_id: str
    tags: list[str] = Field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT


class PostUpdate(PatchModel):
    """Partial update for a post.  Unset fields keep their stored value."""

    title: str | None = None
    excerpt: str | None = None
    content: str | None = None
    cover_image: str | None = None
    category_id: str | None = None
    tags: list[str] | None = None
    status: PostStatus | None = None
    published_at: UtcDatetime | None = None


class PostFilters(BaseModel):
    """Predicates for :meth:`PostsService.filtered`, combined with AND.

    ``tags`` matches posts sharing at least one of the given tag ids.
    ``search`` is a case-insensitive substring of title, excerpt or content.
    """

    category_id: str | None = None
    author_id: str | None = None
    status: PostStatus | None = None
    tags: list[str] | None = None
    search: str | None = None

    def matches(self, post: Post) -> bool:
        if self.category_id and post.category_id != self.category_id:
            return False
        if self.author_id and post.author_id != self.author_id:
            return False
        if self.status and post.status != self.status:
            return False
        if self.tags and not any(tag in post.tags for tag in self.tags):
            return False
        if self.search:
            term = self.search.lower()
            haystacks = (post.title, post.excerpt, post.content)
            if not any(term in text.lower() for text in haystacks):
                return False
        return True


class PostWithRelations(Post):
    """A post joined with its author, category and comments when found."""

    author: Author | None = None
    category: Category | None = None
    comments: list[Comment] | None = None


def reading_time(content: str) -> int:
    """Minutes to read *content* at 200 words per minute, at least one."""
    words = len(content.split())
    return max(1, -(-words // WORDS_PER_MINUTE))
