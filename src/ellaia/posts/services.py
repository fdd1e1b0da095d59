"""Post queries and lifecycle operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ValidationError

from ellaia.authors.models import Author
from ellaia.categories.models import Category
from ellaia.comments.models import Comment, CommentStatus
from ellaia.posts.models import (
    Post,
    PostCreate,
    PostFilters,
    PostStatus,
    PostUpdate,
    PostWithRelations,
    reading_time,
)
from ellaia.repository.base import DataRepository, Record
from ellaia.repository.response import ApiResponse
from ellaia.shared.models import isoformat, utcnow
from ellaia.shared.service import EntityService
from ellaia.shared.slugs import slugify

logger = logging.getLogger(__name__)


class PostsService(EntityService[Post]):
    """Blog posts: listing, filtering, featured selection and publishing."""

    entity = "posts"
    model = Post

    def __init__(
        self,
        repository: DataRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(repository)
        self._clock = clock

    def _stamp_after(self, previous: datetime | None) -> datetime:
        """Current time, nudged forward so it is strictly after *previous*."""
        now = self._clock()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    # ── Read operations ──────────────────────────────────────────

    async def get_by_slug(self, slug: str) -> ApiResponse[Post | None]:
        return self._find(
            await self.list_all(),
            lambda post: post.slug == slug,
            f"Post with slug '{slug}' not found",
        )

    async def filtered(self, filters: PostFilters) -> ApiResponse[list[Post]]:
        """Posts matching every predicate set on *filters*."""
        return self._derive(
            await self.list_all(),
            lambda posts: [p for p in posts if filters.matches(p)],
            empty=[],
        )

    async def published(self) -> ApiResponse[list[Post]]:
        return await self.filtered(PostFilters(status=PostStatus.PUBLISHED))

    async def featured(self, limit: int = 3) -> ApiResponse[list[Post]]:
        """The *limit* most recently published posts, newest first."""

        def newest_first(posts: list[Post]) -> list[Post]:
            dated = [p for p in posts if p.published_at is not None]
            undated = [p for p in posts if p.published_at is None]
            dated.sort(key=lambda p: p.published_at, reverse=True)  # type: ignore[arg-type, return-value]
            return (dated + undated)[: max(limit, 0)]

        return self._derive(await self.published(), newest_first, empty=[])

    async def list_with_relations(self) -> ApiResponse[list[PostWithRelations]]:
        """Every post joined with its author, category and approved comments.

        Relations that cannot be loaded or resolved are left as ``None``.
        """
        posts, authors, categories, comments = await asyncio.gather(
            self.list_all(),
            self._repository.list_all("authors"),
            self._repository.list_all("categories"),
            self._repository.list_all("comments"),
        )
        if not posts.success:
            return posts.with_data([])

        authors_by_id = _index(authors, Author)
        categories_by_id = _index(categories, Category)
        comments_by_post: dict[str, list[Comment]] = {}
        for comment in _index(comments, Comment).values():
            if comment.status == CommentStatus.APPROVED:
                comments_by_post.setdefault(comment.post_id, []).append(comment)
        for thread in comments_by_post.values():
            thread.sort(key=lambda c: c.created_at, reverse=True)

        joined = [
            PostWithRelations(
                **post.model_dump(),
                author=authors_by_id.get(post.author_id),
                category=categories_by_id.get(post.category_id),
                comments=comments_by_post.get(post.id, []) if comments.success else None,
            )
            for post in posts.data
        ]
        return posts.with_data(joined)

    # ── Write operations ─────────────────────────────────────────

    async def create(self, payload: PostCreate) -> ApiResponse[Post | None]:
        """Create a post, deriving slug, timestamps and reading time."""
        now = isoformat(self._clock())
        record: Record = {
            **payload.to_record(),
            "slug": slugify(payload.title),
            "publishedAt": now if payload.status == PostStatus.PUBLISHED else None,
            "createdAt": now,
            "updatedAt": now,
            "readingTime": reading_time(payload.content),
            "views": 0,
            "likes": 0,
        }
        return await self._create(record)

    async def update(self, post_id: str, updates: PostUpdate) -> ApiResponse[Post | None]:
        """Merge *updates* into a post and refresh its derived fields.

        ``updatedAt`` always moves forward; the slug follows a new title,
        the reading time follows new content, and ``publishedAt`` is stamped
        when the status moves to PUBLISHED unless the caller supplied it.
        """
        changes = updates.to_patch()

        def derive(current: Record) -> dict[str, Any]:
            stored = Post.model_validate(current)
            patch = dict(changes)
            patch["updatedAt"] = isoformat(self._stamp_after(stored.updated_at))
            if updates.title is not None:
                patch["slug"] = slugify(updates.title)
            if updates.content is not None:
                patch["readingTime"] = reading_time(updates.content)
            if (
                updates.status == PostStatus.PUBLISHED
                and stored.status != PostStatus.PUBLISHED
                and "publishedAt" not in patch
            ):
                patch["publishedAt"] = patch["updatedAt"]
            return patch

        return await self._update(post_id, derive)

    async def publish(self, post_id: str) -> ApiResponse[Post | None]:
        return await self.update(post_id, PostUpdate(status=PostStatus.PUBLISHED))

    async def unpublish(self, post_id: str) -> ApiResponse[Post | None]:
        return await self.update(post_id, PostUpdate(status=PostStatus.DRAFT))

    async def archive(self, post_id: str) -> ApiResponse[Post | None]:
        return await self.update(post_id, PostUpdate(status=PostStatus.ARCHIVED))

    async def increment_views(self, post_id: str) -> ApiResponse[Post | None]:
        return await self._increment(post_id, "views")

    async def increment_likes(self, post_id: str) -> ApiResponse[Post | None]:
        return await self._increment(post_id, "likes")

    async def _increment(self, post_id: str, counter: str) -> ApiResponse[Post | None]:
        return await self._update(
            post_id, lambda current: {counter: int(current.get(counter) or 0) + 1}
        )


def _index(response: ApiResponse[list[Record]], model: type[BaseModel]) -> dict[str, Any]:
    """Parse a raw listing into ``{id: model}``, skipping malformed records."""
    if not response.success:
        return {}
    indexed: dict[str, Any] = {}
    for record in response.data:
        try:
            item = model.model_validate(record)
        except ValidationError:
            logger.warning("Skipping malformed record %s", record.get("id"))
            continue
        indexed[item.id] = item  # type: ignore[attr-defined]
    return indexed
