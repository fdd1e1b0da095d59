"""Tag management with slug-based de-duplication."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter

from ellaia.repository.response import ApiResponse
from ellaia.shared.errors import InvalidInputError
from ellaia.shared.service import EntityService
from ellaia.shared.slugs import name_sort_key, slugify
from ellaia.tags.models import Tag, TagCreate, TagUpdate, validate_tag_name

logger = logging.getLogger(__name__)


class TagsService(EntityService[Tag]):
    entity = "tags"
    model = Tag

    # ── Read operations ──────────────────────────────────────────

    async def get_by_slug(self, slug: str) -> ApiResponse[Tag | None]:
        return self._find(
            await self.list_all(),
            lambda tag: tag.slug == slug,
            f"Tag with slug '{slug}' not found",
        )

    async def search_by_name(self, term: str) -> ApiResponse[list[Tag]]:
        needle = term.lower()
        return self._derive(
            await self.list_all(),
            lambda tags: [t for t in tags if needle in t.name.lower()],
            empty=[],
        )

    async def sorted_by_name(self) -> ApiResponse[list[Tag]]:
        return self._derive(
            await self.list_all(),
            lambda tags: sorted(tags, key=lambda t: name_sort_key(t.name)),
            empty=[],
        )

    async def most_used(self, limit: int = 10) -> ApiResponse[list[Tag]]:
        """Tags ranked by how many posts reference them, then by name."""
        tags = await self.list_all()
        if not tags.success:
            return tags.with_data([])
        posts = await self._repository.list_all("posts")
        usage: Counter[str] = Counter()
        if posts.success:
            for post in posts.data:
                usage.update(set(post.get("tags") or []))
        else:
            logger.warning("Ranking tags without usage counts: %s", posts.message)
        ranked = sorted(tags.data, key=lambda t: (-usage[t.id], name_sort_key(t.name)))
        return tags.with_data(ranked[: max(limit, 0)])

    async def suggestions(self, partial: str, limit: int = 5) -> ApiResponse[list[Tag]]:
        """Autocomplete: exact name matches first, then partial matches."""
        wanted = partial.lower()

        def rank(tags: list[Tag]) -> list[Tag]:
            exact = [t for t in tags if t.name.lower() == wanted]
            rest = [t for t in tags if t.name.lower() != wanted]
            return (exact + rest)[: max(limit, 0)]

        return self._derive(await self.search_by_name(partial), rank, empty=[])

    async def exists_by_slug(self, slug: str) -> bool:
        response = await self.get_by_slug(slug)
        return response.success and response.data is not None

    async def exists_by_name(self, name: str, exclude_id: str | None = None) -> bool:
        slug = slugify(name)
        response = await self.list_all()
        if not response.success:
            return False
        return any(t.slug == slug and t.id != exclude_id for t in response.data)

    async def resolve_names(self, names: list[str]) -> ApiResponse[list[Tag]]:
        """Existing tags whose slug matches one of *names*; unknown names are ignored."""
        slugs = {slugify(name) for name in names}
        return self._derive(
            await self.list_all(),
            lambda tags: [t for t in tags if t.slug in slugs],
            empty=[],
        )

    # ── Write operations ─────────────────────────────────────────

    async def create(self, payload: TagCreate) -> ApiResponse[Tag | None]:
        try:
            name = validate_tag_name(payload.name)
        except InvalidInputError as exc:
            return ApiResponse.fail(None, str(exc))
        return await self._create({"name": name, "slug": slugify(name)})

    async def create_if_not_exists(self, name: str) -> ApiResponse[Tag | None]:
        """Return the tag with *name*'s slug, creating it when missing."""
        existing = await self.get_by_slug(slugify(name))
        if existing.success and existing.data is not None:
            return existing
        return await self.create(TagCreate(name=name))

    async def create_many(self, names: list[str]) -> ApiResponse[list[Tag]]:
        """Ensure a tag exists for every distinct name.

        Names are de-duplicated by slug, so case, accents and spacing
        variants collapse onto one tag.  Tags are created one after another
        so that two variants never race to create the same slug.
        """
        unique: dict[str, str] = {}
        for name in names:
            unique.setdefault(slugify(name), name.strip())

        tags: list[Tag] = []
        failed: list[str] = []
        for name in unique.values():
            response = await self.create_if_not_exists(name)
            if response.success and response.data is not None:
                tags.append(response.data)
            else:
                failed.append(name)
        if failed:
            logger.info("Could not create tags: %s", ", ".join(failed))
        return ApiResponse.ok(tags, f"Created {len(tags)} tags")

    async def update(self, tag_id: str, updates: TagUpdate) -> ApiResponse[Tag | None]:
        patch = updates.to_patch()
        if updates.name is not None:
            try:
                name = validate_tag_name(updates.name)
            except InvalidInputError as exc:
                return ApiResponse.fail(None, str(exc))
            patch.update(name=name, slug=slugify(name))
        return await self._update(tag_id, patch)

    async def delete_many(self, tag_ids: list[str]) -> ApiResponse[bool]:
        results = await asyncio.gather(*(self.delete(tid) for tid in tag_ids))
        deleted = sum(1 for r in results if r.success)
        if deleted != len(tag_ids):
            return ApiResponse.fail(False, f"Deleted {deleted} of {len(tag_ids)} tags")
        return ApiResponse.ok(True, f"Deleted {deleted} tags")
