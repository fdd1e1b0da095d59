"""Category CRUD with slug maintenance."""

from __future__ import annotations

from collections import Counter

from ellaia.categories.models import Category, CategoryCreate, CategoryUpdate
from ellaia.repository.response import ApiResponse
from ellaia.shared.models import isoformat, utcnow
from ellaia.shared.service import EntityService
from ellaia.shared.slugs import name_sort_key, slugify


class CategoriesService(EntityService[Category]):
    entity = "categories"
    model = Category

    async def get_by_slug(self, slug: str) -> ApiResponse[Category | None]:
        return self._find(
            await self.list_all(),
            lambda category: category.slug == slug,
            f"Category with slug '{slug}' not found",
        )

    async def sorted_by_name(self) -> ApiResponse[list[Category]]:
        return self._derive(
            await self.list_all(),
            lambda categories: sorted(categories, key=lambda c: name_sort_key(c.name)),
            empty=[],
        )

    async def exists_by_slug(self, slug: str) -> bool:
        response = await self.get_by_slug(slug)
        return response.success and response.data is not None

    async def post_counts(self) -> ApiResponse[dict[str, int]]:
        """Number of posts filed under each category id (zero-filled)."""
        categories = await self.list_all()
        if not categories.success:
            return categories.with_data({})
        posts = await self._repository.list_all("posts")
        if not posts.success:
            return posts.with_data({})
        counts = Counter(p.get("categoryId") for p in posts.data)
        return categories.with_data({c.id: counts.get(c.id, 0) for c in categories.data})

    async def create(self, payload: CategoryCreate) -> ApiResponse[Category | None]:
        return await self._create(
            {
                **payload.to_record(),
                "slug": slugify(payload.name),
                "createdAt": isoformat(utcnow()),
            }
        )

    async def update(self, category_id: str, updates: CategoryUpdate) -> ApiResponse[Category | None]:
        patch = updates.to_patch()
        if updates.name is not None:
            patch["slug"] = slugify(updates.name)
        return await self._update(category_id, patch)
