"""Author lookups, role management and team listings."""

from __future__ import annotations

from collections import Counter

from ellaia.authors.models import (
    ROLE_RANK,
    TEAM_ROLES,
    Author,
    AuthorCreate,
    AuthorProfileUpdate,
    AuthorRole,
    AuthorUpdate,
)
from ellaia.repository.response import ApiResponse
from ellaia.shared.models import isoformat, utcnow
from ellaia.shared.service import EntityService
from ellaia.shared.slugs import name_sort_key


class AuthorsService(EntityService[Author]):
    entity = "authors"
    model = Author

    # ── Read operations ──────────────────────────────────────────

    async def get_by_email(self, email: str) -> ApiResponse[Author | None]:
        return self._find(
            await self.list_all(),
            lambda author: author.email == email,
            f"Author with email '{email}' not found",
        )

    async def by_role(self, role: AuthorRole) -> ApiResponse[list[Author]]:
        return self._derive(
            await self.list_all(),
            lambda authors: [a for a in authors if a.role == role],
            empty=[],
        )

    async def active_authors(self) -> ApiResponse[list[Author]]:
        """Authors allowed to publish (AUTHOR, EDITOR, ADMIN), in stored order."""
        return self._derive(
            await self.list_all(),
            lambda authors: [a for a in authors if a.role in TEAM_ROLES],
            empty=[],
        )

    async def team_members(self) -> ApiResponse[list[Author]]:
        """Team for the About page: admins, then editors, then authors, by name."""
        return self._derive(
            await self.list_all(),
            lambda authors: sorted(
                (a for a in authors if a.role in TEAM_ROLES),
                key=lambda a: (ROLE_RANK[a.role], name_sort_key(a.name)),
            ),
            empty=[],
        )

    async def email_exists(self, email: str, exclude_id: str | None = None) -> bool:
        """Whether another author already uses *email*.

        Pass the author's own id as *exclude_id* when checking an edit.
        """
        response = await self.list_all()
        if not response.success:
            return False
        return any(a.email == email and a.id != exclude_id for a in response.data)

    async def counts_by_role(self) -> dict[AuthorRole, int]:
        counts = dict.fromkeys(AuthorRole, 0)
        response = await self.list_all()
        if response.success:
            counts.update(Counter(a.role for a in response.data))
        return counts

    # ── Write operations ─────────────────────────────────────────

    async def create(self, payload: AuthorCreate) -> ApiResponse[Author | None]:
        return await self._create({**payload.to_record(), "createdAt": isoformat(utcnow())})

    async def update(self, author_id: str, updates: AuthorUpdate) -> ApiResponse[Author | None]:
        return await self._update(author_id, updates.to_patch())

    async def update_profile(
        self, author_id: str, profile: AuthorProfileUpdate
    ) -> ApiResponse[Author | None]:
        return await self._update(author_id, profile.to_patch())

    async def change_role(self, author_id: str, role: AuthorRole) -> ApiResponse[Author | None]:
        return await self.update(author_id, AuthorUpdate(role=role))
