"""Author domain models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from ellaia.shared.models import PatchModel, UtcDatetime, WireModel


class AuthorRole(StrEnum):
    """Permission level of an author."""

    READER = "READER"
    AUTHOR = "AUTHOR"
    EDITOR = "EDITOR"
    ADMIN = "ADMIN"


# Team ordering: lower ranks are listed first; readers are not team members.
ROLE_RANK: dict[AuthorRole, int] = {
    AuthorRole.ADMIN: 1,
    AuthorRole.EDITOR: 2,
    AuthorRole.AUTHOR: 3,
    AuthorRole.READER: 4,
}
TEAM_ROLES = frozenset({AuthorRole.ADMIN, AuthorRole.EDITOR, AuthorRole.AUTHOR})


class AuthorLinks(WireModel):
    """Optional social profile URLs."""

    linkedin: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    website: str | None = None
    github: str | None = None
    medium: str | None = None


class Author(WireModel):
    """A community member who can write, edit or administer content."""

    id: str
    name: str
    email: str
    role: AuthorRole = AuthorRole.READER
    bio: str = ""
    avatar: str = ""
    links: AuthorLinks = Field(default_factory=AuthorLinks)
    created_at: UtcDatetime | None = None


class AuthorCreate(PatchModel):
    name: str
    email: str
    role: AuthorRole = AuthorRole.READER
    bio: str = ""
    avatar: str = ""
    links: AuthorLinks = Field(default_factory=AuthorLinks)


class AuthorUpdate(PatchModel):
    """Partial update for an author.  ``links`` replaces the whole mapping."""

    name: str | None = None
    email: str | None = None
    role: AuthorRole | None = None
    bio: str | None = None
    avatar: str | None = None
    links: AuthorLinks | None = None


class AuthorProfileUpdate(PatchModel):
    """The self-service subset of :class:`AuthorUpdate`."""

    bio: str | None = None
    avatar: str | None = None
    links: AuthorLinks | None = None
