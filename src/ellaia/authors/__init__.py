"""Authors domain: profiles, roles and the team listing."""

from ellaia.authors.models import (
    ROLE_RANK,
    TEAM_ROLES,
    Author,
    AuthorCreate,
    AuthorLinks,
    AuthorProfileUpdate,
    AuthorRole,
    AuthorUpdate,
)
from ellaia.authors.services import AuthorsService

__all__ = [
    "ROLE_RANK",
    "TEAM_ROLES",
    "Author",
    "AuthorCreate",
    "AuthorLinks",
    "AuthorProfileUpdate",
    "AuthorRole",
    "AuthorUpdate",
    "AuthorsService",
]
