"""Comment domain models and the validation rules applied before any write."""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel

from ellaia.shared.errors import InvalidInputError
from ellaia.shared.models import PatchModel, UtcDatetime, WireModel

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_BODY_LENGTH = 3
MIN_AUTHOR_NAME_LENGTH = 2


class CommentStatus(StrEnum):
    """Moderation state of a comment."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Comment(WireModel):
    id: str
    post_id: str
    author_name: str
    author_email: str
    body: str
    status: CommentStatus = CommentStatus.PENDING
    created_at: UtcDatetime


class CommentCreate(PatchModel):
    post_id: str
    author_name: str
    author_email: str
    body: str


class CommentUpdate(PatchModel):
    author_name: str | None = None
    author_email: str | None = None
    body: str | None = None
    status: CommentStatus | None = None


class CommentFilters(BaseModel):
    """Predicates for :meth:`CommentsService.filtered`, combined with AND.

    ``author_email`` matches regardless of case or surrounding whitespace.
    """

    post_id: str | None = None
    status: CommentStatus | None = None
    author_email: str | None = None

    def matches(self, comment: Comment) -> bool:
        if self.post_id and comment.post_id != self.post_id:
            return False
        if self.status and comment.status != self.status:
            return False
        if self.author_email and (
            comment.author_email.strip().lower() != self.author_email.strip().lower()
        ):
            return False
        return True


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def validate_body(body: str) -> None:
    if len(body.strip()) < MIN_BODY_LENGTH:
        raise InvalidInputError(f"Comment must be at least {MIN_BODY_LENGTH} characters long")


def validate_new_comment(payload: CommentCreate) -> None:
    """Raise InvalidInputError for a malformed email, body or author name."""
    if not is_valid_email(payload.author_email.strip()):
        raise InvalidInputError("Invalid email format")
    validate_body(payload.body)
    if len(payload.author_name.strip()) < MIN_AUTHOR_NAME_LENGTH:
        raise InvalidInputError(
            f"Author name must be at least {MIN_AUTHOR_NAME_LENGTH} characters long"
        )
