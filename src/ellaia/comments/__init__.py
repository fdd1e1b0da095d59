"""Comments domain: reader comments and their moderation."""

from ellaia.comments.models import (
    Comment,
    CommentCreate,
    CommentFilters,
    CommentStatus,
    CommentUpdate,
    is_valid_email,
)
from ellaia.comments.services import SPAM_THRESHOLD, CommentsService

__all__ = [
    "SPAM_THRESHOLD",
    "Comment",
    "CommentCreate",
    "CommentFilters",
    "CommentStatus",
    "CommentUpdate",
    "CommentsService",
    "is_valid_email",
]
