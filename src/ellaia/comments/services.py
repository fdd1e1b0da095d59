"""Comment moderation: validated creation, filtering, approval and spam checks."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta

from ellaia.comments.models import (
    Comment,
    CommentCreate,
    CommentFilters,
    CommentStatus,
    CommentUpdate,
    validate_body,
    validate_new_comment,
)
from ellaia.repository.base import DataRepository
from ellaia.repository.response import ApiResponse
from ellaia.shared.errors import InvalidInputError
from ellaia.shared.models import isoformat, utcnow
from ellaia.shared.service import EntityService

logger = logging.getLogger(__name__)

SPAM_THRESHOLD = 3


class CommentsService(EntityService[Comment]):
    entity = "comments"
    model = Comment

    def __init__(
        self,
        repository: DataRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(repository)
        self._clock = clock

    # ── Read operations ──────────────────────────────────────────

    async def filtered(self, filters: CommentFilters) -> ApiResponse[list[Comment]]:
        """Comments matching *filters*, newest first."""
        return self._derive(
            await self.list_all(),
            lambda comments: sorted(
                (c for c in comments if filters.matches(c)),
                key=lambda c: c.created_at,
                reverse=True,
            ),
            empty=[],
        )

    async def approved_for_post(self, post_id: str) -> ApiResponse[list[Comment]]:
        return await self.filtered(CommentFilters(post_id=post_id, status=CommentStatus.APPROVED))

    async def pending(self) -> ApiResponse[list[Comment]]:
        return await self.by_status(CommentStatus.PENDING)

    async def approved(self) -> ApiResponse[list[Comment]]:
        return await self.by_status(CommentStatus.APPROVED)

    async def by_status(self, status: CommentStatus) -> ApiResponse[list[Comment]]:
        return await self.filtered(CommentFilters(status=status))

    async def by_author_email(self, email: str) -> ApiResponse[list[Comment]]:
        return await self.filtered(CommentFilters(author_email=email))

    async def counts_by_status(self) -> dict[CommentStatus, int]:
        counts = dict.fromkeys(CommentStatus, 0)
        response = await self.list_all()
        if response.success:
            counts.update(Counter(c.status for c in response.data))
        return counts

    async def check_for_spam(self, email: str, window_minutes: int = 60) -> bool:
        """True if *email* posted more than three comments in the trailing window."""
        response = await self.by_author_email(email.strip().lower())
        if not response.success:
            return False
        cutoff = self._clock() - timedelta(minutes=window_minutes)
        recent = [c for c in response.data if c.created_at > cutoff]
        return len(recent) > SPAM_THRESHOLD

    # ── Write operations ─────────────────────────────────────────

    async def create(self, payload: CommentCreate) -> ApiResponse[Comment | None]:
        """Validate and store a new comment, always as PENDING.

        Invalid input is rejected before storage is touched.
        """
        try:
            validate_new_comment(payload)
        except InvalidInputError as exc:
            logger.info("Rejected comment on %s: %s", payload.post_id, exc)
            return ApiResponse.fail(None, str(exc))

        return await self._create(
            {
                "postId": payload.post_id,
                "authorName": payload.author_name.strip(),
                "authorEmail": payload.author_email.strip().lower(),
                "body": payload.body.strip(),
                "status": CommentStatus.PENDING.value,
                "createdAt": isoformat(self._clock()),
            }
        )

    async def update(self, comment_id: str, updates: CommentUpdate) -> ApiResponse[Comment | None]:
        if updates.body is not None:
            try:
                validate_body(updates.body)
            except InvalidInputError as exc:
                return ApiResponse.fail(None, str(exc))

        patch = updates.to_patch()
        if updates.author_name is not None:
            patch["authorName"] = updates.author_name.strip()
        if updates.author_email is not None:
            patch["authorEmail"] = updates.author_email.strip().lower()
        if updates.body is not None:
            patch["body"] = updates.body.strip()
        return await self._update(comment_id, patch)

    async def approve(self, comment_id: str) -> ApiResponse[Comment | None]:
        return await self.update(comment_id, CommentUpdate(status=CommentStatus.APPROVED))

    async def reject(self, comment_id: str) -> ApiResponse[Comment | None]:
        return await self.update(comment_id, CommentUpdate(status=CommentStatus.REJECTED))

    async def approve_many(self, comment_ids: list[str]) -> ApiResponse[list[Comment]]:
        return await self._set_status_many(comment_ids, CommentStatus.APPROVED)

    async def reject_many(self, comment_ids: list[str]) -> ApiResponse[list[Comment]]:
        return await self._set_status_many(comment_ids, CommentStatus.REJECTED)

    async def _set_status_many(
        self, comment_ids: list[str], status: CommentStatus
    ) -> ApiResponse[list[Comment]]:
        """Update every id and aggregate: success only if all updates succeed."""
        results = await asyncio.gather(
            *(self.update(cid, CommentUpdate(status=status)) for cid in comment_ids)
        )
        updated = [r.data for r in results if r.success and r.data is not None]
        failed = [cid for cid, r in zip(comment_ids, results) if not r.success]
        if failed:
            return ApiResponse.fail(
                updated,
                f"Updated {len(updated)} of {len(comment_ids)} comments; "
                f"failed: {', '.join(failed)}",
            )
        return ApiResponse.ok(updated, f"Updated {len(updated)} comments to {status}")

    async def delete_for_post(self, post_id: str) -> ApiResponse[bool]:
        """Delete every comment attached to *post_id*."""
        response = await self.filtered(CommentFilters(post_id=post_id))
        if not response.success:
            return ApiResponse.fail(False, f"Failed to get comments for post {post_id}")
        results = await asyncio.gather(*(self.delete(c.id) for c in response.data))
        deleted = sum(1 for r in results if r.success)
        if deleted != len(results):
            return ApiResponse.fail(
                False, f"Deleted {deleted} of {len(results)} comments for post {post_id}"
            )
        return ApiResponse.ok(True, f"Deleted {deleted} comments for post {post_id}")
