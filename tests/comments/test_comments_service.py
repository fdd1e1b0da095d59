"""Tests for CommentsService: validation, moderation and spam checks."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from ellaia.comments.models import CommentCreate, CommentFilters, CommentStatus, CommentUpdate
from ellaia.comments.services import CommentsService
from ellaia.repository.base import DataRepository
from ellaia.storage.adapter import StoreAdapter
from ellaia.storage.backends import MemoryStorage

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class SpyStorage(MemoryStorage):
    """MemoryStorage that counts every access."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def get_item(self, key: str) -> str | None:
        self.calls += 1
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> None:
        self.calls += 1
        super().set_item(key, value)


def _service(backend: MemoryStorage | None = None, clock=lambda: NOW) -> CommentsService:
    return CommentsService(DataRepository(StoreAdapter(backend or MemoryStorage())), clock=clock)


def _payload(**overrides: str) -> CommentCreate:
    fields = {
        "post_id": "post-2",
        "author_name": "  Helena Duarte ",
        "author_email": " Helena@Example.com ",
        "body": "  Adorei o artigo, obrigada!  ",
    }
    fields.update(overrides)
    return CommentCreate(**fields)


class TestValidation:
    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"author_email": "not-an-email"}, "Invalid email format"),
            ({"body": "ab"}, "Comment must be at least 3 characters long"),
            ({"body": "   ab   "}, "Comment must be at least 3 characters long"),
            ({"author_name": " H "}, "Author name must be at least 2 characters long"),
        ],
    )
    def test_rejected_without_touching_storage(self, overrides: dict[str, str], message: str):
        backend = SpyStorage()
        response = asyncio.run(_service(backend).create(_payload(**overrides)))

        assert response.success is False
        assert response.data is None
        assert response.message == message
        assert backend.calls == 0

    def test_update_rejects_short_body(self):
        backend = SpyStorage()
        response = asyncio.run(_service(backend).update("comment-1", CommentUpdate(body="no")))
        assert response.success is False
        assert backend.calls == 0


class TestCreate:
    def test_cleans_fields_and_forces_pending(self):
        service = _service()
        response = asyncio.run(service.create(_payload()))
        comment = response.data

        assert response.success is True
        assert comment.author_name == "Helena Duarte"
        assert comment.author_email == "helena@example.com"
        assert comment.body == "Adorei o artigo, obrigada!"
        assert comment.status == CommentStatus.PENDING
        assert comment.created_at == NOW
        assert asyncio.run(service.get_by_id(comment.id)).data == comment

    def test_status_cannot_be_supplied(self):
        with pytest.raises(ValueError):
            CommentCreate(**{**_payload().model_dump(), "status": "APPROVED"})


class TestQueries:
    def test_approved_for_post_newest_first(self):
        response = asyncio.run(_service().approved_for_post("post-1"))
        assert [c.id for c in response.data] == ["comment-2", "comment-1"]

    def test_pending_and_approved(self):
        service = _service()
        assert [c.id for c in asyncio.run(service.pending()).data] == ["comment-6", "comment-3"]
        assert {c.id for c in asyncio.run(service.approved()).data} == {
            "comment-1",
            "comment-2",
            "comment-4",
        }

    def test_by_author_email(self):
        response = asyncio.run(_service().by_author_email("marta@example.com"))
        assert [c.id for c in response.data] == ["comment-4", "comment-1"]

    def test_filters_combine(self):
        filters = CommentFilters(post_id="post-4", status=CommentStatus.PENDING)
        response = asyncio.run(_service().filtered(filters))
        assert [c.id for c in response.data] == ["comment-6"]

    def test_counts_by_status(self):
        counts = asyncio.run(_service().counts_by_status())
        assert counts == {
            CommentStatus.PENDING: 2,
            CommentStatus.APPROVED: 3,
            CommentStatus.REJECTED: 1,
        }


class TestModeration:
    def test_approve_and_reject(self):
        service = _service()
        assert asyncio.run(service.approve("comment-3")).data.status == CommentStatus.APPROVED
        assert asyncio.run(service.reject("comment-1")).data.status == CommentStatus.REJECTED

    def test_approve_many(self):
        service = _service()
        response = asyncio.run(service.approve_many(["comment-3", "comment-6"]))

        assert response.success is True
        assert {c.id for c in response.data} == {"comment-3", "comment-6"}
        assert asyncio.run(service.pending()).data == []

    def test_bulk_reports_partial_failure(self):
        service = _service()
        response = asyncio.run(service.reject_many(["comment-3", "ghost"]))

        assert response.success is False
        assert [c.id for c in response.data] == ["comment-3"]
        assert "ghost" in response.message
        assert asyncio.run(service.get_by_id("comment-3")).data.status == CommentStatus.REJECTED

    def test_delete_for_post(self):
        service = _service()
        response = asyncio.run(service.delete_for_post("post-1"))

        assert response.success is True
        remaining = asyncio.run(service.list_all()).data
        assert all(c.post_id != "post-1" for c in remaining)
        assert len(remaining) == 3


class TestSpam:
    def _flood(self, service: CommentsService, count: int) -> None:
        for i in range(count):
            asyncio.run(service.create(_payload(body=f"Comentário número {i}")))

    def test_three_recent_comments_are_not_spam(self):
        service = _service()
        self._flood(service, 3)
        assert asyncio.run(service.check_for_spam("helena@example.com")) is False

    def test_four_recent_comments_are_spam(self):
        service = _service()
        self._flood(service, 4)
        assert asyncio.run(service.check_for_spam(" Helena@Example.com")) is True

    def test_mixed_case_stored_emails_are_counted(self):
        service = _service()
        for i in range(4):
            record = {
                "postId": "post-1",
                "authorName": "Helena Duarte",
                "authorEmail": "Helena@Example.com",
                "body": f"Comentário antigo {i}",
                "status": "PENDING",
                "createdAt": "2024-06-01T11:45:00Z",
            }
            asyncio.run(service.repository.create("comments", record))
        assert asyncio.run(service.check_for_spam("helena@example.com")) is True

    def test_by_author_email_ignores_case(self):
        response = asyncio.run(_service().by_author_email(" MARTA@example.com "))
        assert [c.id for c in response.data] == ["comment-4", "comment-1"]

    def test_old_comments_fall_outside_window(self):
        clock_time = [NOW - timedelta(hours=2)]
        service = _service(clock=lambda: clock_time[0])
        self._flood(service, 4)
        clock_time[0] = NOW
        assert asyncio.run(service.check_for_spam("helena@example.com")) is False
        assert asyncio.run(service.check_for_spam("helena@example.com", window_minutes=180)) is True
