"""Tests for PostsService."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from ellaia.posts.models import Post, PostCreate, PostFilters, PostStatus, PostUpdate, reading_time
from ellaia.posts.services import PostsService
from ellaia.repository.base import DataRepository
from ellaia.storage.adapter import StoreAdapter
from ellaia.storage.backends import MemoryStorage

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _service(clock=lambda: NOW) -> PostsService:
    return PostsService(DataRepository(StoreAdapter(MemoryStorage())), clock=clock)


def _payload(**overrides: object) -> PostCreate:
    fields: dict[str, object] = {
        "title": "Ética & Ação no dia a dia",
        "excerpt": "Pequenas escolhas.",
        "content": "palavra " * 450,
        "author_id": "author-3",
        "category_id": "cat-1",
        "tags": ["tag-1"],
    }
    fields.update(overrides)
    return PostCreate(**fields)  # type: ignore[arg-type]


class TestReadingTime:
    @pytest.mark.parametrize(
        ("words", "minutes"), [(0, 1), (1, 1), (200, 1), (201, 2), (450, 3)]
    )
    def test_rounds_up(self, words: int, minutes: int):
        assert reading_time("w " * words) == minutes


class TestModels:
    def test_blank_published_at_reads_as_none(self):
        post = asyncio.run(_service().get_by_id("post-5")).data
        assert post is not None
        assert post.status == PostStatus.DRAFT
        assert post.published_at is None

    def test_update_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            PostUpdate(views=1000)  # type: ignore[call-arg]

    def test_record_round_trips_camel_case(self):
        post = asyncio.run(_service().get_by_id("post-1")).data
        record = post.to_record()
        assert record["authorId"] == "author-1"
        assert record["publishedAt"] == "2024-03-10T09:00:00Z"
        assert Post.model_validate(record) == post


class TestQueries:
    def test_list_all(self):
        response = asyncio.run(_service().list_all())
        assert response.success is True
        assert [p.id for p in response.data] == [f"post-{i}" for i in range(1, 7)]

    def test_get_by_slug(self):
        response = asyncio.run(_service().get_by_slug("liderar-sem-perder-a-leveza"))
        assert response.data.id == "post-2"

    def test_get_by_slug_missing_fails(self):
        response = asyncio.run(_service().get_by_slug("nada"))
        assert response.success is False
        assert response.data is None

    def test_published(self):
        response = asyncio.run(_service().published())
        assert {p.id for p in response.data} == {"post-1", "post-2", "post-3", "post-4"}

    def test_filters_combine_with_and(self):
        filters = PostFilters(category_id="cat-1", status=PostStatus.PUBLISHED)
        response = asyncio.run(_service().filtered(filters))
        assert [p.id for p in response.data] == ["post-1"]

    def test_filter_by_any_tag(self):
        response = asyncio.run(_service().filtered(PostFilters(tags=["tag-5", "tag-6"])))
        assert [p.id for p in response.data] == ["post-4", "post-5"]

    def test_filter_by_author(self):
        response = asyncio.run(_service().filtered(PostFilters(author_id="author-4")))
        assert [p.id for p in response.data] == ["post-3", "post-5"]

    def test_search_is_case_insensitive_over_text_fields(self):
        service = _service()
        by_title = asyncio.run(service.filtered(PostFilters(search="LIDERAR")))
        by_content = asyncio.run(service.filtered(PostFilters(search="duche")))
        by_excerpt = asyncio.run(service.filtered(PostFilters(search="jargão")))
        assert [p.id for p in by_title.data] == ["post-2"]
        assert [p.id for p in by_content.data] == ["post-4"]
        assert [p.id for p in by_excerpt.data] == ["post-3"]

    def test_empty_filters_match_everything(self):
        response = asyncio.run(_service().filtered(PostFilters()))
        assert len(response.data) == 6


class TestFeatured:
    def test_two_most_recent_first(self):
        response = asyncio.run(_service().featured(2))
        assert [p.id for p in response.data] == ["post-4", "post-2"]

    def test_default_limit(self):
        response = asyncio.run(_service().featured())
        assert [p.id for p in response.data] == ["post-4", "post-2", "post-1"]

    def test_excludes_unpublished(self):
        response = asyncio.run(_service().featured(10))
        assert all(p.status == PostStatus.PUBLISHED for p in response.data)
        assert len(response.data) == 4

    def test_naive_published_at_is_read_as_utc(self):
        service = _service()
        asyncio.run(service.update("post-1", PostUpdate(published_at=datetime(2024, 6, 1))))

        response = asyncio.run(service.featured(3))

        assert response.success is True
        assert [p.id for p in response.data] == ["post-1", "post-4", "post-2"]
        assert response.data[0].published_at == datetime(2024, 6, 1, tzinfo=UTC)

    def test_stored_naive_timestamp_does_not_break_ordering(self):
        service = _service()
        asyncio.run(
            service.repository.update("posts", "post-3", {"publishedAt": "2024-05-01T08:00:00"})
        )
        response = asyncio.run(service.featured(2))
        assert [p.id for p in response.data] == ["post-3", "post-4"]


class TestRelations:
    def test_joins_author_category_and_approved_comments(self):
        response = asyncio.run(_service().list_with_relations())
        post = next(p for p in response.data if p.id == "post-1")

        assert post.author.name == "Ana Ribeiro"
        assert post.category.slug == "autocuidado-e-bem-estar"
        assert [c.id for c in post.comments] == ["comment-2", "comment-1"]

    def test_missing_relations_are_none(self):
        service = _service()
        asyncio.run(service.repository.delete("authors", "author-2"))
        response = asyncio.run(service.list_with_relations())
        post = next(p for p in response.data if p.id == "post-2")
        assert post.author is None
        assert post.comments == []


class TestCreate:
    def test_derives_fields(self):
        service = _service()
        response = asyncio.run(service.create(_payload()))
        post = response.data

        assert response.success is True
        assert response.message == "posts created successfully"
        assert post.slug == "etica-acao-no-dia-a-dia"
        assert post.status == PostStatus.DRAFT
        assert post.published_at is None
        assert post.created_at == NOW
        assert post.updated_at == NOW
        assert post.reading_time == 3
        assert (post.views, post.likes) == (0, 0)

    def test_published_on_create_stamps_published_at(self):
        response = asyncio.run(_service().create(_payload(status=PostStatus.PUBLISHED)))
        assert response.data.published_at == NOW

    def test_create_then_get(self):
        service = _service()
        created = asyncio.run(service.create(_payload())).data
        fetched = asyncio.run(service.get_by_id(created.id)).data
        assert fetched == created


class TestUpdate:
    def test_only_patched_fields_change(self):
        service = _service()
        before = asyncio.run(service.get_by_id("post-3")).data
        after = asyncio.run(service.update("post-3", PostUpdate(excerpt="Novo resumo"))).data

        assert after.excerpt == "Novo resumo"
        unchanged = before.model_dump(exclude={"excerpt", "updated_at"})
        assert after.model_dump(exclude={"excerpt", "updated_at"}) == unchanged

    def test_updated_at_strictly_increases(self):
        frozen = datetime(2020, 1, 1, tzinfo=UTC)
        service = _service(clock=lambda: frozen)
        first = asyncio.run(service.update("post-1", PostUpdate(excerpt="a"))).data
        second = asyncio.run(service.update("post-1", PostUpdate(excerpt="b"))).data

        assert first.updated_at > datetime(2024, 3, 10, 9, 0, tzinfo=UTC)
        assert second.updated_at > first.updated_at

    def test_title_regenerates_slug(self):
        response = asyncio.run(_service().update("post-2", PostUpdate(title="Liderança com Coração")))
        assert response.data.slug == "lideranca-com-coracao"

    def test_content_recomputes_reading_time(self):
        response = asyncio.run(_service().update("post-2", PostUpdate(content="uma frase curta")))
        assert response.data.reading_time == 1

    def test_missing_post_fails(self):
        response = asyncio.run(_service().update("nope", PostUpdate(title="X")))
        assert response.success is False
        assert response.data is None


class TestLifecycle:
    def test_publish_stamps_published_at(self):
        response = asyncio.run(_service().publish("post-5"))
        assert response.data.status == PostStatus.PUBLISHED
        assert response.data.published_at == response.data.updated_at

    def test_republish_keeps_original_date(self):
        response = asyncio.run(_service().publish("post-1"))
        assert response.data.published_at == datetime(2024, 3, 10, 9, 0, tzinfo=UTC)

    def test_publish_honours_supplied_date(self):
        when = NOW - timedelta(days=3)
        response = asyncio.run(
            _service().update("post-5", PostUpdate(status=PostStatus.PUBLISHED, published_at=when))
        )
        assert response.data.published_at == when

    def test_unpublish_and_archive(self):
        service = _service()
        assert asyncio.run(service.unpublish("post-1")).data.status == PostStatus.DRAFT
        assert asyncio.run(service.archive("post-2")).data.status == PostStatus.ARCHIVED

    def test_delete_twice(self):
        service = _service()
        assert asyncio.run(service.delete("post-1")).success is True
        assert asyncio.run(service.get_by_id("post-1")).data is None
        assert asyncio.run(service.delete("post-1")).success is False


class TestCounters:
    def test_increment_views_and_likes(self):
        service = _service()
        assert asyncio.run(service.increment_views("post-1")).data.views == 321
        assert asyncio.run(service.increment_likes("post-1")).data.likes == 46

    def test_concurrent_likes_all_count(self):
        service = _service()

        async def like() -> None:
            await asyncio.gather(*(service.increment_likes("post-2") for _ in range(5)))

        asyncio.run(like())
        assert asyncio.run(service.get_by_id("post-2")).data.likes == 31 + 5

    def test_missing_post(self):
        response = asyncio.run(_service().increment_views("nope"))
        assert response.success is False
        assert "not found" in response.message

    def test_loading_key(self):
        service = _service()
        assert service.is_loading("update", "post-1") is False
