"""Tests for the service container."""

import asyncio
from pathlib import Path

from ellaia.config import EllaiaConfig, merge_cli_overrides
from ellaia.services import create_services
from ellaia.storage.backends import JsonFileStorage, MemoryStorage


def _config(**overrides: object) -> EllaiaConfig:
    return merge_cli_overrides(EllaiaConfig(), latency_ms=0, contact_latency_ms=0, **overrides)


class TestCreateServices:
    def test_memory_backend_seeded(self):
        services = create_services(_config())
        assert isinstance(services.store.backend, MemoryStorage)
        assert services.store.read_collection("posts") is not None

    def test_services_share_one_repository(self):
        services = create_services(_config())
        for service in (
            services.posts,
            services.categories,
            services.authors,
            services.comments,
            services.tags,
            services.contact,
        ):
            assert service.repository is services.repository

    def test_latency_from_config(self):
        services = create_services(merge_cli_overrides(EllaiaConfig(), latency_ms=250))
        assert services.repository.latency == 0.25

    def test_file_backend_persists(self, tmp_path: Path):
        services = create_services(_config(data_dir=tmp_path))
        assert isinstance(services.store.backend, JsonFileStorage)
        asyncio.run(services.tags.delete("tag-1"))

        reopened = create_services(_config(data_dir=tmp_path))
        ids = [t.id for t in asyncio.run(reopened.tags.list_all()).data]
        assert "tag-1" not in ids

    def test_without_seeding(self):
        services = create_services(_config(), seed=False)
        assert services.store.read_collection("posts") is None

    def test_custom_prefix_and_fixtures(self, tmp_path: Path):
        (tmp_path / "tags.json").write_text('[{"id": "t", "slug": "t", "name": "Tt"}]', encoding="utf-8")
        services = create_services(_config(prefix="test_", fixtures_dir=tmp_path))

        assert services.store.backend.get_item("test_tags") is not None
        assert [t.id for t in asyncio.run(services.tags.list_all()).data] == ["t"]
