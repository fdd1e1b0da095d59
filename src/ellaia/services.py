"""Service container: one repository shared by every entity service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ellaia.authors.services import AuthorsService
from ellaia.categories.services import CategoriesService
from ellaia.comments.services import CommentsService
from ellaia.config import EllaiaConfig, StorageBackendKind
from ellaia.contact.services import ContactService
from ellaia.posts.services import PostsService
from ellaia.repository.base import DataRepository
from ellaia.storage.adapter import StoreAdapter
from ellaia.storage.backends import JsonFileStorage, MemoryStorage, StorageBackend
from ellaia.storage.fixtures import FixtureLoader
from ellaia.tags.services import TagsService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    repository: DataRepository
    posts: PostsService
    categories: CategoriesService
    authors: AuthorsService
    comments: CommentsService
    tags: TagsService
    contact: ContactService

    @property
    def store(self) -> StoreAdapter:
        return self.repository.store

    @classmethod
    def from_repository(
        cls, repository: DataRepository, contact_latency: float = 0.0
    ) -> Services:
        return cls(
            repository=repository,
            posts=PostsService(repository),
            categories=CategoriesService(repository),
            authors=AuthorsService(repository),
            comments=CommentsService(repository),
            tags=TagsService(repository),
            contact=ContactService(repository, latency=contact_latency),
        )


def build_backend(config: EllaiaConfig) -> StorageBackend:
    if config.storage.backend == StorageBackendKind.FILE:
        return JsonFileStorage(Path(config.storage.directory).expanduser())
    return MemoryStorage()


def create_services(config: EllaiaConfig | None = None, seed: bool = True) -> Services:
    """Wire storage, repository and services from *config*.

    With *seed* set, missing collections are seeded from the fixtures
    before the container is returned.
    """
    config = config or EllaiaConfig()
    fixtures_dir = config.storage.fixtures_dir
    store = StoreAdapter(
        build_backend(config),
        fixtures=FixtureLoader(Path(fixtures_dir).expanduser() if fixtures_dir else None),
        prefix=config.storage.prefix,
    )
    if seed:
        seeded = store.seed_if_absent()
        if seeded:
            logger.info("Seeded collections: %s", ", ".join(seeded))
    repository = DataRepository(store, latency=config.api.latency)
    return Services.from_repository(repository, contact_latency=config.api.contact_latency)
