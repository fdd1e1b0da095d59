"""Base class for the per-entity services layered on the repository."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import ValidationError

from ellaia.repository.base import DataRepository, Patch, Record
from ellaia.repository.response import ApiResponse
from ellaia.shared.models import WireModel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=WireModel)


class EntityService(Generic[ModelT]):
    """Typed façade over one repository collection.

    Subclasses set ``entity`` (the collection name) and ``model`` (the
    pydantic type records are parsed into) and add domain queries built by
    filtering and sorting the full collection in memory.
    """

    entity: ClassVar[str]
    model: ClassVar[type[WireModel]]

    def __init__(self, repository: DataRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> DataRepository:
        return self._repository

    # ── Conversion helpers ───────────────────────────────────────

    def _parse(self, record: Record) -> ModelT:
        return self.model.model_validate(record)  # type: ignore[return-value]

    def _parse_many(self, response: ApiResponse[list[Record]]) -> ApiResponse[list[ModelT]]:
        if not response.success:
            return response.with_data([])
        try:
            return response.with_data([self._parse(r) for r in response.data])
        except ValidationError as exc:
            logger.error("Malformed %s record in storage: %s", self.entity, exc)
            return ApiResponse.fail([], f"Failed to load {self.entity}: malformed record")

    def _parse_one(self, response: ApiResponse[Record | None]) -> ApiResponse[ModelT | None]:
        if response.data is None:
            return response.with_data(None)
        try:
            return response.with_data(self._parse(response.data))
        except ValidationError as exc:
            logger.error("Malformed %s record in storage: %s", self.entity, exc)
            return ApiResponse.fail(None, f"Malformed {self.entity} record")

    def _derive(
        self,
        response: ApiResponse[list[ModelT]],
        transform: Callable[[list[ModelT]], Any],
        empty: Any,
    ) -> ApiResponse[Any]:
        """Apply *transform* to a successful listing, or pass the failure on."""
        if not response.success:
            return response.with_data(empty)
        return response.with_data(transform(response.data))

    def _find(
        self,
        response: ApiResponse[list[ModelT]],
        predicate: Callable[[ModelT], bool],
        missing: str,
    ) -> ApiResponse[ModelT | None]:
        """First item matching *predicate*; a miss is reported with *missing*."""
        if not response.success:
            return response.with_data(None)
        match = next((item for item in response.data if predicate(item)), None)
        if match is None:
            return ApiResponse.fail(None, missing)
        return ApiResponse.ok(match)

    # ── Repository pass-throughs ─────────────────────────────────

    async def list_all(self) -> ApiResponse[list[ModelT]]:
        return self._parse_many(await self._repository.list_all(self.entity))

    async def get_by_id(self, record_id: str) -> ApiResponse[ModelT | None]:
        return self._parse_one(await self._repository.get_by_id(self.entity, record_id))

    async def delete(self, record_id: str) -> ApiResponse[bool]:
        return await self._repository.delete(self.entity, record_id)

    async def _create(self, record: Record) -> ApiResponse[ModelT | None]:
        return self._parse_one(await self._repository.create(self.entity, record))

    async def _update(self, record_id: str, patch: Patch) -> ApiResponse[ModelT | None]:
        return self._parse_one(await self._repository.update(self.entity, record_id, patch))

    def is_loading(self, operation: str, record_id: str | None = None) -> bool:
        """Whether ``<operation>_<entity>[_<id>]`` is in flight."""
        key = f"{operation}_{self.entity}"
        if record_id:
            key = f"{key}_{record_id}"
        return self._repository.is_loading(key)
