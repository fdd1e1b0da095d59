"""Collection-agnostic CRUD with simulated network behaviour.

Every public operation is a coroutine that waits a configurable artificial
latency and always resolves to an :class:`ApiResponse`; faults raised while
reading or writing are logged and converted into failed responses.

Within one event loop the read-modify-write of a mutation has no suspension
point between the read and the write, so two coroutines of the same process
never interleave on a collection.  Separate processes sharing one file store
are not coordinated (last write wins).
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from collections.abc import Callable, Mapping
from typing import Any

from ellaia.repository.loading import LoadingRegistry
from ellaia.repository.response import ApiResponse
from ellaia.shared.errors import RecordNotFoundError
from ellaia.storage.adapter import StoreAdapter

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Patch = Mapping[str, Any] | Callable[[Record], Mapping[str, Any]]

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_id() -> str:
    """Millisecond timestamp plus a random suffix, both base 36.

    Unique enough within one process; not coordinated across processes.
    """
    return to_base36(int(time.time() * 1000)) + random_base36(11)


class DataRepository:
    """Generic repository over named collections of JSON records."""

    def __init__(
        self,
        store: StoreAdapter,
        latency: float = 0.0,
        loading: LoadingRegistry | None = None,
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self._store = store
        self._latency = max(latency, 0.0)
        self._loading = loading or LoadingRegistry()
        self._id_factory = id_factory

    @property
    def store(self) -> StoreAdapter:
        return self._store

    @property
    def loading(self) -> LoadingRegistry:
        return self._loading

    @property
    def latency(self) -> float:
        return self._latency

    def is_loading(self, key: str) -> bool:
        return self._loading.is_loading(key)

    # ── Private helpers ──────────────────────────────────────────

    async def _simulate_latency(self) -> None:
        await asyncio.sleep(self._latency)

    def _fetch(self, entity: str) -> list[Record]:
        records = self._store.read_collection(entity)
        if records is None:
            # Not in storage yet: fall back to the fixture and keep it.
            records = self._store.load_fixture(entity)
            self._store.write_collection(entity, records)
            logger.info("Loaded %s from fixtures (%d records)", entity, len(records))
        return records

    def _new_id(self, records: list[Record]) -> str:
        taken = {r.get("id") for r in records}
        new_id = self._id_factory()
        while new_id in taken:
            new_id = self._id_factory()
        return new_id

    def _failure(self, action: str, entity: str, exc: Exception, data: Any) -> ApiResponse[Any]:
        message = f"Failed to {action} {entity}: {exc}"
        logger.error(message)
        return ApiResponse.fail(data, message)

    # ── Read operations ──────────────────────────────────────────

    async def list_all(self, entity: str) -> ApiResponse[list[Record]]:
        """Return every record in *entity*, seeding from fixtures on a miss."""
        with self._loading.track(f"get_{entity}"):
            try:
                records = self._fetch(entity)
            except Exception as exc:
                response = self._failure("load", entity, exc, data=[])
            else:
                response = ApiResponse.ok(records)
            await self._simulate_latency()
            return response

    async def get_by_id(self, entity: str, record_id: str) -> ApiResponse[Record | None]:
        """Look a record up by id.

        A miss is a successful response with ``data=None``.
        """
        with self._loading.track(f"get_{entity}_{record_id}"):
            response = await self.list_all(entity)
        if not response.success:
            return ApiResponse.fail(None, response.message or f"Failed to load {entity}")
        record = next((r for r in response.data if r.get("id") == record_id), None)
        if record is None:
            return ApiResponse.ok(None, f"{entity} with id {record_id} not found")
        return ApiResponse.ok(record)

    # ── Write operations ─────────────────────────────────────────

    async def create(self, entity: str, payload: Mapping[str, Any]) -> ApiResponse[Record | None]:
        """Append a new record, assigning its id.  Any ``id`` in *payload* is ignored."""
        with self._loading.track(f"create_{entity}"):
            await self._simulate_latency()
            try:
                records = self._fetch(entity)
                fields = {k: v for k, v in payload.items() if k != "id"}
                record = {**fields, "id": self._new_id(records)}
                self._store.write_collection(entity, [*records, record])
            except Exception as exc:
                return self._failure("create", entity, exc, data=None)
            logger.debug("Created %s %s", entity, record["id"])
            return ApiResponse.ok(record, f"{entity} created successfully")

    async def update(self, entity: str, record_id: str, patch: Patch) -> ApiResponse[Record | None]:
        """Shallow-merge *patch* over the record with *record_id*.

        *patch* is either a mapping or a callable that receives the current
        record and returns the mapping to merge.  The id is never
        overwritten.  A missing record is a failure.
        """
        with self._loading.track(f"update_{entity}_{record_id}"):
            await self._simulate_latency()
            try:
                records = self._fetch(entity)
                index = next(
                    (i for i, r in enumerate(records) if r.get("id") == record_id), None
                )
                if index is None:
                    raise RecordNotFoundError(entity, record_id)
                current = records[index]
                changes = patch(current) if callable(patch) else patch
                updated = {**current, **changes, "id": record_id}
                records[index] = updated
                self._store.write_collection(entity, records)
            except Exception as exc:
                return self._failure("update", entity, exc, data=None)
            logger.debug("Updated %s %s (%s)", entity, record_id, ", ".join(changes))
            return ApiResponse.ok(updated, f"{entity} updated successfully")

    async def delete(self, entity: str, record_id: str) -> ApiResponse[bool]:
        """Remove the record with *record_id*.  A missing record is a failure."""
        with self._loading.track(f"delete_{entity}_{record_id}"):
            await self._simulate_latency()
            try:
                records = self._fetch(entity)
                remaining = [r for r in records if r.get("id") != record_id]
                if len(remaining) == len(records):
                    raise RecordNotFoundError(entity, record_id)
                self._store.write_collection(entity, remaining)
            except Exception as exc:
                return self._failure("delete", entity, exc, data=False)
            logger.debug("Deleted %s %s", entity, record_id)
            return ApiResponse.ok(True, f"{entity} deleted successfully")
