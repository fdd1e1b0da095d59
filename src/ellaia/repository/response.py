"""Uniform result container returned by every repository and service call."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success/failure envelope carrying ``data`` and an optional ``message``.

    Failed responses still carry a placeholder ``data`` of the expected shape
    (``[]``, ``None`` or ``False``) so callers can branch on ``success``
    without special-casing the payload.
    """

    data: T
    success: bool
    message: str | None = None

    @classmethod
    def ok(cls, data: Any, message: str | None = None) -> ApiResponse[Any]:
        return cls(data=data, success=True, message=message)

    @classmethod
    def fail(cls, data: Any, message: str) -> ApiResponse[Any]:
        return cls(data=data, success=False, message=message)

    def with_data(self, data: Any) -> ApiResponse[Any]:
        """Copy of this response carrying *data* instead."""
        return self.model_copy(update={"data": data})
