"""Generic entity repository, its result type and loading flags."""

from ellaia.repository.base import DataRepository, Patch, Record, generate_id
from ellaia.repository.loading import LoadingRegistry
from ellaia.repository.response import ApiResponse

__all__ = [
    "ApiResponse",
    "DataRepository",
    "LoadingRegistry",
    "Patch",
    "Record",
    "generate_id",
]
