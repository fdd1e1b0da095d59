"""Categories domain."""

from ellaia.categories.models import Category, CategoryCreate, CategoryUpdate
from ellaia.categories.services import CategoriesService

__all__ = [
    "CategoriesService",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
]
