"""Category use cases."""

from app.application.use_cases.categories.category_operations import CategoryService
from app.application.use_cases.categories.category_relationship_operations import (
    CategoryRelationshipService,
)

__all__ = ["CategoryRelationshipService", "CategoryService"]
