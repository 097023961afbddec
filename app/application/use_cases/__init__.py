"""Application use cases: one entry point per workflow."""

from app.application.use_cases.categories import (
    CategoryRelationshipService,
    CategoryService,
)
from app.application.use_cases.org_units import OrgUnitService

__all__ = [
    "CategoryRelationshipService",
    "CategoryService",
    "OrgUnitService",
]
