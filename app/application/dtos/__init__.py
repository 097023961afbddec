"""Application DTOs: read-models and command inputs, independent of the ORM."""

from app.application.dtos.category import (
    CategoryChildView,
    CategoryContext,
    CategoryContexts,
    CategoryParentView,
    CategoryRelationshipResult,
    CategoryResult,
    RelationshipDeletionResult,
    RelationshipMutationResult,
    TreeCategory,
)
from app.application.dtos.org_unit import OrgUnitCreate, OrgUnitResult, OrgUnitUpdate
from app.application.dtos.tenant import TenantResult

__all__ = [
    "CategoryChildView",
    "CategoryContext",
    "CategoryContexts",
    "CategoryParentView",
    "CategoryRelationshipResult",
    "CategoryResult",
    "OrgUnitCreate",
    "OrgUnitResult",
    "OrgUnitUpdate",
    "RelationshipDeletionResult",
    "RelationshipMutationResult",
    "TenantResult",
    "TreeCategory",
]
