"""Pydantic request/response schemas for the API."""

from app.schemas.category import (
    CategoryChildResponse,
    CategoryContextsResponse,
    CategoryCreateRequest,
    CategoryParentResponse,
    CategoryRelationshipCreateRequest,
    CategoryRelationshipResponse,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdateRequest,
    RelationshipDeletionResponse,
    RelationshipMutationResponse,
)
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.org_unit import (
    OrgUnitCreateRequest,
    OrgUnitResponse,
    OrgUnitTreeResponse,
    OrgUnitUpdateRequest,
)

__all__ = [
    "CategoryChildResponse",
    "CategoryContextsResponse",
    "CategoryCreateRequest",
    "CategoryParentResponse",
    "CategoryRelationshipCreateRequest",
    "CategoryRelationshipResponse",
    "CategoryResponse",
    "CategoryTreeResponse",
    "CategoryUpdateRequest",
    "HealthResponse",
    "ReadinessResponse",
    "OrgUnitCreateRequest",
    "OrgUnitResponse",
    "OrgUnitTreeResponse",
    "OrgUnitUpdateRequest",
    "RelationshipDeletionResponse",
    "RelationshipMutationResponse",
]
