"""Category relationship API: add, promote and delete parent relationships.

Structural rejections come back as 422 (409 for a duplicate relationship)
with a machine-readable error code; a 409 RELATIONSHIP_CONFLICT means the
parent list changed since it was read and must be refetched.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_category_relationship_service_for_write
from app.application.dtos.category import RelationshipDeletionResult
from app.application.use_cases.categories import CategoryRelationshipService
from app.core.limiter import limit_writes
from app.schemas.category import (
    CategoryRelationshipCreateRequest,
    RelationshipDeletionResponse,
    RelationshipMutationResponse,
)

router = APIRouter()


def _deletion_warning(result: RelationshipDeletionResult) -> str | None:
    notes: list[str] = []
    if result.affected_entity_count:
        notes.append(
            f"{result.affected_entity_count} entit"
            f"{'y' if result.affected_entity_count == 1 else 'ies'} "
            "relied on this relationship for placement"
        )
    if result.requires_primary_selection:
        notes.append("the category has no primary parent; promote one of its parents")
    return "; ".join(notes) or None


@router.post("", response_model=RelationshipMutationResponse, status_code=201)
@limit_writes
async def add_category_parent(
    request: Request,
    body: CategoryRelationshipCreateRequest,
    service: Annotated[
        CategoryRelationshipService,
        Depends(get_category_relationship_service_for_write),
    ],
):
    """Add a parent. The first parent of a category becomes its primary parent."""
    result = await service.add_parent(body.parent_category_id, body.child_category_id)
    return RelationshipMutationResponse.model_validate(result)


@router.patch("/{relationship_id}/promote", response_model=RelationshipMutationResponse)
@limit_writes
async def promote_category_relationship(
    request: Request,
    relationship_id: str,
    service: Annotated[
        CategoryRelationshipService,
        Depends(get_category_relationship_service_for_write),
    ],
):
    """Make this relationship the primary parent; the previous primary is demoted."""
    result = await service.promote(relationship_id)
    return RelationshipMutationResponse.model_validate(result)


@router.delete("/{relationship_id}", response_model=RelationshipDeletionResponse)
@limit_writes
async def delete_category_relationship(
    request: Request,
    relationship_id: str,
    service: Annotated[
        CategoryRelationshipService,
        Depends(get_category_relationship_service_for_write),
    ],
):
    """Remove a parent relationship and report affected entities (advisory)."""
    result = await service.delete(relationship_id)
    response = RelationshipDeletionResponse.model_validate(result)
    return response.model_copy(update={"warning": _deletion_warning(result)})
