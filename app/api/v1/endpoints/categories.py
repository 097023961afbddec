"""Category API: CRUD, tree, and read views of the parent relationship graph."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_category_relationship_service,
    get_category_service,
    get_category_service_for_write,
)
from app.application.use_cases._expansion import expansion_from_flags
from app.application.use_cases.categories import (
    CategoryRelationshipService,
    CategoryService,
)
from app.core.limiter import limit_writes
from app.domain.enums import VisibilityScope
from app.domain.hierarchy import count_nodes
from app.schemas.category import (
    CategoryChildResponse,
    CategoryContextsResponse,
    CategoryCreateRequest,
    CategoryParentResponse,
    CategoryResponse,
    CategoryTreeNode,
    CategoryTreeResponse,
    CategoryUpdateRequest,
)

router = APIRouter()


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    service: Annotated[CategoryService, Depends(get_category_service)],
    scope: VisibilityScope = Query(VisibilityScope.ALL),
    entity_category: str | None = Query(None, max_length=100),
):
    """List categories visible to the tenant, optionally filtered by classification."""
    items = await service.list_categories(scope, entity_category=entity_category)
    return [CategoryResponse.model_validate(c) for c in items]


@router.post("/categories", response_model=CategoryResponse, status_code=201)
@limit_writes
async def create_category(
    request: Request,
    body: CategoryCreateRequest,
    service: Annotated[CategoryService, Depends(get_category_service_for_write)],
):
    created = await service.create_category(
        body.name,
        body.entity_category,
        description=body.description,
        is_active=body.is_active,
    )
    return CategoryResponse.model_validate(created)


@router.get("/categories/tree", response_model=CategoryTreeResponse)
async def get_category_tree(
    service: Annotated[CategoryService, Depends(get_category_service)],
    search: str | None = Query(None, max_length=255),
    toggle: list[str] = Query(default=[]),
    expand_all: bool = Query(False),
    collapse_all: bool = Query(False),
):
    """Categories arranged under their primary parent."""
    forest = await service.get_category_tree(
        search=search, toggles=toggle, expand=expansion_from_flags(expand_all, collapse_all)
    )
    return CategoryTreeResponse(
        roots=[CategoryTreeNode.from_node(n) for n in forest],
        total=count_nodes(forest),
        search=search,
    )


@router.get("/root-categories", response_model=list[CategoryResponse])
async def list_root_categories(
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Categories without any parent relationship."""
    items = await service.list_root_categories()
    return [CategoryResponse.model_validate(c) for c in items]


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    category = await service.get_category(category_id)
    return CategoryResponse.model_validate(category)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
@limit_writes
async def update_category(
    request: Request,
    category_id: str,
    body: CategoryUpdateRequest,
    service: Annotated[CategoryService, Depends(get_category_service_for_write)],
):
    updated = await service.update_category(
        category_id,
        name=body.name,
        entity_category=body.entity_category,
        description=body.description,
        is_active=body.is_active,
    )
    return CategoryResponse.model_validate(updated)


@router.delete("/categories/{category_id}", status_code=204)
@limit_writes
async def delete_category(
    request: Request,
    category_id: str,
    service: Annotated[CategoryService, Depends(get_category_service_for_write)],
):
    """Delete a category together with its parent and child relationships."""
    await service.delete_category(category_id)


@router.get(
    "/categories/{category_id}/parents",
    response_model=list[CategoryParentResponse],
)
async def list_category_parents(
    category_id: str,
    service: Annotated[
        CategoryRelationshipService, Depends(get_category_relationship_service)
    ],
):
    """Parent relationships of a category, oldest first."""
    parents = await service.list_parents(category_id)
    return [CategoryParentResponse.model_validate(p) for p in parents]


@router.get(
    "/categories/{category_id}/candidate-parents",
    response_model=list[CategoryResponse],
)
async def list_candidate_parents(
    category_id: str,
    service: Annotated[
        CategoryRelationshipService, Depends(get_category_relationship_service)
    ],
):
    """Categories that can be added as a parent (not itself, not already a parent)."""
    items = await service.list_candidate_parents(category_id)
    return [CategoryResponse.model_validate(c) for c in items]


@router.get(
    "/categories/{category_id}/children",
    response_model=list[CategoryChildResponse],
)
async def list_category_children(
    category_id: str,
    service: Annotated[
        CategoryRelationshipService, Depends(get_category_relationship_service)
    ],
):
    children = await service.list_children(category_id)
    return [CategoryChildResponse.model_validate(c) for c in children]


@router.get(
    "/categories/{category_id}/contexts",
    response_model=CategoryContextsResponse,
)
async def get_category_contexts(
    category_id: str,
    service: Annotated[
        CategoryRelationshipService, Depends(get_category_relationship_service)
    ],
):
    """Every parent context of the category, primary first."""
    contexts = await service.list_contexts(category_id)
    return CategoryContextsResponse.model_validate(contexts)
