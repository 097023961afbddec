"""Org unit (pôle) API: thin routes delegating to OrgUnitService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import get_org_unit_service, get_org_unit_service_for_write
from app.application.dtos.org_unit import OrgUnitCreate, OrgUnitUpdate
from app.application.use_cases._expansion import expansion_from_flags
from app.application.use_cases.org_units import OrgUnitService
from app.core.limiter import limit_writes
from app.domain.enums import VisibilityScope
from app.domain.hierarchy import count_nodes
from app.schemas.org_unit import (
    OrgUnitCreateRequest,
    OrgUnitResponse,
    OrgUnitTreeNode,
    OrgUnitTreeResponse,
    OrgUnitUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[OrgUnitResponse])
async def list_org_units(
    service: Annotated[OrgUnitService, Depends(get_org_unit_service)],
    scope: VisibilityScope = Query(VisibilityScope.ALL),
    is_active: bool | None = Query(None),
):
    """List org units visible to the tenant (own units and shared templates)."""
    units = await service.list_units(scope, is_active=is_active)
    return [OrgUnitResponse.model_validate(u) for u in units]


@router.get("/tree", response_model=OrgUnitTreeResponse)
async def get_org_unit_tree(
    service: Annotated[OrgUnitService, Depends(get_org_unit_service)],
    scope: VisibilityScope = Query(VisibilityScope.ALL),
    search: str | None = Query(None, max_length=255),
    toggle: list[str] = Query(
        default=[], description="Node ids to toggle, replayed in order"
    ),
    expand_all: bool = Query(False),
    collapse_all: bool = Query(False),
    is_active: bool | None = Query(None),
):
    """Org unit forest: roots expanded (or every node, or none), toggles replayed, then the search filter."""
    forest = await service.get_tree(
        scope,
        search=search,
        toggles=toggle,
        expand=expansion_from_flags(expand_all, collapse_all),
        is_active=is_active,
    )
    return OrgUnitTreeResponse(
        roots=[OrgUnitTreeNode.from_node(n) for n in forest],
        total=count_nodes(forest),
        search=search,
    )


@router.post("", response_model=OrgUnitResponse, status_code=201)
@limit_writes
async def create_org_unit(
    request: Request,
    body: OrgUnitCreateRequest,
    service: Annotated[OrgUnitService, Depends(get_org_unit_service_for_write)],
):
    """Create an org unit in the tenant, as a root or under parent_id."""
    created = await service.create_unit(
        OrgUnitCreate(
            name=body.name,
            short_code=body.short_code,
            description=body.description,
            parent_id=body.parent_id,
            is_active=body.is_active,
        )
    )
    return OrgUnitResponse.model_validate(created)


@router.get("/{org_unit_id}", response_model=OrgUnitResponse)
async def get_org_unit(
    org_unit_id: str,
    service: Annotated[OrgUnitService, Depends(get_org_unit_service)],
):
    unit = await service.get_unit(org_unit_id)
    return OrgUnitResponse.model_validate(unit)


@router.patch("/{org_unit_id}", response_model=OrgUnitResponse)
@limit_writes
async def update_org_unit(
    request: Request,
    org_unit_id: str,
    body: OrgUnitUpdateRequest,
    service: Annotated[OrgUnitService, Depends(get_org_unit_service_for_write)],
):
    """Partial update. Re-parenting that would create a cycle is rejected (422)."""
    updated = await service.update_unit(
        org_unit_id,
        OrgUnitUpdate(
            name=body.name,
            short_code=body.short_code,
            description=body.description,
            parent_id=body.parent_id,
            clear_parent=body.clear_parent,
            is_active=body.is_active,
        ),
    )
    return OrgUnitResponse.model_validate(updated)


@router.delete("/{org_unit_id}", status_code=204)
@limit_writes
async def delete_org_unit(
    request: Request,
    org_unit_id: str,
    service: Annotated[OrgUnitService, Depends(get_org_unit_service_for_write)],
):
    """Delete an org unit. Rejected (422) while it has child units."""
    await service.delete_unit(org_unit_id)
