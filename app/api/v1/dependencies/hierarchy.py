"""Org unit and category dependencies (composition root).

Services for reads are built on get_db; services for writes on
get_db_transactional, so a relationship mutation (lock, validate, write)
runs in a single transaction.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.use_cases.categories import (
    CategoryRelationshipService,
    CategoryService,
)
from app.application.use_cases.org_units import OrgUnitService
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    CategoryRelationshipRepository,
    CategoryRepository,
    ClassifiedEntityRepository,
    OrgUnitRepository,
)

from .tenant import get_tenant_id, get_tenant_id_for_write


def _relationship_service(db: AsyncSession, tenant_id: str) -> CategoryRelationshipService:
    return CategoryRelationshipService(
        category_repo=CategoryRepository(db, tenant_id),
        relationship_repo=CategoryRelationshipRepository(db, tenant_id),
        entity_repo=ClassifiedEntityRepository(db, tenant_id),
        auto_promote_on_primary_delete=get_settings().auto_promote_on_primary_delete,
    )


def _category_service(db: AsyncSession, tenant_id: str) -> CategoryService:
    return CategoryService(
        category_repo=CategoryRepository(db, tenant_id),
        relationship_repo=CategoryRelationshipRepository(db, tenant_id),
    )


async def get_org_unit_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
) -> OrgUnitService:
    """OrgUnitService for read operations."""
    return OrgUnitService(OrgUnitRepository(db, tenant_id))


async def get_org_unit_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    tenant_id: Annotated[str, Depends(get_tenant_id_for_write)],
) -> OrgUnitService:
    """OrgUnitService for writes (transactional)."""
    return OrgUnitService(OrgUnitRepository(db, tenant_id))


async def get_category_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
) -> CategoryService:
    return _category_service(db, tenant_id)


async def get_category_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    tenant_id: Annotated[str, Depends(get_tenant_id_for_write)],
) -> CategoryService:
    return _category_service(db, tenant_id)


async def get_category_relationship_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
) -> CategoryRelationshipService:
    return _relationship_service(db, tenant_id)


async def get_category_relationship_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    tenant_id: Annotated[str, Depends(get_tenant_id_for_write)],
) -> CategoryRelationshipService:
    return _relationship_service(db, tenant_id)
