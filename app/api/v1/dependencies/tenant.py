"""Tenant-related dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.tenant_validation import is_valid_tenant_id_format
from app.domain.exceptions import TenantInactiveException, TenantNotFoundException
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import TenantRepository


def _read_tenant_header(request: Request) -> str:
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not is_valid_tenant_id_format(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid tenant ID format (use alphanumeric, hyphen, underscore; max 64 characters)",
        )
    return value


async def _resolve_tenant_id(request: Request, db: AsyncSession) -> str:
    tenant_id = _read_tenant_header(request)
    tenant = await TenantRepository(db).get_by_id(tenant_id)
    if not tenant:
        raise TenantNotFoundException(tenant_id)
    if not tenant.accepts_traffic:
        raise TenantInactiveException(tenant_id, tenant.status.value)
    return tenant_id


async def get_tenant_id(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> str:
    """Resolve tenant ID from header and validate it exists (read requests)."""
    return await _resolve_tenant_id(request, db)


async def get_tenant_id_for_write(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> str:
    """Same as get_tenant_id, on the request's write transaction."""
    return await _resolve_tenant_id(request, db)
