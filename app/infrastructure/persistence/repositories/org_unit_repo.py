"""OrgUnit repository. Returns application DTOs. Tenant-scoped with shared templates."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.org_unit import OrgUnitCreate, OrgUnitResult, OrgUnitUpdate
from app.domain.enums import VisibilityScope
from app.infrastructure.persistence.models.org_unit import OrgUnit
from app.infrastructure.persistence.repositories.scoped_repo import (
    TemplateScopedRepository,
)
from app.shared.utils.datetime import ensure_utc


def _to_result(u: OrgUnit) -> OrgUnitResult:
    """Map ORM OrgUnit to OrgUnitResult."""
    return OrgUnitResult(
        id=u.id,
        tenant_id=u.tenant_id,
        name=u.name,
        short_code=u.short_code,
        description=u.description,
        parent_id=u.parent_id,
        hierarchy_level=u.hierarchy_level,
        is_active=u.is_active,
        created_at=ensure_utc(u.created_at),
        updated_at=ensure_utc(u.updated_at),
    )


class OrgUnitRepository(TemplateScopedRepository[OrgUnit]):
    """Org unit (pôle) repository. Reads include shared templates; writes stay in own scope."""

    resource_type = "org_unit"

    def __init__(self, db: AsyncSession, tenant_id: str | None) -> None:
        super().__init__(db, OrgUnit, tenant_id)

    async def get_by_id(self, org_unit_id: str) -> OrgUnitResult | None:
        row = await super().get_by_id(org_unit_id)
        return _to_result(row) if row else None

    async def get_by_name(self, name: str) -> OrgUnitResult | None:
        result = await self.db.execute(
            select(OrgUnit).where(self._own_clause(), OrgUnit.name == name).limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_visible(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        is_active: bool | None = None,
    ) -> list[OrgUnitResult]:
        stmt = select(OrgUnit).where(self._scope_clause(scope))
        if is_active is not None:
            stmt = stmt.where(OrgUnit.is_active.is_(is_active))
        result = await self.db.execute(stmt.order_by(OrgUnit.name.asc(), OrgUnit.id.asc()))
        return [_to_result(u) for u in result.scalars().all()]

    async def count_children(self, org_unit_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(OrgUnit).where(OrgUnit.parent_id == org_unit_id)
        )
        return int(result.scalar_one())

    async def create_org_unit(
        self, data: OrgUnitCreate, hierarchy_level: int
    ) -> OrgUnitResult:
        entity = OrgUnit(
            tenant_id=self._tenant_id,
            name=data.name,
            short_code=data.short_code,
            description=data.description,
            parent_id=data.parent_id,
            hierarchy_level=hierarchy_level,
            is_active=data.is_active,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_org_unit(
        self,
        org_unit_id: str,
        data: OrgUnitUpdate,
        hierarchy_level: int | None = None,
    ) -> OrgUnitResult | None:
        entity = await self.get_owned(org_unit_id)
        if not entity:
            return None
        if data.name is not None:
            entity.name = data.name
        if data.short_code is not None:
            entity.short_code = data.short_code
        if data.description is not None:
            entity.description = data.description
        if data.is_active is not None:
            entity.is_active = data.is_active
        if data.clear_parent:
            entity.parent_id = None
        elif data.parent_id is not None:
            entity.parent_id = data.parent_id
        if hierarchy_level is not None:
            entity.hierarchy_level = hierarchy_level
        updated = await self.update(entity)
        return _to_result(updated)

    async def set_hierarchy_levels(self, levels: dict[str, int]) -> None:
        """Persist recomputed levels for descendants in own scope (one UPDATE per unit)."""
        for org_unit_id, level in levels.items():
            await self.db.execute(
                update(OrgUnit)
                .where(OrgUnit.id == org_unit_id, self._own_clause())
                .values(hierarchy_level=level)
            )
        await self.db.flush()

    async def delete_org_unit(self, org_unit_id: str) -> bool:
        entity = await self.get_owned(org_unit_id)
        if not entity:
            return False
        await self.delete(entity)
        return True
