"""Org unit (pôle) operations: list, tree, create, update/re-parent, delete."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from app.application.dtos.org_unit import OrgUnitCreate, OrgUnitResult, OrgUnitUpdate
from app.application.interfaces.repositories import IOrgUnitRepository
from app.application.use_cases._expansion import apply_expansion
from app.domain.enums import VisibilityScope
from app.domain.exceptions import (
    CycleDetectedException,
    DuplicateNameException,
    OrgUnitHasChildrenException,
    ReadOnlyTemplateException,
    ResourceNotFoundException,
    SelfReferenceException,
    ValidationException,
)
from app.domain.hierarchy import (
    Forest,
    ancestor_ids,
    apply_toggles,
    build_tree,
    depth_of,
    filter_tree,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced

logger = get_logger(__name__)


class OrgUnitService:
    """Single-parent org unit hierarchy for one tenant scope.

    Reads see the tenant's units plus shared templates; writes are limited to
    the tenant's own units.
    """

    def __init__(self, org_unit_repo: IOrgUnitRepository) -> None:
        self.org_unit_repo = org_unit_repo

    async def list_units(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        is_active: bool | None = None,
    ) -> list[OrgUnitResult]:
        return await self.org_unit_repo.list_visible(scope, is_active=is_active)

    async def get_unit(self, org_unit_id: str) -> OrgUnitResult:
        unit = await self.org_unit_repo.get_by_id(org_unit_id)
        if not unit:
            raise ResourceNotFoundException("org_unit", org_unit_id)
        return unit

    async def get_tree(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        search: str | None = None,
        toggles: Sequence[str] = (),
        expand: bool | None = None,
        is_active: bool | None = None,
    ) -> Forest:
        """Build the forest, replay navigation toggles, then superimpose the search filter."""
        units = await self.org_unit_repo.list_visible(scope, is_active=is_active)
        forest = build_tree(units)
        forest = apply_expansion(forest, expand)
        forest = apply_toggles(forest, toggles)
        return filter_tree(forest, search)

    @traced("org_unit.create")
    async def create_unit(self, data: OrgUnitCreate) -> OrgUnitResult:
        """Create a unit, as a root or under a visible parent."""
        name = (data.name or "").strip()
        if not name:
            raise ValidationException("Org unit name is required", field="name")
        if await self.org_unit_repo.get_by_name(name):
            raise DuplicateNameException("org_unit", name, self.org_unit_repo.tenant_id)
        level = 1
        if data.parent_id:
            parent = await self.org_unit_repo.get_by_id(data.parent_id)
            if not parent:
                raise ResourceNotFoundException("org_unit", data.parent_id)
            level = parent.hierarchy_level + 1
        created = await self.org_unit_repo.create_org_unit(
            OrgUnitCreate(
                name=name,
                short_code=data.short_code,
                description=data.description,
                parent_id=data.parent_id or None,
                is_active=data.is_active,
            ),
            hierarchy_level=level,
        )
        logger.info(
            "Org unit created: %s (tenant_id=%s, parent_id=%s, level=%d)",
            created.id,
            created.tenant_id,
            created.parent_id,
            created.hierarchy_level,
        )
        return created

    def _ensure_writable(self, unit: OrgUnitResult) -> None:
        if unit.tenant_id != self.org_unit_repo.tenant_id:
            raise ReadOnlyTemplateException("org_unit", unit.id)

    @traced("org_unit.update")
    async def update_unit(self, org_unit_id: str, data: OrgUnitUpdate) -> OrgUnitResult:
        """Partial update. Re-parenting is rejected when it would create a cycle."""
        unit = await self.get_unit(org_unit_id)
        self._ensure_writable(unit)

        if data.name is not None:
            name = data.name.strip()
            if not name:
                raise ValidationException("Org unit name is required", field="name")
            if name != unit.name:
                existing = await self.org_unit_repo.get_by_name(name)
                if existing and existing.id != unit.id:
                    raise DuplicateNameException(
                        "org_unit", name, self.org_unit_repo.tenant_id
                    )
            data = replace(data, name=name)

        reparent = data.clear_parent or (
            data.parent_id is not None and data.parent_id != unit.parent_id
        )
        if not reparent:
            updated = await self.org_unit_repo.update_org_unit(org_unit_id, data)
            if not updated:
                raise ResourceNotFoundException("org_unit", org_unit_id)
            return updated

        new_parent_id = None if data.clear_parent else data.parent_id
        units = await self.org_unit_repo.list_visible(VisibilityScope.ALL)
        parent_of = {u.id: u.parent_id for u in units}
        if new_parent_id is not None:
            if new_parent_id == org_unit_id:
                raise SelfReferenceException(org_unit_id)
            if new_parent_id not in parent_of:
                raise ResourceNotFoundException("org_unit", new_parent_id)
            if org_unit_id in ancestor_ids(parent_of, new_parent_id):
                raise CycleDetectedException(new_parent_id, org_unit_id)
        parent_of[org_unit_id] = new_parent_id

        updated = await self.org_unit_repo.update_org_unit(
            org_unit_id,
            data,
            hierarchy_level=depth_of(parent_of, org_unit_id),
        )
        if not updated:
            raise ResourceNotFoundException("org_unit", org_unit_id)

        levels = {
            uid: depth_of(parent_of, uid)
            for uid in parent_of
            if org_unit_id in ancestor_ids(parent_of, uid)
        }
        if levels:
            await self.org_unit_repo.set_hierarchy_levels(levels)
        logger.info(
            "Org unit re-parented: %s -> parent %s (level=%d)",
            org_unit_id,
            new_parent_id,
            updated.hierarchy_level,
        )
        return updated

    @traced("org_unit.delete")
    async def delete_unit(self, org_unit_id: str) -> None:
        """Delete a leaf unit. Units with children are rejected."""
        unit = await self.get_unit(org_unit_id)
        self._ensure_writable(unit)
        child_count = await self.org_unit_repo.count_children(org_unit_id)
        if child_count:
            raise OrgUnitHasChildrenException(org_unit_id, child_count)
        if not await self.org_unit_repo.delete_org_unit(org_unit_id):
            raise ResourceNotFoundException("org_unit", org_unit_id)
        logger.info("Org unit deleted: %s", org_unit_id)
