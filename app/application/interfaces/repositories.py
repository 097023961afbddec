"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.

Implementations are constructed for one tenant scope: they see that tenant's
rows plus shared templates (tenant_id NULL) and write only that tenant's rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from app.domain.enums import TenantStatus, VisibilityScope

if TYPE_CHECKING:
    from app.application.dtos.category import (
        CategoryChildView,
        CategoryParentView,
        CategoryRelationshipResult,
        CategoryResult,
    )
    from app.application.dtos.org_unit import (
        OrgUnitCreate,
        OrgUnitResult,
        OrgUnitUpdate,
    )
    from app.application.dtos.tenant import TenantResult


# Tenant repository interface
class ITenantRepository(Protocol):
    """Protocol for tenant repository (DIP)."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by ID."""

    async def get_by_code(self, code: str) -> TenantResult | None:
        """Return tenant by unique code."""

    async def create_tenant(
        self, code: str, name: str, status: TenantStatus = TenantStatus.ACTIVE
    ) -> TenantResult:
        """Create a tenant; return created entity."""


# Org unit repository interface
class IOrgUnitRepository(Protocol):
    """Protocol for org unit (pôle) persistence (DIP)."""

    @property
    def tenant_id(self) -> str | None:
        """Tenant scope of this repository (None = shared templates)."""

    async def get_by_id(self, org_unit_id: str) -> OrgUnitResult | None:
        """Return a visible org unit by ID."""

    async def get_by_name(self, name: str) -> OrgUnitResult | None:
        """Return the org unit with this name in the repository's own scope."""

    async def list_visible(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        is_active: bool | None = None,
    ) -> list[OrgUnitResult]:
        """Return visible org units ordered by name."""

    async def count_children(self, org_unit_id: str) -> int:
        """Return the number of direct child units (across all scopes)."""

    async def create_org_unit(
        self, data: OrgUnitCreate, hierarchy_level: int
    ) -> OrgUnitResult:
        """Create an org unit in the repository's scope."""

    async def update_org_unit(
        self,
        org_unit_id: str,
        data: OrgUnitUpdate,
        hierarchy_level: int | None = None,
    ) -> OrgUnitResult | None:
        """Apply a partial update; return None if not found in own scope."""

    async def set_hierarchy_levels(self, levels: dict[str, int]) -> None:
        """Persist recomputed hierarchy levels (after a re-parent)."""

    async def delete_org_unit(self, org_unit_id: str) -> bool:
        """Delete an org unit in own scope; return False if not found."""


# Category repository interface
class ICategoryRepository(Protocol):
    """Protocol for category persistence (DIP)."""

    @property
    def tenant_id(self) -> str | None:
        """Tenant scope of this repository (None = shared templates)."""

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        """Return a visible category by ID."""

    async def get_by_name(
        self, name: str, entity_category: str
    ) -> CategoryResult | None:
        """Return the category with this name and tag in own scope."""

    async def list_visible(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        entity_category: str | None = None,
    ) -> list[CategoryResult]:
        """Return visible categories ordered by name."""

    async def list_roots(self) -> list[CategoryResult]:
        """Return visible categories that have no parent relationship."""

    async def list_candidate_parents(self, child_id: str) -> list[CategoryResult]:
        """Return visible categories that are neither the child nor already its parents."""

    async def create_category(
        self,
        name: str,
        entity_category: str,
        *,
        description: str | None = None,
        is_active: bool = True,
    ) -> CategoryResult:
        """Create a category in the repository's scope."""

    async def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        entity_category: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> CategoryResult | None:
        """Apply a partial update; return None if not found in own scope."""

    async def delete_category(self, category_id: str) -> bool:
        """Delete a category (and its edges) in own scope; return False if not found."""


# Category relationship repository interface
class ICategoryRelationshipRepository(Protocol):
    """Protocol for the authoritative parent -> child edge store (DIP).

    Writes that must be atomic (promote, delete + replacement promote) are
    called within one database transaction by the service.
    """

    async def get_by_id(self, relationship_id: str) -> CategoryRelationshipResult | None:
        """Return a visible relationship by ID."""

    async def list_parent_relationships(
        self, child_id: str, *, for_update: bool = False
    ) -> list[CategoryRelationshipResult]:
        """Return the child's incoming edges, oldest first. for_update locks the rows."""

    async def list_parent_views(self, child_id: str) -> list[CategoryParentView]:
        """Return the child's incoming edges joined with parent names."""

    async def list_child_views(self, parent_id: str) -> list[CategoryChildView]:
        """Return the parent's outgoing edges joined with child names."""

    async def list_parent_ids(self, child_ids: set[str]) -> dict[str, set[str]]:
        """Return parent ids for each of child_ids (one query per frontier)."""

    async def list_primary_relationships(self) -> list[CategoryRelationshipResult]:
        """Return every visible primary edge (for the single-parent category tree)."""

    async def create_relationship(
        self, parent_id: str, child_id: str, *, is_primary: bool
    ) -> CategoryRelationshipResult:
        """Insert an edge. Raises RelationshipConflictException on unique violation."""

    async def promote_relationship(
        self, relationship_id: str, demote_id: str | None
    ) -> list[CategoryRelationshipResult]:
        """Demote demote_id (if any) then promote relationship_id; return the child's edges."""

    async def delete_relationship(self, relationship_id: str) -> bool:
        """Delete an edge; return False if it no longer exists."""


# Classified entity repository interface
class IClassifiedEntityRepository(Protocol):
    """Protocol for entities placed under categories (cascade signal source)."""

    async def count_relying_on(
        self, child_id: str, parent_id: str, *, include_unpinned: bool
    ) -> int:
        """Count entities of child_id placed under parent_id.

        include_unpinned also counts entities without an explicit placement,
        which follow the child's primary parent.
        """
