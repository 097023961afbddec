"""DTOs for category and category relationship use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CategoryResult:
    """Category read-model. tenant_id None means a shared template."""

    id: str
    tenant_id: str | None
    name: str
    entity_category: str
    description: str | None
    is_active: bool
    created_at: datetime | None = None


@dataclass(frozen=True)
class CategoryRelationshipResult:
    """Parent -> child edge read-model."""

    id: str
    tenant_id: str | None
    parent_category_id: str
    child_category_id: str
    is_primary: bool
    created_at: datetime


@dataclass(frozen=True)
class CategoryParentView:
    """Parent relationship joined with the parent category (parents list)."""

    relationship_id: str
    parent_category_id: str
    parent_name: str
    parent_entity_category: str
    is_primary: bool
    created_at: datetime


@dataclass(frozen=True)
class CategoryChildView:
    """Child relationship joined with the child category (children list)."""

    relationship_id: str
    child_category_id: str
    child_name: str
    child_entity_category: str
    is_primary: bool


@dataclass(frozen=True)
class CategoryContext:
    """One placement of a category under a parent, rendered as a path."""

    path: str
    parent_id: str
    parent_name: str
    is_primary: bool


@dataclass(frozen=True)
class CategoryContexts:
    category_id: str
    category_name: str
    entity_category: str
    contexts: tuple[CategoryContext, ...]


@dataclass(frozen=True)
class TreeCategory:
    """Category placed in the single-parent view (primary parent as parent_id)."""

    id: str
    name: str
    entity_category: str
    description: str | None
    parent_id: str | None
    tenant_id: str | None


@dataclass(frozen=True)
class RelationshipMutationResult:
    """Outcome of add / promote: the child's refreshed parent edge set."""

    child_category_id: str
    relationship: CategoryRelationshipResult | None
    parents: tuple[CategoryParentView, ...]
    changed: bool = True


@dataclass(frozen=True)
class RelationshipDeletionResult:
    """Outcome of delete, including the advisory cascade signal.

    affected_entity_count counts entities whose placement relied on the
    deleted edge. requires_primary_selection is True when the deleted edge
    was primary and no replacement was promoted.
    """

    child_category_id: str
    deleted_relationship_id: str
    affected_entity_count: int
    primary_cleared: bool
    promoted_relationship_id: str | None
    parents: tuple[CategoryParentView, ...]

    @property
    def requires_primary_selection(self) -> bool:
        return self.primary_cleared and self.promoted_relationship_id is None
