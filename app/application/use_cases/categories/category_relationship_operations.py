"""Category relationship operations: the add / promote / delete protocol.

Each mutation reads the child's edge set with row locks, lets the domain
ParentEdgeSet validate and plan the change, then applies the plan through the
repository. The service is called inside one database transaction per request
(get_db_transactional), so a rejected plan never leaves partial writes.
"""

from __future__ import annotations

from app.application.dtos.category import (
    CategoryChildView,
    CategoryContext,
    CategoryContexts,
    CategoryParentView,
    CategoryRelationshipResult,
    CategoryResult,
    RelationshipDeletionResult,
    RelationshipMutationResult,
)
from app.application.interfaces.repositories import (
    ICategoryRelationshipRepository,
    ICategoryRepository,
    IClassifiedEntityRepository,
)
from app.domain.exceptions import (
    ReadOnlyTemplateException,
    RelationshipConflictException,
    ResourceNotFoundException,
)
from app.domain.hierarchy import ParentEdgeSet
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)

CONTEXT_SEPARATOR = " → "


class CategoryRelationshipService:
    """Multi-parent category graph with exactly one primary parent per attached child."""

    def __init__(
        self,
        category_repo: ICategoryRepository,
        relationship_repo: ICategoryRelationshipRepository,
        entity_repo: IClassifiedEntityRepository,
        *,
        auto_promote_on_primary_delete: bool = False,
    ) -> None:
        self.category_repo = category_repo
        self.relationship_repo = relationship_repo
        self.entity_repo = entity_repo
        self.auto_promote_on_primary_delete = auto_promote_on_primary_delete

    async def _get_category(self, category_id: str) -> CategoryResult:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise ResourceNotFoundException("category", category_id)
        return category

    def _ensure_writable(self, tenant_id: str | None, resource_type: str, resource_id: str) -> None:
        if tenant_id != self.category_repo.tenant_id:
            raise ReadOnlyTemplateException(resource_type, resource_id)

    async def _get_relationship(self, relationship_id: str) -> CategoryRelationshipResult:
        relationship = await self.relationship_repo.get_by_id(relationship_id)
        if not relationship:
            # A stale id means the edge set changed since the caller read it.
            raise RelationshipConflictException(
                f"Relationship {relationship_id} no longer exists; refetch parent relationships",
                relationship_id=relationship_id,
            )
        return relationship

    async def _load_edge_set(self, child_id: str) -> ParentEdgeSet:
        edges = await self.relationship_repo.list_parent_relationships(
            child_id, for_update=True
        )
        return ParentEdgeSet(child_id, edges)

    async def _collect_ancestors(self, category_id: str, stop_at: str) -> set[str]:
        """Breadth-first ancestor closure of category_id, one query per level.

        Returns early once stop_at is reached since a single hit is enough to
        reject the edge.
        """
        ancestors: set[str] = set()
        frontier = {category_id}
        while frontier:
            parents_by_child = await self.relationship_repo.list_parent_ids(frontier)
            next_frontier: set[str] = set()
            for parent_ids in parents_by_child.values():
                for parent_id in parent_ids:
                    if parent_id in ancestors:
                        continue
                    ancestors.add(parent_id)
                    next_frontier.add(parent_id)
            if stop_at in ancestors:
                break
            frontier = next_frontier
        return ancestors

    async def list_parents(self, child_id: str) -> list[CategoryParentView]:
        await self._get_category(child_id)
        return await self.relationship_repo.list_parent_views(child_id)

    async def list_candidate_parents(self, child_id: str) -> list[CategoryResult]:
        """Categories that may be offered as a new parent (not the child, not already a parent)."""
        await self._get_category(child_id)
        return await self.category_repo.list_candidate_parents(child_id)

    async def list_children(self, parent_id: str) -> list[CategoryChildView]:
        await self._get_category(parent_id)
        return await self.relationship_repo.list_child_views(parent_id)

    async def list_contexts(self, category_id: str) -> CategoryContexts:
        """Every parent context of a category as a 'Parent → Child' path, primary first."""
        category = await self._get_category(category_id)
        parents = await self.relationship_repo.list_parent_views(category_id)
        contexts = tuple(
            CategoryContext(
                path=f"{p.parent_name}{CONTEXT_SEPARATOR}{category.name}",
                parent_id=p.parent_category_id,
                parent_name=p.parent_name,
                is_primary=p.is_primary,
            )
            for p in sorted(parents, key=lambda p: not p.is_primary)
        )
        return CategoryContexts(
            category_id=category.id,
            category_name=category.name,
            entity_category=category.entity_category,
            contexts=contexts,
        )

    @traced("category_relationship.add")
    async def add_parent(self, parent_id: str, child_id: str) -> RelationshipMutationResult:
        """Attach child under parent. The child's first parent becomes its primary."""
        child = await self._get_category(child_id)
        self._ensure_writable(child.tenant_id, "category", child_id)
        await self._get_category(parent_id)

        edge_set = await self._load_edge_set(child_id)
        ancestors = (
            set() if parent_id == child_id else await self._collect_ancestors(parent_id, child_id)
        )
        plan = edge_set.plan_add(parent_id, ancestors)
        add_span_attributes(is_primary=plan.is_primary)

        relationship = await self.relationship_repo.create_relationship(
            plan.parent_id, plan.child_id, is_primary=plan.is_primary
        )
        logger.info(
            "Category relationship added: %s -> %s (primary=%s)",
            parent_id,
            child_id,
            plan.is_primary,
        )
        parents = await self.relationship_repo.list_parent_views(child_id)
        return RelationshipMutationResult(
            child_category_id=child_id,
            relationship=relationship,
            parents=tuple(parents),
        )

    @traced("category_relationship.promote")
    async def promote(self, relationship_id: str) -> RelationshipMutationResult:
        """Make relationship_id the primary parent of its child (demoting the old one)."""
        relationship = await self._get_relationship(relationship_id)
        child_id = relationship.child_category_id
        self._ensure_writable(relationship.tenant_id, "category_relationship", relationship_id)

        edge_set = await self._load_edge_set(child_id)
        plan = edge_set.plan_promote(relationship_id)
        if plan.is_noop:
            parents = await self.relationship_repo.list_parent_views(child_id)
            return RelationshipMutationResult(
                child_category_id=child_id,
                relationship=edge_set.get(relationship_id),
                parents=tuple(parents),
                changed=False,
            )

        edges = await self.relationship_repo.promote_relationship(
            plan.promote_id, plan.demote_id
        )
        promoted = next((e for e in edges if e.id == plan.promote_id), None)
        if promoted is None or not promoted.is_primary:
            raise RelationshipConflictException(
                f"Relationship {relationship_id} could not be promoted; refetch parent relationships",
                child_id=child_id,
                relationship_id=relationship_id,
            )
        logger.info(
            "Category relationship promoted: %s (child=%s, demoted=%s)",
            plan.promote_id,
            child_id,
            plan.demote_id,
        )
        parents = await self.relationship_repo.list_parent_views(child_id)
        return RelationshipMutationResult(
            child_category_id=child_id,
            relationship=promoted,
            parents=tuple(parents),
        )

    @traced("category_relationship.delete")
    async def delete(self, relationship_id: str) -> RelationshipDeletionResult:
        """Remove a parent edge and report how many entities relied on it.

        The child's only edge cannot be removed. Removing the primary edge
        leaves the child without a primary unless auto-promotion is enabled.
        """
        relationship = await self._get_relationship(relationship_id)
        child_id = relationship.child_category_id
        self._ensure_writable(relationship.tenant_id, "category_relationship", relationship_id)

        edge_set = await self._load_edge_set(child_id)
        plan = edge_set.plan_delete(
            relationship_id, auto_promote=self.auto_promote_on_primary_delete
        )

        affected = await self.entity_repo.count_relying_on(
            child_id, plan.parent_id, include_unpinned=plan.was_primary
        )
        add_span_attributes(affected_entities=affected, was_primary=plan.was_primary)
        if not await self.relationship_repo.delete_relationship(plan.relationship_id):
            raise RelationshipConflictException(
                f"Relationship {relationship_id} was removed concurrently; refetch parent relationships",
                child_id=child_id,
                relationship_id=relationship_id,
            )
        if plan.promote_id:
            await self.relationship_repo.promote_relationship(plan.promote_id, None)

        if plan.leaves_no_primary:
            logger.warning(
                "Primary relationship %s deleted; category %s has %d parent(s) and no primary",
                relationship_id,
                child_id,
                plan.remaining_count,
            )
        else:
            logger.info(
                "Category relationship deleted: %s (child=%s, affected_entities=%d)",
                relationship_id,
                child_id,
                affected,
            )
        parents = await self.relationship_repo.list_parent_views(child_id)
        return RelationshipDeletionResult(
            child_category_id=child_id,
            deleted_relationship_id=plan.relationship_id,
            affected_entity_count=affected,
            primary_cleared=plan.was_primary,
            promoted_relationship_id=plan.promote_id,
            parents=tuple(parents),
        )
