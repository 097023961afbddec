"""Category operations: CRUD, root categories, and the primary-parent tree."""

from __future__ import annotations

from collections.abc import Sequence

from app.application.dtos.category import CategoryResult, TreeCategory
from app.application.interfaces.repositories import (
    ICategoryRelationshipRepository,
    ICategoryRepository,
)
from app.application.use_cases._expansion import apply_expansion
from app.domain.enums import VisibilityScope
from app.domain.exceptions import (
    DuplicateNameException,
    ReadOnlyTemplateException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.hierarchy import (
    Forest,
    apply_toggles,
    build_tree,
    filter_tree,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced

logger = get_logger(__name__)

CATEGORY_SEARCH_FIELDS = ("name", "entity_category", "description")


class CategoryService:
    """Create, query, and arrange categories (tenant-scoped)."""

    def __init__(
        self,
        category_repo: ICategoryRepository,
        relationship_repo: ICategoryRelationshipRepository,
    ) -> None:
        self.category_repo = category_repo
        self.relationship_repo = relationship_repo

    async def list_categories(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        entity_category: str | None = None,
    ) -> list[CategoryResult]:
        return await self.category_repo.list_visible(
            scope, entity_category=entity_category
        )

    async def get_category(self, category_id: str) -> CategoryResult:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise ResourceNotFoundException("category", category_id)
        return category

    async def list_root_categories(self) -> list[CategoryResult]:
        """Categories with no parent relationship (top-level contexts)."""
        return await self.category_repo.list_roots()

    async def get_category_tree(
        self,
        *,
        search: str | None = None,
        toggles: Sequence[str] = (),
        expand: bool | None = None,
    ) -> Forest:
        """Single-parent view of the category graph, placing each category under its primary parent."""
        categories = await self.category_repo.list_visible(VisibilityScope.ALL)
        primary_parent = {
            r.child_category_id: r.parent_category_id
            for r in await self.relationship_repo.list_primary_relationships()
        }
        items = [
            TreeCategory(
                id=c.id,
                name=c.name,
                entity_category=c.entity_category,
                description=c.description,
                parent_id=primary_parent.get(c.id),
                tenant_id=c.tenant_id,
            )
            for c in categories
        ]
        forest = build_tree(items)
        forest = apply_expansion(forest, expand)
        forest = apply_toggles(forest, toggles)
        return filter_tree(forest, search, fields=CATEGORY_SEARCH_FIELDS)

    @traced("category.create")
    async def create_category(
        self,
        name: str,
        entity_category: str,
        *,
        description: str | None = None,
        is_active: bool = True,
    ) -> CategoryResult:
        name = (name or "").strip()
        entity_category = (entity_category or "").strip()
        if not name:
            raise ValidationException("Category name is required", field="name")
        if not entity_category:
            raise ValidationException(
                "Category classification is required", field="entity_category"
            )
        if await self.category_repo.get_by_name(name, entity_category):
            raise DuplicateNameException("category", name, self.category_repo.tenant_id)
        created = await self.category_repo.create_category(
            name,
            entity_category,
            description=description,
            is_active=is_active,
        )
        logger.info("Category created: %s (%s)", created.id, created.entity_category)
        return created

    async def _get_writable(self, category_id: str) -> CategoryResult:
        category = await self.get_category(category_id)
        if category.tenant_id != self.category_repo.tenant_id:
            raise ReadOnlyTemplateException("category", category_id)
        return category

    @traced("category.update")
    async def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        entity_category: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> CategoryResult:
        current = await self._get_writable(category_id)
        if name is not None and not name.strip():
            raise ValidationException("Category name is required", field="name")
        if entity_category is not None and not entity_category.strip():
            raise ValidationException(
                "Category classification is required", field="entity_category"
            )
        new_name = name.strip() if name is not None else current.name
        new_tag = (
            entity_category.strip() if entity_category is not None else current.entity_category
        )
        if (new_name, new_tag) != (current.name, current.entity_category):
            existing = await self.category_repo.get_by_name(new_name, new_tag)
            if existing and existing.id != category_id:
                raise DuplicateNameException(
                    "category", new_name, self.category_repo.tenant_id
                )
        updated = await self.category_repo.update_category(
            category_id,
            name=new_name,
            entity_category=new_tag,
            description=description,
            is_active=is_active,
        )
        if not updated:
            raise ResourceNotFoundException("category", category_id)
        return updated

    @traced("category.delete")
    async def delete_category(self, category_id: str) -> None:
        """Delete a category; its parent and child relationships go with it.

        Children that lose their primary parent but keep other parents get
        their oldest remaining relationship promoted, so no attached child is
        left without a primary.
        """
        await self._get_writable(category_id)
        children = await self.relationship_repo.list_child_views(category_id)
        if not await self.category_repo.delete_category(category_id):
            raise ResourceNotFoundException("category", category_id)
        for child in children:
            if child.is_primary:
                await self._restore_primary(child.child_category_id)
        logger.info("Category deleted: %s (%d child link(s) removed)", category_id, len(children))

    async def _restore_primary(self, child_id: str) -> None:
        edges = await self.relationship_repo.list_parent_relationships(
            child_id, for_update=True
        )
        if not edges or any(e.is_primary for e in edges):
            return
        oldest = min(edges, key=lambda e: (e.created_at, e.id))
        await self.relationship_repo.promote_relationship(oldest.id, None)
        logger.info(
            "Primary parent of category %s reassigned to relationship %s", child_id, oldest.id
        )
