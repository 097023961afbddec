"""Category repository. Returns application DTOs. Tenant-scoped with shared templates."""

from __future__ import annotations

from sqlalchemy import delete, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.category import CategoryResult
from app.domain.enums import VisibilityScope
from app.infrastructure.persistence.models.category import Category
from app.infrastructure.persistence.models.category_relationship import (
    CategoryRelationship,
)
from app.infrastructure.persistence.repositories.scoped_repo import (
    TemplateScopedRepository,
)
from app.shared.utils.datetime import ensure_utc


def _to_result(c: Category) -> CategoryResult:
    """Map ORM Category to CategoryResult."""
    return CategoryResult(
        id=c.id,
        tenant_id=c.tenant_id,
        name=c.name,
        entity_category=c.entity_category,
        description=c.description,
        is_active=c.is_active,
        created_at=ensure_utc(c.created_at),
    )


class CategoryRepository(TemplateScopedRepository[Category]):
    """Category repository. Parent links live in CategoryRelationshipRepository."""

    resource_type = "category"

    def __init__(self, db: AsyncSession, tenant_id: str | None) -> None:
        super().__init__(db, Category, tenant_id)

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        row = await super().get_by_id(category_id)
        return _to_result(row) if row else None

    async def get_by_name(
        self, name: str, entity_category: str
    ) -> CategoryResult | None:
        result = await self.db.execute(
            select(Category)
            .where(
                self._own_clause(),
                Category.name == name,
                Category.entity_category == entity_category,
            )
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_visible(
        self,
        scope: VisibilityScope = VisibilityScope.ALL,
        *,
        entity_category: str | None = None,
    ) -> list[CategoryResult]:
        stmt = select(Category).where(self._scope_clause(scope))
        if entity_category:
            stmt = stmt.where(Category.entity_category == entity_category)
        result = await self.db.execute(stmt.order_by(Category.name.asc(), Category.id.asc()))
        return [_to_result(c) for c in result.scalars().all()]

    async def list_roots(self) -> list[CategoryResult]:
        has_parent = exists().where(CategoryRelationship.child_category_id == Category.id)
        result = await self.db.execute(
            select(Category)
            .where(self._visible_clause(), ~has_parent)
            .order_by(Category.name.asc(), Category.id.asc())
        )
        return [_to_result(c) for c in result.scalars().all()]

    async def list_candidate_parents(self, child_id: str) -> list[CategoryResult]:
        current_parents = select(CategoryRelationship.parent_category_id).where(
            CategoryRelationship.child_category_id == child_id
        )
        result = await self.db.execute(
            select(Category)
            .where(
                self._visible_clause(),
                Category.id != child_id,
                Category.id.not_in(current_parents),
            )
            .order_by(Category.name.asc(), Category.id.asc())
        )
        return [_to_result(c) for c in result.scalars().all()]

    async def create_category(
        self,
        name: str,
        entity_category: str,
        *,
        description: str | None = None,
        is_active: bool = True,
    ) -> CategoryResult:
        entity = Category(
            tenant_id=self._tenant_id,
            name=name,
            entity_category=entity_category,
            description=description,
            is_active=is_active,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        entity_category: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> CategoryResult | None:
        entity = await self.get_owned(category_id)
        if not entity:
            return None
        if name is not None:
            entity.name = name
        if entity_category is not None:
            entity.entity_category = entity_category
        if description is not None:
            entity.description = description
        if is_active is not None:
            entity.is_active = is_active
        updated = await self.update(entity)
        return _to_result(updated)

    async def delete_category(self, category_id: str) -> bool:
        entity = await self.get_owned(category_id)
        if not entity:
            return False
        await self.db.execute(
            delete(CategoryRelationship).where(
                or_(
                    CategoryRelationship.parent_category_id == category_id,
                    CategoryRelationship.child_category_id == category_id,
                )
            )
        )
        await self.delete(entity)
        return True
