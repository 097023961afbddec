"""CategoryRelationship repository: the authoritative parent -> child edge store.

Returns application DTOs. The unique constraint on (parent, child) and the
partial unique index on child WHERE is_primary back the invariants the domain
layer checks; a violation here means a concurrent writer got there first and
is reported as RelationshipConflictException.
"""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.application.dtos.category import (
    CategoryChildView,
    CategoryParentView,
    CategoryRelationshipResult,
)
from app.domain.exceptions import RelationshipConflictException
from app.infrastructure.persistence.models.category import Category
from app.infrastructure.persistence.models.category_relationship import (
    CategoryRelationship,
)
from app.infrastructure.persistence.repositories.scoped_repo import (
    TemplateScopedRepository,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)


def _to_result(r: CategoryRelationship) -> CategoryRelationshipResult:
    """Map ORM CategoryRelationship to CategoryRelationshipResult."""
    return CategoryRelationshipResult(
        id=r.id,
        tenant_id=r.tenant_id,
        parent_category_id=r.parent_category_id,
        child_category_id=r.child_category_id,
        is_primary=r.is_primary,
        created_at=ensure_utc(r.created_at),
    )


class CategoryRelationshipRepository(TemplateScopedRepository[CategoryRelationship]):
    """Edge store. An edge carries its child's tenant_id."""

    resource_type = "category_relationship"

    def __init__(self, db: AsyncSession, tenant_id: str | None) -> None:
        super().__init__(db, CategoryRelationship, tenant_id)

    async def get_by_id(self, relationship_id: str) -> CategoryRelationshipResult | None:
        row = await super().get_by_id(relationship_id)
        return _to_result(row) if row else None

    async def list_parent_relationships(
        self, child_id: str, *, for_update: bool = False
    ) -> list[CategoryRelationshipResult]:
        stmt = (
            select(CategoryRelationship)
            .where(
                CategoryRelationship.child_category_id == child_id,
                self._visible_clause(),
            )
            .order_by(CategoryRelationship.created_at.asc(), CategoryRelationship.id.asc())
            .execution_options(populate_existing=True)
        )
        if for_update:
            # Serializes promote/delete per child on PostgreSQL; no-op on SQLite.
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return [_to_result(r) for r in result.scalars().all()]

    async def list_parent_views(self, child_id: str) -> list[CategoryParentView]:
        parent = aliased(Category)
        result = await self.db.execute(
            select(CategoryRelationship, parent)
            .join(parent, parent.id == CategoryRelationship.parent_category_id)
            .where(
                CategoryRelationship.child_category_id == child_id,
                self._visible_clause(),
            )
            .order_by(CategoryRelationship.created_at.asc(), CategoryRelationship.id.asc())
            .execution_options(populate_existing=True)
        )
        return [
            CategoryParentView(
                relationship_id=rel.id,
                parent_category_id=rel.parent_category_id,
                parent_name=cat.name,
                parent_entity_category=cat.entity_category,
                is_primary=rel.is_primary,
                created_at=ensure_utc(rel.created_at),
            )
            for rel, cat in result.all()
        ]

    async def list_child_views(self, parent_id: str) -> list[CategoryChildView]:
        child = aliased(Category)
        result = await self.db.execute(
            select(CategoryRelationship, child)
            .join(child, child.id == CategoryRelationship.child_category_id)
            .where(
                CategoryRelationship.parent_category_id == parent_id,
                self._visible_clause(),
            )
            .order_by(child.name.asc(), child.id.asc())
            .execution_options(populate_existing=True)
        )
        return [
            CategoryChildView(
                relationship_id=rel.id,
                child_category_id=rel.child_category_id,
                child_name=cat.name,
                child_entity_category=cat.entity_category,
                is_primary=rel.is_primary,
            )
            for rel, cat in result.all()
        ]

    async def list_parent_ids(self, child_ids: set[str]) -> dict[str, set[str]]:
        if not child_ids:
            return {}
        result = await self.db.execute(
            select(
                CategoryRelationship.child_category_id,
                CategoryRelationship.parent_category_id,
            ).where(
                CategoryRelationship.child_category_id.in_(child_ids),
                self._visible_clause(),
            )
        )
        parents: defaultdict[str, set[str]] = defaultdict(set)
        for child_id, parent_id in result.all():
            parents[child_id].add(parent_id)
        return dict(parents)

    async def list_primary_relationships(self) -> list[CategoryRelationshipResult]:
        result = await self.db.execute(
            select(CategoryRelationship)
            .where(CategoryRelationship.is_primary.is_(True), self._visible_clause())
            .execution_options(populate_existing=True)
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def create_relationship(
        self, parent_id: str, child_id: str, *, is_primary: bool
    ) -> CategoryRelationshipResult:
        entity = CategoryRelationship(
            tenant_id=self._tenant_id,
            parent_category_id=parent_id,
            child_category_id=child_id,
            is_primary=is_primary,
        )
        try:
            created = await self.create(entity)
        except IntegrityError:
            logger.warning(
                "Concurrent write on category %s parents (parent=%s, primary=%s)",
                child_id,
                parent_id,
                is_primary,
            )
            raise RelationshipConflictException(
                f"Parent relationships of category {child_id} changed concurrently; "
                "refetch and retry",
                child_id=child_id,
                parent_category_id=parent_id,
            ) from None
        return _to_result(created)

    async def promote_relationship(
        self, relationship_id: str, demote_id: str | None
    ) -> list[CategoryRelationshipResult]:
        """Demote then promote, in statement order, inside the caller's transaction.

        The demote runs first so the partial unique index never sees two
        primaries for the child.
        """
        target = await self.get_owned(relationship_id)
        if target is None:
            raise RelationshipConflictException(
                f"Relationship {relationship_id} no longer exists; refetch parent relationships",
                relationship_id=relationship_id,
            )
        child_id = target.child_category_id
        try:
            if demote_id is not None:
                await self.db.execute(
                    update(CategoryRelationship)
                    .where(
                        CategoryRelationship.id == demote_id,
                        CategoryRelationship.child_category_id == child_id,
                    )
                    .values(is_primary=False)
                )
            await self.db.execute(
                update(CategoryRelationship)
                .where(CategoryRelationship.id == relationship_id)
                .values(is_primary=True)
            )
            await self.db.flush()
        except IntegrityError:
            logger.warning("Concurrent primary change on category %s", child_id)
            raise RelationshipConflictException(
                f"Primary parent of category {child_id} changed concurrently; "
                "refetch and retry",
                child_id=child_id,
                relationship_id=relationship_id,
            ) from None
        return await self.list_parent_relationships(child_id)

    async def delete_relationship(self, relationship_id: str) -> bool:
        result = await self.db.execute(
            delete(CategoryRelationship).where(
                CategoryRelationship.id == relationship_id,
                self._own_clause(),
            )
        )
        await self.db.flush()
        return bool(result.rowcount)
