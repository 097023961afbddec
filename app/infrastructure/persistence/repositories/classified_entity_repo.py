"""ClassifiedEntity repository: source of the cascade signal on relationship deletion."""

from __future__ import annotations

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.classified_entity import ClassifiedEntity
from app.infrastructure.persistence.repositories.base import BaseRepository


class ClassifiedEntityRepository(BaseRepository[ClassifiedEntity]):
    """Entities classified under categories. tenant_id None counts across all tenants."""

    def __init__(self, db: AsyncSession, tenant_id: str | None) -> None:
        super().__init__(db, ClassifiedEntity)
        self._tenant_id = tenant_id

    async def count_relying_on(
        self, child_id: str, parent_id: str, *, include_unpinned: bool
    ) -> int:
        placed = ClassifiedEntity.placement_parent_id == parent_id
        if include_unpinned:
            placed = or_(placed, ClassifiedEntity.placement_parent_id.is_(None))
        stmt = (
            select(func.count())
            .select_from(ClassifiedEntity)
            .where(and_(ClassifiedEntity.category_id == child_id, placed))
        )
        if self._tenant_id is not None:
            stmt = stmt.where(ClassifiedEntity.tenant_id == self._tenant_id)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def create_entity(
        self,
        name: str,
        category_id: str,
        *,
        placement_parent_id: str | None = None,
    ) -> str:
        """Create an entity in this tenant; return its id."""
        if self._tenant_id is None:
            raise ValueError("Classified entities belong to a tenant")
        entity = ClassifiedEntity(
            tenant_id=self._tenant_id,
            name=name,
            category_id=category_id,
            placement_parent_id=placement_parent_id,
        )
        created = await self.create(entity)
        return created.id
