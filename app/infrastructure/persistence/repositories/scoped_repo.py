"""Template-aware tenant scoping shared by org unit, category and relationship repositories.

A repository is constructed for one tenant_id. Reads see that tenant's rows
plus shared templates (tenant_id NULL); writes are limited to the tenant's
own rows. A repository built with tenant_id None administers the templates
themselves and sees nothing else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import ColumnElement, or_, select

from app.domain.enums import VisibilityScope
from app.domain.exceptions import ReadOnlyTemplateException
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.repositories.base import BaseRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


ModelType = TypeVar("ModelType", bound=Base)


class TemplateScopedRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Repository that enforces tenant isolation with shared read-only templates."""

    resource_type: str = "resource"

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        tenant_id: str | None,
    ) -> None:
        super().__init__(db, model)
        self._tenant_id = tenant_id

    @property
    def tenant_id(self) -> str | None:
        return self._tenant_id

    def _own_clause(self) -> ColumnElement[bool]:
        model: Any = self.model
        if self._tenant_id is None:
            return model.tenant_id.is_(None)
        return model.tenant_id == self._tenant_id

    def _visible_clause(self) -> ColumnElement[bool]:
        model: Any = self.model
        if self._tenant_id is None:
            return model.tenant_id.is_(None)
        return or_(model.tenant_id.is_(None), model.tenant_id == self._tenant_id)

    def _scope_clause(self, scope: VisibilityScope) -> ColumnElement[bool]:
        model: Any = self.model
        if scope is VisibilityScope.TENANT:
            return self._own_clause()
        if scope is VisibilityScope.TEMPLATES:
            return model.tenant_id.is_(None)
        return self._visible_clause()

    def _assert_owned(self, obj: ModelType) -> None:
        """Raise if obj is a shared template and this repo is tenant-scoped."""
        if getattr(obj, "tenant_id", None) != self._tenant_id:
            raise ReadOnlyTemplateException(self.resource_type, getattr(obj, "id", ""))

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a visible record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(model.id == entity_id, self._visible_clause())
        )
        return result.scalar_one_or_none()

    async def get_owned(self, entity_id: str) -> ModelType | None:
        """Return a record by primary key only if it belongs to this scope."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(model.id == entity_id, self._own_clause())
        )
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist; ensure obj.tenant_id matches this repo."""
        self._assert_owned(obj)
        return await super().create(obj)

    async def update(self, obj: ModelType) -> ModelType:
        self._assert_owned(obj)
        return await super().update(obj)

    async def delete(self, obj: ModelType) -> None:
        self._assert_owned(obj)
        await super().delete(obj)
