"""Column mixins shared by the hierarchy tables.

TemplateableModel is for org units and categories, whose rows are either
tenant-owned or shared templates (tenant_id NULL). MultiTenantModel is for
rows that always belong to a tenant.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.ids import ID_LENGTH, generate_cuid


def _tenant_fk(*, nullable: bool) -> Mapped:
    return mapped_column(
        String(ID_LENGTH),
        ForeignKey("tenant.id", ondelete="CASCADE"),
        nullable=nullable,
        index=True,
    )


class CuidMixin:
    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String(ID_LENGTH), primary_key=True, default=generate_cuid)


class TenantMixin:
    @declared_attr
    def tenant_id(cls) -> Mapped[str]:
        return _tenant_fk(nullable=False)


class NullableTenantMixin:
    """tenant_id NULL marks a shared template, readable by every tenant."""

    @declared_attr
    def tenant_id(cls) -> Mapped[str | None]:
        return _tenant_fk(nullable=True)


class TimestampMixin:
    """created_at/updated_at filled in by the database."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class MultiTenantModel(CuidMixin, TenantMixin, TimestampMixin):
    __abstract__ = True


class TemplateableModel(CuidMixin, NullableTenantMixin, TimestampMixin):
    __abstract__ = True
