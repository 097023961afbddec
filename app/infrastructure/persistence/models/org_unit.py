"""OrgUnit ORM model. Organizational unit (pôle) in a single-parent hierarchy."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TemplateableModel


class OrgUnit(TemplateableModel, Base):
    """Org unit. Table: org_unit.

    parent_id references another org unit; RESTRICT keeps a unit with children
    from being deleted underneath them. hierarchy_level is 1 for roots.
    """

    __tablename__ = "org_unit"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    short_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("org_unit.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    hierarchy_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("ix_org_unit_tenant_name", "tenant_id", "name"),)
