"""Category ORM model. Classification node in the multi-parent category graph."""

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TemplateableModel


class Category(TemplateableModel, Base):
    """Category. Table: category. Parents are stored as category_relationship rows."""

    __tablename__ = "category"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_category_tenant_name", "tenant_id", "entity_category", "name"),
    )
