"""ClassifiedEntity ORM model. Entity classified under a category (asset, supplier, ...)."""

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class ClassifiedEntity(MultiTenantModel, Base):
    """Classified entity. Table: classified_entity.

    placement_parent_id pins the entity under one parent context of its
    category; NULL means it follows the category's primary parent.
    """

    __tablename__ = "classified_entity"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("category.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    placement_parent_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("category.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_classified_entity_category_placement", "category_id", "placement_parent_id"),
    )
