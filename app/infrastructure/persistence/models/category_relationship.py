"""CategoryRelationship ORM model. Directed parent -> child edge between categories."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, NullableTenantMixin
from app.shared.utils.datetime import utc_now


class CategoryRelationship(CuidMixin, NullableTenantMixin, Base):
    """Parent -> child edge. Table: category_relationship.

    Unique (parent_category_id, child_category_id). The partial unique index on
    child_category_id WHERE is_primary allows at most one primary edge per child.
    tenant_id follows the child category.
    """

    __tablename__ = "category_relationship"

    parent_category_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("category.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    child_category_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("category.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Application-side default keeps sub-second ordering (oldest edge) on SQLite.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        UniqueConstraint(
            "parent_category_id",
            "child_category_id",
            name="uq_category_relationship_parent_child",
        ),
        CheckConstraint(
            "parent_category_id <> child_category_id",
            name="ck_category_relationship_not_self",
        ),
        Index(
            "uq_category_relationship_one_primary",
            "child_category_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary = 1"),
        ),
    )
