"""Tenant ORM model. Owns org units, categories, edges and classified entities."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import TenantStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

_STATUS_VALUES = ", ".join(f"'{v}'" for v in TenantStatus.values())


class Tenant(CuidMixin, TimestampMixin, Base):
    """Table: tenant. Deleting a tenant cascades to everything it owns;
    shared templates (tenant_id NULL) are unaffected.
    """

    __tablename__ = "tenant"

    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TenantStatus.ACTIVE.value
    )

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_tenant_status"),
    )
