"""DTOs for org unit (pôle) use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OrgUnitResult:
    """Org unit read-model. tenant_id None means a shared template."""

    id: str
    tenant_id: str | None
    name: str
    short_code: str | None
    description: str | None
    parent_id: str | None
    hierarchy_level: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_template(self) -> bool:
        return self.tenant_id is None


@dataclass(frozen=True)
class OrgUnitCreate:
    """Fields accepted when creating an org unit."""

    name: str
    short_code: str | None = None
    description: str | None = None
    parent_id: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class OrgUnitUpdate:
    """Partial update. Fields left as None are unchanged except parent_id (see clear_parent)."""

    name: str | None = None
    short_code: str | None = None
    description: str | None = None
    parent_id: str | None = None
    clear_parent: bool = False
    is_active: bool | None = None
