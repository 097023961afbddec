"""Tenant read model used to resolve the X-Tenant-ID header."""

from dataclasses import dataclass

from app.domain.enums import TenantStatus


@dataclass(frozen=True)
class TenantResult:
    """A tenant row as seen by request validation and the seed script."""

    id: str
    code: str
    name: str
    status: TenantStatus

    @property
    def accepts_traffic(self) -> bool:
        """Suspended and archived tenants keep their hierarchy but cannot use the API."""
        return self.status is TenantStatus.ACTIVE
