"""Domain enumerations for the hierarchy service.

Enums represent fixed sets of domain values (e.g. tenant status).
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status.

    Determines whether a tenant can accept API traffic.
    """

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]


class VisibilityScope(str, Enum):
    """Which rows a tenant sees when listing org units or categories.

    Rows with tenant_id NULL are shared templates visible to every tenant.
    """

    ALL = "all"
    TENANT = "tenant"
    TEMPLATES = "templates"
