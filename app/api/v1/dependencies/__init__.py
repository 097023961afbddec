"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, tenant resolution and
application services. Routes depend only on these, not on infra directly.
"""

from app.api.v1.dependencies.db import get_db, get_db_transactional
from app.api.v1.dependencies.hierarchy import (
    get_category_relationship_service,
    get_category_relationship_service_for_write,
    get_category_service,
    get_category_service_for_write,
    get_org_unit_service,
    get_org_unit_service_for_write,
)
from app.api.v1.dependencies.tenant import get_tenant_id, get_tenant_id_for_write

__all__ = [
    "get_category_relationship_service",
    "get_category_relationship_service_for_write",
    "get_category_service",
    "get_category_service_for_write",
    "get_db",
    "get_db_transactional",
    "get_org_unit_service",
    "get_org_unit_service_for_write",
    "get_tenant_id",
    "get_tenant_id_for_write",
]
