"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.category_relationship_repo import (
    CategoryRelationshipRepository,
)
from app.infrastructure.persistence.repositories.category_repo import CategoryRepository
from app.infrastructure.persistence.repositories.classified_entity_repo import (
    ClassifiedEntityRepository,
)
from app.infrastructure.persistence.repositories.org_unit_repo import OrgUnitRepository
from app.infrastructure.persistence.repositories.scoped_repo import (
    TemplateScopedRepository,
)
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository

__all__ = [
    "BaseRepository",
    "CategoryRelationshipRepository",
    "CategoryRepository",
    "ClassifiedEntityRepository",
    "OrgUnitRepository",
    "TemplateScopedRepository",
    "TenantRepository",
]
