"""Application layer: interfaces, DTOs, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories).
"""

from app.application.interfaces import (
    ICategoryRelationshipRepository,
    ICategoryRepository,
    IClassifiedEntityRepository,
    IOrgUnitRepository,
    ITenantRepository,
)
from app.application.use_cases.categories import (
    CategoryRelationshipService,
    CategoryService,
)
from app.application.use_cases.org_units import OrgUnitService

__all__ = [
    "CategoryRelationshipService",
    "CategoryService",
    "ICategoryRelationshipRepository",
    "ICategoryRepository",
    "IClassifiedEntityRepository",
    "IOrgUnitRepository",
    "ITenantRepository",
    "OrgUnitService",
]
