"""Application interfaces (ports): repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    ICategoryRelationshipRepository,
    ICategoryRepository,
    IClassifiedEntityRepository,
    IOrgUnitRepository,
    ITenantRepository,
)

__all__ = [
    "ICategoryRelationshipRepository",
    "ICategoryRepository",
    "IClassifiedEntityRepository",
    "IOrgUnitRepository",
    "ITenantRepository",
]
