"""Domain layer: hierarchy engine, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import TenantStatus, VisibilityScope
from app.domain.exceptions import (
    CycleDetectedException,
    DuplicateNameException,
    DuplicateRelationshipException,
    HierarchyException,
    LastParentRelationshipException,
    OrgUnitHasChildrenException,
    ReadOnlyTemplateException,
    RelationshipConflictException,
    ResourceNotFoundException,
    SelfReferenceException,
    StructuralRejectionException,
    TenantAlreadyExistsException,
    TenantInactiveException,
    TenantNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "TenantStatus",
    "VisibilityScope",
    # Exceptions
    "CycleDetectedException",
    "DuplicateNameException",
    "DuplicateRelationshipException",
    "HierarchyException",
    "LastParentRelationshipException",
    "OrgUnitHasChildrenException",
    "ReadOnlyTemplateException",
    "RelationshipConflictException",
    "ResourceNotFoundException",
    "SelfReferenceException",
    "StructuralRejectionException",
    "TenantAlreadyExistsException",
    "TenantInactiveException",
    "TenantNotFoundException",
    "ValidationException",
]
