"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.category import Category
from app.infrastructure.persistence.models.category_relationship import (
    CategoryRelationship,
)
from app.infrastructure.persistence.models.classified_entity import ClassifiedEntity
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    NullableTenantMixin,
    TemplateableModel,
    TenantMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.org_unit import OrgUnit
from app.infrastructure.persistence.models.tenant import Tenant

__all__ = [
    "Tenant",
    "OrgUnit",
    "Category",
    "CategoryRelationship",
    "ClassifiedEntity",
    "CuidMixin",
    "TenantMixin",
    "NullableTenantMixin",
    "TimestampMixin",
    "MultiTenantModel",
    "TemplateableModel",
]
