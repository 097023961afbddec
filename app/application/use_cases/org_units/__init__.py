"""Org unit use cases."""

from app.application.use_cases.org_units.org_unit_operations import OrgUnitService

__all__ = ["OrgUnitService"]
