"""Domain exceptions for the hierarchy service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class HierarchyException(Exception):
    """Base exception for all hierarchy service errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(HierarchyException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(HierarchyException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'org_unit', 'category').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TenantNotFoundException(HierarchyException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class TenantInactiveException(HierarchyException):
    """Raised when a suspended or archived tenant makes a request."""

    def __init__(self, tenant_id: str, status: str) -> None:
        super().__init__(
            f"Tenant {tenant_id} is {status}",
            "TENANT_INACTIVE",
            {"tenant_id": tenant_id, "status": status},
        )


class TenantAlreadyExistsException(HierarchyException):
    """Raised when creating a tenant whose code is already taken."""

    def __init__(self, code: str) -> None:
        super().__init__(
            f"Tenant with code '{code}' already exists",
            "TENANT_ALREADY_EXISTS",
            {"code": code},
        )


class DuplicateNameException(HierarchyException):
    """Raised when a name is already used within the same tenant scope."""

    def __init__(self, resource_type: str, name: str, tenant_id: str | None) -> None:
        scope = f"tenant {tenant_id}" if tenant_id else "shared templates"
        super().__init__(
            f"A {resource_type} named '{name}' already exists in {scope}",
            "DUPLICATE_NAME",
            {"resource_type": resource_type, "name": name, "tenant_id": tenant_id},
        )


class ReadOnlyTemplateException(HierarchyException):
    """Raised when a tenant tries to modify a shared template (tenant_id is null)."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"Shared template {resource_type} {resource_id} cannot be modified by a tenant",
            "READ_ONLY_TEMPLATE",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class StructuralRejectionException(HierarchyException):
    """Base for mutations rejected because they would break a hierarchy invariant.

    Raised before any write; the caller can act on error_code without refetching.
    """


class SelfReferenceException(StructuralRejectionException):
    """Raised when a node would become its own parent."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            "A node cannot be its own parent",
            "SELF_REFERENCE",
            {"node_id": node_id},
        )


class DuplicateRelationshipException(StructuralRejectionException):
    """Raised when the (parent, child) relationship already exists."""

    def __init__(self, parent_id: str, child_id: str) -> None:
        super().__init__(
            f"Category {parent_id} is already a parent of {child_id}",
            "DUPLICATE_RELATIONSHIP",
            {"parent_category_id": parent_id, "child_category_id": child_id},
        )


class CycleDetectedException(StructuralRejectionException):
    """Raised when a new parent link would make a node its own ancestor."""

    def __init__(self, parent_id: str, child_id: str) -> None:
        super().__init__(
            f"Linking {parent_id} as parent of {child_id} would create a cycle",
            "CYCLE_DETECTED",
            {"parent_id": parent_id, "child_id": child_id},
        )


class LastParentRelationshipException(StructuralRejectionException):
    """Raised when deleting the only parent relationship of an attached category."""

    def __init__(self, relationship_id: str, child_id: str) -> None:
        super().__init__(
            "Cannot remove the only parent relationship of a category",
            "LAST_PARENT_RELATIONSHIP",
            {"relationship_id": relationship_id, "child_category_id": child_id},
        )


class OrgUnitHasChildrenException(StructuralRejectionException):
    """Raised when deleting an org unit that still has child units."""

    def __init__(self, org_unit_id: str, child_count: int) -> None:
        super().__init__(
            f"Org unit {org_unit_id} has {child_count} child unit(s); move or delete them first",
            "HAS_CHILDREN",
            {"org_unit_id": org_unit_id, "child_count": child_count},
        )


class RelationshipConflictException(HierarchyException):
    """Raised when the stored edge set changed since it was read (stale id, concurrent write).

    The caller should refetch the parent relationships and re-present them,
    not replay the same mutation.
    """

    def __init__(self, message: str, child_id: str | None = None, **details_extra: Any) -> None:
        details: dict[str, Any] = {"child_category_id": child_id, **details_extra}
        super().__init__(message, "RELATIONSHIP_CONFLICT", details)
