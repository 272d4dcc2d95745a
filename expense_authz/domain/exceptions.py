"""Domain exceptions for the authorization engine.

Defines domain-level exceptions that represent authorization decisions and
business rule violations. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class AuthzException(Exception):
    """Base exception for all authorization engine errors.

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
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class Forbidden(AuthzException):
    """Raised when the principal lacks the required permission or fixed role.

    Carries no details: a denied caller learns nothing about which
    permissions or roles exist.
    """

    def __init__(self, message: str = "Insufficient permission") -> None:
        super().__init__(message, "FORBIDDEN")

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message}


class InvalidArgument(AuthzException):
    """Raised for malformed identifiers, unknown permission keys, or past expiry timestamps."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "INVALID_ARGUMENT", details)


class DuplicateAssignment(AuthzException):
    """Raised when an active, non-expired assignment already exists for the triple."""

    def __init__(self, user_id: str, custom_role_id: str, company_id: str) -> None:
        super().__init__(
            "Role already assigned to user",
            "DUPLICATE_ASSIGNMENT",
            {
                "user_id": user_id,
                "custom_role_id": custom_role_id,
                "company_id": company_id,
            },
        )


class CrossTenantViolation(AuthzException):
    """Raised when an assignment or custom-role reference spans tenants.

    Indicates a programming or data error rather than an ordinary denial.
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CROSS_TENANT_VIOLATION", dict(details))


class ResourceNotFound(AuthzException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str, error_code: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'custom_role').
            resource_id: The ID that was not found.
            error_code: Machine-readable code for the concrete resource.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            error_code,
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RoleNotFound(ResourceNotFound):
    """Raised when a custom role id does not exist (or is invisible to the caller)."""

    def __init__(self, custom_role_id: str) -> None:
        super().__init__("custom_role", custom_role_id, "ROLE_NOT_FOUND")


class AssignmentNotFound(ResourceNotFound):
    """Raised when a role assignment id does not exist (or is invisible to the caller)."""

    def __init__(self, assignment_id: str) -> None:
        super().__init__("role_assignment", assignment_id, "ASSIGNMENT_NOT_FOUND")


class StorageUnavailable(AuthzException):
    """Raised when the underlying store could not complete a read or write.

    The engine performs no implicit retry.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(
            "Authorization store is unavailable",
            "STORAGE_UNAVAILABLE",
            {"operation": operation},
        )


class CatalogConflict(AuthzException):
    """Raised when registering a duplicate permission key or mutating a frozen catalog."""

    def __init__(self, key: str, reason: str = "duplicate permission key") -> None:
        super().__init__(
            f"Permission catalog conflict for '{key}': {reason}",
            "CATALOG_CONFLICT",
            {"key": key},
        )
