"""Domain layer: entities, enums, exceptions and the permission catalog.

No dependencies on infrastructure or presentation.
"""

from expense_authz.domain.entities import CustomRole, Principal, RoleAssignment
from expense_authz.domain.enums import AssignmentStatus, DeactivationReason, FixedRole
from expense_authz.domain.exceptions import (
    AssignmentNotFound,
    AuthzException,
    CatalogConflict,
    CrossTenantViolation,
    DuplicateAssignment,
    Forbidden,
    InvalidArgument,
    RoleNotFound,
    StorageUnavailable,
)

__all__ = [
    "AssignmentNotFound",
    "AssignmentStatus",
    "AuthzException",
    "CatalogConflict",
    "CrossTenantViolation",
    "CustomRole",
    "DeactivationReason",
    "DuplicateAssignment",
    "FixedRole",
    "Forbidden",
    "InvalidArgument",
    "Principal",
    "RoleAssignment",
    "RoleNotFound",
    "StorageUnavailable",
]
