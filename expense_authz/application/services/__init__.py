"""Application services: resolver, guard, assignment lifecycle, custom roles."""

from expense_authz.application.services.assignment_service import AssignmentService
from expense_authz.application.services.authorization_service import AuthorizationService
from expense_authz.application.services.custom_role_service import CustomRoleService
from expense_authz.application.services.permission_resolver import (
    EffectivePermissionSet,
    PermissionResolver,
)

__all__ = [
    "AssignmentService",
    "AuthorizationService",
    "CustomRoleService",
    "EffectivePermissionSet",
    "PermissionResolver",
]
