"""Pydantic request/response schemas for the API."""

from expense_authz.schemas.custom_role import (
    CustomRoleCreateRequest,
    CustomRoleDeactivatedResponse,
    CustomRoleFromTemplateRequest,
    CustomRoleResponse,
    CustomRoleUpdateRequest,
)
from expense_authz.schemas.health import HealthResponse
from expense_authz.schemas.permission import (
    MyPermissionsResponse,
    PermissionGroupResponse,
    PermissionResponse,
    PermissionTemplateResponse,
)
from expense_authz.schemas.role_assignment import (
    RoleAssignmentCreateRequest,
    RoleAssignmentRenewRequest,
    RoleAssignmentResponse,
    SweepExpiredResponse,
)

__all__ = [
    "CustomRoleCreateRequest",
    "CustomRoleDeactivatedResponse",
    "CustomRoleFromTemplateRequest",
    "CustomRoleResponse",
    "CustomRoleUpdateRequest",
    "HealthResponse",
    "MyPermissionsResponse",
    "PermissionGroupResponse",
    "PermissionResponse",
    "PermissionTemplateResponse",
    "RoleAssignmentCreateRequest",
    "RoleAssignmentRenewRequest",
    "RoleAssignmentResponse",
    "SweepExpiredResponse",
]
