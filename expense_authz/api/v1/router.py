"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from expense_authz.api.v1.dependencies.
"""

from fastapi import APIRouter

from expense_authz.api.v1.endpoints import (
    custom_roles,
    health,
    me,
    permissions,
    role_assignments,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(custom_roles.router, prefix="/custom-roles", tags=["custom-roles"])
api_router.include_router(
    role_assignments.router, prefix="/role-assignments", tags=["role-assignments"]
)
