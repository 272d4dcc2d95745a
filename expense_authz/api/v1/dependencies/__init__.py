"""API v1 dependencies: principal, services and guards."""

from expense_authz.api.v1.dependencies.guards import (
    TenantScope,
    get_tenant_context,
    require_fixed_role,
    require_permission,
    require_role_admin,
    require_role_admin_write,
)
from expense_authz.api.v1.dependencies.principal import (
    PrincipalLoader,
    get_current_principal,
)
from expense_authz.api.v1.dependencies.services import (
    get_assignment_service,
    get_assignment_service_for_write,
    get_authorization_service,
    get_custom_role_service,
    get_custom_role_service_for_write,
    get_permission_resolver,
)

__all__ = [
    "PrincipalLoader",
    "TenantScope",
    "get_assignment_service",
    "get_assignment_service_for_write",
    "get_authorization_service",
    "get_current_principal",
    "get_custom_role_service",
    "get_custom_role_service_for_write",
    "get_permission_resolver",
    "get_tenant_context",
    "require_fixed_role",
    "require_permission",
    "require_role_admin",
    "require_role_admin_write",
]
