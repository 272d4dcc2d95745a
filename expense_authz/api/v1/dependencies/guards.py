"""Guard dependencies: tenant context, permission and fixed-role checks.

Every protected route depends on one of these factories, so the decision is
made before the handler body runs.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from expense_authz.api.v1.dependencies.principal import get_current_principal
from expense_authz.api.v1.dependencies.services import get_authorization_service
from expense_authz.application.services import AuthorizationService
from expense_authz.core.config import get_settings
from expense_authz.domain.entities import Principal
from expense_authz.domain.enums import FixedRole


@dataclass(frozen=True)
class TenantScope:
    """Principal plus the company the request acts on."""

    principal: Principal
    company_id: str


def _requested_company_id(request: Request) -> str | None:
    return request.query_params.get(get_settings().tenant_query_param)


def get_tenant_context(strict: bool = False):
    """Dependency factory: resolve the target company for the request.

    strict=False (reads) falls back to the home company on a foreign
    override; strict=True (mutations) rejects it with 403.
    """

    async def _resolve(
        request: Request,
        principal: Annotated[Principal, Depends(get_current_principal)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> TenantScope:
        company_id = auth_svc.resolve_tenant_context(
            principal, _requested_company_id(request), strict=strict
        )
        return TenantScope(principal, company_id)

    return _resolve


def require_permission(permission_key: str, *, strict: bool = False):
    """Dependency factory: require permission_key in the resolved company."""

    async def _require(
        scope: Annotated[TenantScope, Depends(get_tenant_context(strict))],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> TenantScope:
        await auth_svc.require_permission(
            scope.principal, scope.company_id, permission_key
        )
        return scope

    return _require


def require_fixed_role(*roles: FixedRole, strict: bool = False):
    """Dependency factory: require one of the fixed roles; returns the tenant scope."""

    async def _require(
        scope: Annotated[TenantScope, Depends(get_tenant_context(strict))],
    ) -> TenantScope:
        AuthorizationService.require_fixed_role(scope.principal, roles)
        return scope

    return _require


require_role_admin = require_fixed_role(FixedRole.ADMIN, FixedRole.SUPER_ADMIN)
require_role_admin_write = require_fixed_role(
    FixedRole.ADMIN, FixedRole.SUPER_ADMIN, strict=True
)
