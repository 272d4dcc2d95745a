"""Current-user API: effective permissions in the resolved company."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from expense_authz.api.v1.dependencies import (
    TenantScope,
    get_permission_resolver,
    get_tenant_context,
)
from expense_authz.application.services import PermissionResolver
from expense_authz.schemas.permission import MyPermissionsResponse
from expense_authz.shared.utils.datetime import utc_now

router = APIRouter()


@router.get("/permissions", response_model=MyPermissionsResponse)
async def get_my_permissions(
    scope: Annotated[TenantScope, Depends(get_tenant_context(strict=False))],
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    explain: Annotated[bool, Query(description="Include per-key grant sources")] = False,
):
    """Return the caller's effective permissions (super-admin: every catalog key)."""
    now = utc_now()
    principal = scope.principal
    effective = await resolver.resolve(principal, scope.company_id, now)
    sources = None
    if explain:
        sources = await resolver.explain(principal, scope.company_id, now)
    return MyPermissionsResponse(
        user_id=principal.id,
        company_id=scope.company_id,
        fixed_role=principal.fixed_role,
        is_all=effective.is_all,
        permissions=sorted(effective.expand(resolver.catalog)),
        sources=sources,
    )
