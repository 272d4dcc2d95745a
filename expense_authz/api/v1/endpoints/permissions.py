"""Permissions API: catalog (grouped) and built-in templates."""

from typing import Annotated

from fastapi import APIRouter, Depends

from expense_authz.api.v1.dependencies import (
    TenantScope,
    get_current_principal,
    require_role_admin,
)
from expense_authz.domain.entities import Principal
from expense_authz.domain.permissions import DEFAULT_CATALOG, list_templates
from expense_authz.schemas.permission import (
    PermissionGroupResponse,
    PermissionResponse,
    PermissionTemplateResponse,
)

router = APIRouter()


@router.get("", response_model=list[PermissionGroupResponse])
async def list_permissions(
    _: Annotated[Principal, Depends(get_current_principal)],
):
    """List every catalog permission grouped for role editors."""
    return [
        PermissionGroupResponse(
            group=group,
            permissions=[PermissionResponse.model_validate(p) for p in permissions],
        )
        for group, permissions in DEFAULT_CATALOG.grouped().items()
    ]


@router.get("/templates", response_model=list[PermissionTemplateResponse])
async def list_permission_templates(
    _: Annotated[TenantScope, Depends(require_role_admin)],
):
    """List built-in templates usable with POST /custom-roles/from-template."""
    return [PermissionTemplateResponse.model_validate(t) for t in list_templates()]
