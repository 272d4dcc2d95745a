"""Custom roles API: tenant-defined roles (admin and super-admin only)."""

from operator import attrgetter
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from expense_authz.api.v1.dependencies import (
    TenantScope,
    get_custom_role_service,
    get_custom_role_service_for_write,
    require_role_admin,
    require_role_admin_write,
)
from expense_authz.application.services import CustomRoleService
from expense_authz.schemas.custom_role import (
    CustomRoleCreateRequest,
    CustomRoleDeactivatedResponse,
    CustomRoleFromTemplateRequest,
    CustomRoleResponse,
    CustomRoleSortField,
    CustomRoleUpdateRequest,
    SortOrder,
)

router = APIRouter()


@router.get("", response_model=list[CustomRoleResponse])
async def list_custom_roles(
    scope: Annotated[TenantScope, Depends(require_role_admin)],
    service: Annotated[CustomRoleService, Depends(get_custom_role_service)],
    include_inactive: bool = False,
    sort: Annotated[CustomRoleSortField, Query()] = "name",
    order: Annotated[SortOrder, Query()] = "asc",
):
    """List custom roles of the resolved company."""
    roles = await service.list(scope.principal, scope.company_id, include_inactive)
    roles = sorted(roles, key=attrgetter(sort), reverse=order == "desc")
    return [CustomRoleResponse.model_validate(r) for r in roles]


@router.post("", response_model=CustomRoleResponse, status_code=201)
async def create_custom_role(
    body: CustomRoleCreateRequest,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[CustomRoleService, Depends(get_custom_role_service_for_write)],
):
    """Create a custom role; permission keys must exist and their dependencies be included."""
    role = await service.create(
        scope.principal,
        scope.company_id,
        body.name,
        body.permissions,
        description=body.description,
    )
    return CustomRoleResponse.model_validate(role)


@router.post("/from-template", response_model=CustomRoleResponse, status_code=201)
async def create_custom_role_from_template(
    body: CustomRoleFromTemplateRequest,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[CustomRoleService, Depends(get_custom_role_service_for_write)],
):
    role = await service.create_from_template(
        scope.principal, scope.company_id, body.template_name, name=body.name
    )
    return CustomRoleResponse.model_validate(role)


@router.get("/{custom_role_id}", response_model=CustomRoleResponse)
async def get_custom_role(
    custom_role_id: str,
    scope: Annotated[TenantScope, Depends(require_role_admin)],
    service: Annotated[CustomRoleService, Depends(get_custom_role_service)],
):
    role = await service.get(scope.principal, custom_role_id)
    return CustomRoleResponse.model_validate(role)


@router.patch("/{custom_role_id}", response_model=CustomRoleResponse)
async def update_custom_role(
    custom_role_id: str,
    body: CustomRoleUpdateRequest,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[CustomRoleService, Depends(get_custom_role_service_for_write)],
):
    """Partially update a custom role; omitted fields are left unchanged."""
    role = await service.update(
        scope.principal,
        custom_role_id,
        name=body.name,
        description=body.description,
        permissions=body.permissions,
    )
    return CustomRoleResponse.model_validate(role)


@router.delete("/{custom_role_id}", response_model=CustomRoleDeactivatedResponse)
async def deactivate_custom_role(
    custom_role_id: str,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[CustomRoleService, Depends(get_custom_role_service_for_write)],
):
    """Soft-delete: deactivate the role and every active assignment of it."""
    result = await service.deactivate(scope.principal, custom_role_id)
    return CustomRoleDeactivatedResponse(
        role=CustomRoleResponse.model_validate(result.role),
        deactivated_assignments=result.deactivated_assignments,
    )
