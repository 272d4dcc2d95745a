"""Role assignments API: grant, revoke, renew, list and sweep custom-role assignments."""

from typing import Annotated

from fastapi import APIRouter, Depends

from expense_authz.api.v1.dependencies import (
    TenantScope,
    get_assignment_service,
    get_assignment_service_for_write,
    get_tenant_context,
    require_role_admin_write,
)
from expense_authz.application.services import AssignmentService
from expense_authz.schemas.role_assignment import (
    RoleAssignmentCreateRequest,
    RoleAssignmentRenewRequest,
    RoleAssignmentResponse,
    SweepExpiredResponse,
)
from expense_authz.shared.utils.datetime import utc_now

router = APIRouter()


@router.get("", response_model=list[RoleAssignmentResponse])
async def list_role_assignments(
    scope: Annotated[TenantScope, Depends(get_tenant_context(strict=False))],
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
    user_id: str | None = None,
    include_inactive: bool = False,
):
    """List a user's assignments (default: the caller's own) with computed status."""
    views = await service.list_for_user(
        scope.principal,
        user_id or scope.principal.id,
        scope.company_id,
        include_inactive=include_inactive,
    )
    return [RoleAssignmentResponse.from_view(v) for v in views]


@router.post("", response_model=RoleAssignmentResponse, status_code=201)
async def grant_role(
    body: RoleAssignmentCreateRequest,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[AssignmentService, Depends(get_assignment_service_for_write)],
):
    """Assign a custom role; 409 if an active assignment already exists."""
    now = utc_now()
    assignment = await service.grant(
        scope.principal,
        body.user_id,
        body.custom_role_id,
        scope.company_id,
        expires_at=body.expires_at,
        now=now,
    )
    return RoleAssignmentResponse.from_domain(assignment, assignment.status(now))


@router.post("/sweep-expired", response_model=SweepExpiredResponse)
async def sweep_expired_assignments(
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[AssignmentService, Depends(get_assignment_service_for_write)],
):
    count = await service.sweep_expired(scope.principal, scope.company_id)
    return SweepExpiredResponse(company_id=scope.company_id, deactivated=count)


@router.post("/{assignment_id}/revoke", response_model=RoleAssignmentResponse)
async def revoke_assignment(
    assignment_id: str,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[AssignmentService, Depends(get_assignment_service_for_write)],
):
    """Revoke an assignment. Revoking an inactive assignment is a no-op."""
    now = utc_now()
    assignment = await service.revoke(scope.principal, assignment_id, now=now)
    return RoleAssignmentResponse.from_domain(assignment, assignment.status(now))


@router.post("/{assignment_id}/renew", response_model=RoleAssignmentResponse)
async def renew_assignment(
    assignment_id: str,
    body: RoleAssignmentRenewRequest,
    scope: Annotated[TenantScope, Depends(require_role_admin_write)],
    service: Annotated[AssignmentService, Depends(get_assignment_service_for_write)],
):
    now = utc_now()
    assignment = await service.renew(
        scope.principal, assignment_id, body.expires_at, now=now
    )
    return RoleAssignmentResponse.from_domain(assignment, assignment.status(now))
