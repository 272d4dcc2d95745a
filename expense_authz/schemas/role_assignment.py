"""Role assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from expense_authz.application.dtos.assignment import AssignmentView
from expense_authz.domain.entities import RoleAssignment
from expense_authz.domain.enums import AssignmentStatus, DeactivationReason


class RoleAssignmentCreateRequest(BaseModel):
    """Request body for granting a custom role to a user."""

    user_id: str = Field(..., min_length=1, max_length=64)
    custom_role_id: str = Field(..., min_length=1, max_length=64)
    expires_at: datetime | None = None


class RoleAssignmentRenewRequest(BaseModel):
    """Request body for renewing an assignment; null removes the expiry."""

    expires_at: datetime | None


class RoleAssignmentResponse(BaseModel):
    """Role assignment with its computed status."""

    id: str
    user_id: str
    custom_role_id: str
    company_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
    status: AssignmentStatus
    deactivated_at: datetime | None = None
    deactivated_by: str | None = None
    deactivation_reason: DeactivationReason | None = None

    @classmethod
    def from_domain(
        cls, assignment: RoleAssignment, status: AssignmentStatus
    ) -> "RoleAssignmentResponse":
        return cls(
            id=assignment.id,
            user_id=assignment.user_id,
            custom_role_id=assignment.custom_role_id,
            company_id=assignment.company_id,
            assigned_by=assignment.assigned_by,
            assigned_at=assignment.assigned_at,
            expires_at=assignment.expires_at,
            is_active=assignment.is_active,
            status=status,
            deactivated_at=assignment.deactivated_at,
            deactivated_by=assignment.deactivated_by,
            deactivation_reason=assignment.deactivation_reason,
        )

    @classmethod
    def from_view(cls, view: AssignmentView) -> "RoleAssignmentResponse":
        return cls.from_domain(view.assignment, view.status)


class SweepExpiredResponse(BaseModel):
    """Response for POST /role-assignments/sweep-expired."""

    company_id: str
    deactivated: int
