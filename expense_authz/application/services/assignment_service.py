"""Assignment lifecycle: grant, revoke, renew, list and sweep custom-role assignments."""

from __future__ import annotations

import logging
from datetime import datetime

from expense_authz.application.dtos.assignment import AssignmentView
from expense_authz.application.interfaces.repositories import (
    ICustomRoleRepository,
    IRoleAssignmentRepository,
)
from expense_authz.application.services.authorization_service import AuthorizationService
from expense_authz.core.tenant_validation import validate_company_id
from expense_authz.domain.entities import Principal, RoleAssignment
from expense_authz.domain.enums import (
    ROLE_ADMINISTRATORS,
    AssignmentStatus,
    DeactivationReason,
)
from expense_authz.domain.exceptions import (
    AssignmentNotFound,
    CrossTenantViolation,
    InvalidArgument,
    RoleNotFound,
)
from expense_authz.shared.utils.datetime import ensure_utc, resolve_now
from expense_authz.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _require_future(value: datetime, now: datetime, field: str) -> datetime:
    if value.tzinfo is None:
        raise InvalidArgument(f"{field} must be timezone-aware", field=field)
    value = ensure_utc(value)  # type: ignore[assignment]
    if value <= now:
        raise InvalidArgument(f"{field} must be in the future", field=field)
    return value


class AssignmentService:
    """Lifecycle of RoleAssignment rows. Only admin and super-admin may mutate."""

    def __init__(
        self,
        role_repo: ICustomRoleRepository,
        assignment_repo: IRoleAssignmentRepository,
    ) -> None:
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo

    async def grant(
        self,
        assigner: Principal,
        user_id: str,
        custom_role_id: str,
        company_id: str,
        expires_at: datetime | None = None,
        now: datetime | None = None,
    ) -> RoleAssignment:
        """Assign a custom role to a user within company_id.

        Raises:
            Forbidden: assigner is not admin/super-admin, or targets a foreign company.
            RoleNotFound: the custom role does not exist.
            InvalidArgument: inactive role, empty user id, or expiry not in the future.
            CrossTenantViolation: the role belongs to another company.
            DuplicateAssignment: an active, non-expired assignment already exists.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(assigner, ROLE_ADMINISTRATORS)
        validate_company_id(company_id)
        AuthorizationService.require_company_scope(assigner, company_id)
        if not user_id or not user_id.strip():
            raise InvalidArgument("user_id is required", field="user_id")

        role = await self._role_repo.get_by_id(custom_role_id)
        if role is None:
            raise RoleNotFound(custom_role_id)
        if not role.is_active:
            raise InvalidArgument(
                "Cannot assign an inactive custom role", field="custom_role_id"
            )
        if not role.belongs_to(company_id):
            logger.error(
                "Cross-tenant grant refused: role %s of company %s into company %s by %s",
                role.id,
                role.company_id,
                company_id,
                assigner.id,
            )
            raise CrossTenantViolation(
                "Custom role belongs to a different company",
                custom_role_id=role.id,
                company_id=company_id,
            )
        if expires_at is not None:
            expires_at = _require_future(expires_at, now, "expires_at")

        assignment = RoleAssignment(
            id=generate_cuid(),
            user_id=user_id,
            custom_role_id=custom_role_id,
            company_id=company_id,
            assigned_by=assigner.id,
            assigned_at=now,
            expires_at=expires_at,
        )
        created = await self._assignment_repo.create_active(assignment, now)
        logger.info(
            "Granted custom role %s to user %s in company %s (assignment %s, expires %s)",
            custom_role_id,
            user_id,
            company_id,
            created.id,
            expires_at.isoformat() if expires_at else "never",
        )
        return created

    async def _get_visible(
        self, actor: Principal, assignment_id: str
    ) -> RoleAssignment:
        assignment = await self._assignment_repo.get_by_id(assignment_id)
        if assignment is None or (
            not actor.is_super_admin and assignment.company_id != actor.home_company_id
        ):
            raise AssignmentNotFound(assignment_id)
        return assignment

    async def revoke(
        self, assigner: Principal, assignment_id: str, now: datetime | None = None
    ) -> RoleAssignment:
        """Deactivate an assignment (reason REVOKED).

        Revoked or expired rows are terminal and returned unchanged, so an
        assignment that timed out keeps its EXPIRED status.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(assigner, ROLE_ADMINISTRATORS)
        assignment = await self._get_visible(assigner, assignment_id)
        if assignment.status(now) != AssignmentStatus.ACTIVE:
            return assignment
        revoked = await self._assignment_repo.deactivate(
            assignment_id, now, assigner.id, DeactivationReason.REVOKED
        )
        logger.info("Revoked assignment %s by %s", assignment_id, assigner.id)
        return revoked

    async def renew(
        self,
        assigner: Principal,
        assignment_id: str,
        new_expires_at: datetime | None,
        now: datetime | None = None,
    ) -> RoleAssignment:
        """Replace the expiry of an active assignment; None removes the expiry.

        Raises:
            InvalidArgument: new_expires_at is not in the future, or the
                assignment is already revoked or expired.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(assigner, ROLE_ADMINISTRATORS)
        if new_expires_at is not None:
            new_expires_at = _require_future(new_expires_at, now, "expires_at")
        assignment = await self._get_visible(assigner, assignment_id)
        status = assignment.status(now)
        if status != AssignmentStatus.ACTIVE:
            raise InvalidArgument(
                f"Cannot renew an assignment that is {status.value}",
                field="assignment_id",
            )
        renewed = await self._assignment_repo.update_expiry(assignment_id, new_expires_at)
        logger.info(
            "Renewed assignment %s until %s by %s",
            assignment_id,
            new_expires_at.isoformat() if new_expires_at else "never",
            assigner.id,
        )
        return renewed

    async def list_for_user(
        self,
        actor: Principal,
        user_id: str,
        company_id: str,
        now: datetime | None = None,
        include_inactive: bool = False,
    ) -> list[AssignmentView]:
        """Return the user's assignments in company_id, each with its status.

        A user may list their own assignments; listing anyone else's needs
        admin or super-admin.
        """
        now = resolve_now(now)
        validate_company_id(company_id)
        if actor.id != user_id:
            AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        AuthorizationService.require_company_scope(actor, company_id)
        assignments = await self._assignment_repo.list_for_user(
            user_id, company_id, include_inactive
        )
        return [AssignmentView(a, a.status(now)) for a in assignments]

    async def sweep_expired(
        self, actor: Principal, company_id: str, now: datetime | None = None
    ) -> int:
        """Flip active-but-expired assignments off (reason EXPIRED); return the count.

        Housekeeping only: expired rows already grant nothing.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        validate_company_id(company_id)
        AuthorizationService.require_company_scope(actor, company_id)
        count = await self._assignment_repo.deactivate_expired(company_id, now, actor.id)
        if count:
            logger.info("Swept %d expired assignments in company %s", count, company_id)
        return count
