"""RoleAssignment repository: SQLAlchemy implementation of IRoleAssignmentRepository.

Uniqueness of the active (user, role, company) triple is enforced by the
partial unique index on role_assignment; an IntegrityError on insert means a
concurrent or existing grant won.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_authz.domain.entities import RoleAssignment
from expense_authz.domain.enums import DeactivationReason
from expense_authz.domain.exceptions import AssignmentNotFound, DuplicateAssignment
from expense_authz.infrastructure.persistence.models.role_assignment import (
    RoleAssignmentModel,
)
from expense_authz.infrastructure.persistence.repositories.base import storage_errors
from expense_authz.shared.utils.datetime import ensure_utc


def _to_entity(model: RoleAssignmentModel) -> RoleAssignment:
    return RoleAssignment(
        id=model.id,
        user_id=model.user_id,
        custom_role_id=model.custom_role_id,
        company_id=model.company_id,
        assigned_by=model.assigned_by,
        assigned_at=ensure_utc(model.assigned_at),  # type: ignore[arg-type]
        expires_at=ensure_utc(model.expires_at),
        is_active=model.is_active,
        deactivated_at=ensure_utc(model.deactivated_at),
        deactivated_by=model.deactivated_by,
        deactivation_reason=(
            DeactivationReason(model.deactivation_reason)
            if model.deactivation_reason
            else None
        ),
    )


def _deactivate(
    model: RoleAssignmentModel,
    at: datetime,
    by: str | None,
    reason: DeactivationReason,
) -> None:
    model.is_active = False
    model.deactivated_at = at
    model.deactivated_by = by
    model.deactivation_reason = reason.value


class RoleAssignmentRepository:
    """Role assignments stored in table role_assignment."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_model(self, assignment_id: str) -> RoleAssignmentModel | None:
        result = await self.db.execute(
            select(RoleAssignmentModel).where(RoleAssignmentModel.id == assignment_id)
        )
        return result.scalar_one_or_none()

    async def _require_model(self, assignment_id: str) -> RoleAssignmentModel:
        model = await self._get_model(assignment_id)
        if model is None:
            raise AssignmentNotFound(assignment_id)
        return model

    async def get_by_id(self, assignment_id: str) -> RoleAssignment | None:
        with storage_errors("get_assignment"):
            model = await self._get_model(assignment_id)
        return _to_entity(model) if model else None

    async def list_effective(
        self, user_id: str, company_id: str, now: datetime
    ) -> list[RoleAssignment]:
        with storage_errors("list_effective_assignments"):
            result = await self.db.execute(
                select(RoleAssignmentModel).where(
                    RoleAssignmentModel.user_id == user_id,
                    RoleAssignmentModel.company_id == company_id,
                    RoleAssignmentModel.is_active.is_(True),
                    or_(
                        RoleAssignmentModel.expires_at.is_(None),
                        RoleAssignmentModel.expires_at > now,
                    ),
                )
            )
            models = result.scalars().all()
        return [_to_entity(m) for m in models]

    async def list_for_user(
        self, user_id: str, company_id: str, include_inactive: bool = False
    ) -> list[RoleAssignment]:
        stmt = select(RoleAssignmentModel).where(
            RoleAssignmentModel.user_id == user_id,
            RoleAssignmentModel.company_id == company_id,
        )
        if not include_inactive:
            stmt = stmt.where(RoleAssignmentModel.is_active.is_(True))
        with storage_errors("list_user_assignments"):
            result = await self.db.execute(
                stmt.order_by(
                    RoleAssignmentModel.assigned_at.desc(), RoleAssignmentModel.id
                )
            )
            models = result.scalars().all()
        return [_to_entity(m) for m in models]

    async def create_active(
        self, assignment: RoleAssignment, now: datetime
    ) -> RoleAssignment:
        with storage_errors("create_assignment"):
            # Close out a lapsed row for the triple so the index admits the new one.
            result = await self.db.execute(
                select(RoleAssignmentModel).where(
                    RoleAssignmentModel.user_id == assignment.user_id,
                    RoleAssignmentModel.custom_role_id == assignment.custom_role_id,
                    RoleAssignmentModel.company_id == assignment.company_id,
                    RoleAssignmentModel.is_active.is_(True),
                    RoleAssignmentModel.expires_at.is_not(None),
                    RoleAssignmentModel.expires_at <= now,
                )
            )
            for stale in result.scalars().all():
                _deactivate(stale, now, None, DeactivationReason.EXPIRED)
            await self.db.flush()

            model = RoleAssignmentModel(
                id=assignment.id,
                user_id=assignment.user_id,
                custom_role_id=assignment.custom_role_id,
                company_id=assignment.company_id,
                assigned_by=assignment.assigned_by,
                assigned_at=assignment.assigned_at,
                expires_at=assignment.expires_at,
                is_active=True,
            )
            try:
                self.db.add(model)
                await self.db.flush()
            except IntegrityError:
                raise DuplicateAssignment(
                    assignment.user_id, assignment.custom_role_id, assignment.company_id
                ) from None
        return _to_entity(model)

    async def deactivate(
        self,
        assignment_id: str,
        at: datetime,
        by: str | None,
        reason: DeactivationReason,
    ) -> RoleAssignment:
        with storage_errors("deactivate_assignment"):
            model = await self._require_model(assignment_id)
            _deactivate(model, at, by, reason)
            await self.db.flush()
        return _to_entity(model)

    async def update_expiry(
        self, assignment_id: str, expires_at: datetime | None
    ) -> RoleAssignment:
        with storage_errors("update_assignment_expiry"):
            model = await self._require_model(assignment_id)
            model.expires_at = expires_at
            await self.db.flush()
        return _to_entity(model)

    async def deactivate_by_role(
        self,
        custom_role_id: str,
        at: datetime,
        by: str | None,
        reason: DeactivationReason,
    ) -> int:
        with storage_errors("deactivate_role_assignments"):
            result = await self.db.execute(
                select(RoleAssignmentModel).where(
                    RoleAssignmentModel.custom_role_id == custom_role_id,
                    RoleAssignmentModel.is_active.is_(True),
                )
            )
            models = result.scalars().all()
            for model in models:
                expires_at = ensure_utc(model.expires_at)
                if expires_at is not None and expires_at <= at:
                    _deactivate(model, at, by, DeactivationReason.EXPIRED)
                else:
                    _deactivate(model, at, by, reason)
            await self.db.flush()
        return len(models)

    async def deactivate_expired(
        self, company_id: str, now: datetime, by: str | None
    ) -> int:
        with storage_errors("sweep_expired_assignments"):
            result = await self.db.execute(
                select(RoleAssignmentModel).where(
                    RoleAssignmentModel.company_id == company_id,
                    RoleAssignmentModel.is_active.is_(True),
                    RoleAssignmentModel.expires_at.is_not(None),
                    RoleAssignmentModel.expires_at <= now,
                )
            )
            models = result.scalars().all()
            for model in models:
                _deactivate(model, now, by, DeactivationReason.EXPIRED)
            await self.db.flush()
        return len(models)
