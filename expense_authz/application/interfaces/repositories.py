"""Store interfaces (ports) for the authorization engine.

Protocols define contracts that infrastructure implementations must fulfill.
Services receive implementations at construction; there is no global store.
All store methods raise StorageUnavailable when the backend cannot complete
the operation.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from expense_authz.domain.entities import CustomRole, RoleAssignment
from expense_authz.domain.enums import DeactivationReason


class ICustomRoleRepository(Protocol):
    """Protocol for the custom-role store."""

    async def get_by_id(self, custom_role_id: str) -> CustomRole | None:
        """Return the role (active or not), or None."""

    async def get_by_ids(self, custom_role_ids: Iterable[str]) -> list[CustomRole]:
        """Return the roles with the given ids; unknown ids are skipped."""

    async def get_active_by_name(self, company_id: str, name: str) -> CustomRole | None:
        """Return the active role with this name in the company, or None."""

    async def list_by_company(
        self, company_id: str, include_inactive: bool = False
    ) -> list[CustomRole]:
        """Return roles of one company ordered by name."""

    async def create(self, role: CustomRole) -> CustomRole:
        """Persist a new role. Raises InvalidArgument on an active-name clash."""

    async def update(self, role: CustomRole) -> CustomRole:
        """Persist name, description, permissions, is_active and updated_at."""


class IRoleAssignmentRepository(Protocol):
    """Protocol for the role-assignment store."""

    async def get_by_id(self, assignment_id: str) -> RoleAssignment | None:
        """Return the assignment, or None."""

    async def list_effective(
        self, user_id: str, company_id: str, now: datetime
    ) -> list[RoleAssignment]:
        """Return active assignments of user in company with expires_at null or > now."""

    async def list_for_user(
        self, user_id: str, company_id: str, include_inactive: bool = False
    ) -> list[RoleAssignment]:
        """Return the user's assignments in company, newest first."""

    async def create_active(
        self, assignment: RoleAssignment, now: datetime
    ) -> RoleAssignment:
        """Atomically insert an active assignment.

        A prior row for the same triple that is active but expired at ``now``
        is closed out with reason EXPIRED first. Raises DuplicateAssignment
        when an active, non-expired row already exists.
        """

    async def deactivate(
        self,
        assignment_id: str,
        at: datetime,
        by: str | None,
        reason: DeactivationReason,
    ) -> RoleAssignment:
        """Set is_active False with audit fields and return the updated row."""

    async def update_expiry(
        self, assignment_id: str, expires_at: datetime | None
    ) -> RoleAssignment:
        """Replace expires_at and return the updated row."""

    async def deactivate_by_role(
        self,
        custom_role_id: str,
        at: datetime,
        by: str | None,
        reason: DeactivationReason,
    ) -> int:
        """Deactivate every active assignment of a role; return the count.

        Rows already expired at ``at`` are closed with reason EXPIRED; only
        rows still valid get ``reason``.
        """

    async def deactivate_expired(
        self, company_id: str, now: datetime, by: str | None
    ) -> int:
        """Flip active-but-expired assignments in company to inactive (EXPIRED)."""
