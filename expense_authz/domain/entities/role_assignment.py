"""Role assignment entity: time-bounded link between a user and a custom role."""

from dataclasses import dataclass
from datetime import datetime

from expense_authz.domain.enums import AssignmentStatus, DeactivationReason


@dataclass(frozen=True)
class RoleAssignment:
    """Assignment of a custom role to a user within one company.

    Expiry is computed, not swept: an assignment whose expires_at is at or
    before ``now`` grants nothing regardless of is_active. Rows are never
    hard-deleted so that the reason access ended stays auditable.
    """

    id: str
    user_id: str
    custom_role_id: str
    company_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None = None
    is_active: bool = True
    deactivated_at: datetime | None = None
    deactivated_by: str | None = None
    deactivation_reason: DeactivationReason | None = None

    def is_expired_at(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_effective_at(self, now: datetime) -> bool:
        """Return True if this assignment contributes permissions at ``now``."""
        return self.is_active and not self.is_expired_at(now)

    def status(self, now: datetime) -> AssignmentStatus:
        """Return the computed lifecycle state at ``now``.

        A row flipped inactive by the expiry sweep still reports EXPIRED, so
        time-out and deliberate revocation remain distinguishable.
        """
        if not self.is_active:
            if self.deactivation_reason == DeactivationReason.EXPIRED:
                return AssignmentStatus.EXPIRED
            return AssignmentStatus.REVOKED
        if self.is_expired_at(now):
            return AssignmentStatus.EXPIRED
        return AssignmentStatus.ACTIVE
