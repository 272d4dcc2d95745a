"""Domain enumerations for the authorization engine.

Enums represent fixed sets of domain values (fixed roles, assignment status).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class FixedRole(_ValuesMixin, str, Enum):
    """Built-in role carried on every principal's profile.

    SUPER_ADMIN is the only role whose grant crosses tenant boundaries.
    """

    USER = "user"
    CONTROLLER = "controller"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class AssignmentStatus(_ValuesMixin, str, Enum):
    """Computed state of a role assignment at a given instant.

    EXPIRED and REVOKED are both terminal; they stay distinct for audit.
    """

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class DeactivationReason(_ValuesMixin, str, Enum):
    """Why an assignment's is_active flag was cleared."""

    REVOKED = "revoked"
    EXPIRED = "expired"
    ROLE_DEACTIVATED = "role_deactivated"


ROLE_ADMINISTRATORS: frozenset[FixedRole] = frozenset(
    {FixedRole.ADMIN, FixedRole.SUPER_ADMIN}
)
