"""DTOs for custom-role use cases (no dependency on ORM)."""

from dataclasses import dataclass

from expense_authz.domain.entities import CustomRole


@dataclass(frozen=True)
class RoleDeactivationResult:
    """Result of deactivating a custom role, with the cascade count."""

    role: CustomRole
    deactivated_assignments: int
