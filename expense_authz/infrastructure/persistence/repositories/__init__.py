"""SQLAlchemy repositories implementing the application store protocols."""

from expense_authz.infrastructure.persistence.repositories.custom_role_repo import (
    CustomRoleRepository,
)
from expense_authz.infrastructure.persistence.repositories.role_assignment_repo import (
    RoleAssignmentRepository,
)

__all__ = ["CustomRoleRepository", "RoleAssignmentRepository"]
