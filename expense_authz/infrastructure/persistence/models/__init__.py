"""ORM models. Importing this package registers every table on Base.metadata."""

from expense_authz.infrastructure.persistence.models.custom_role import CustomRoleModel
from expense_authz.infrastructure.persistence.models.role_assignment import (
    RoleAssignmentModel,
)

__all__ = ["CustomRoleModel", "RoleAssignmentModel"]
