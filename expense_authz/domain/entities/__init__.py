"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from expense_authz.domain.entities.custom_role import CustomRole
from expense_authz.domain.entities.principal import Principal
from expense_authz.domain.entities.role_assignment import RoleAssignment

__all__ = [
    "CustomRole",
    "Principal",
    "RoleAssignment",
]
