"""Application interfaces (ports): store protocols.

No runtime imports from expense_authz.infrastructure.
"""

from expense_authz.application.interfaces.repositories import (
    ICustomRoleRepository,
    IRoleAssignmentRepository,
)

__all__ = ["ICustomRoleRepository", "IRoleAssignmentRepository"]
