"""DTOs for role-assignment use cases (no dependency on ORM)."""

from dataclasses import dataclass

from expense_authz.domain.entities import RoleAssignment
from expense_authz.domain.enums import AssignmentStatus


@dataclass(frozen=True)
class AssignmentView:
    """Assignment annotated with its lifecycle status at query time."""

    assignment: RoleAssignment
    status: AssignmentStatus
