"""Application DTOs (frozen dataclasses, no ORM types)."""

from expense_authz.application.dtos.assignment import AssignmentView
from expense_authz.application.dtos.custom_role import RoleDeactivationResult

__all__ = ["AssignmentView", "RoleDeactivationResult"]
