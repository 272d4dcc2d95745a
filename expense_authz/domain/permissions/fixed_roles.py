"""Permission grants of the four built-in (fixed) roles.

super-admin is never an enumerated set: it maps to the ALL_PERMISSIONS
sentinel so that keys added to the catalog later are covered automatically.
"""

from enum import Enum
from typing import Final, Literal

from expense_authz.domain.enums import FixedRole
from expense_authz.domain.permissions.catalog import DEFAULT_CATALOG, PermissionCatalog


class _AllPermissions(Enum):
    ALL = "all"

    def __repr__(self) -> str:
        return "ALL_PERMISSIONS"


ALL_PERMISSIONS: Final = _AllPermissions.ALL
AllPermissions = Literal[_AllPermissions.ALL]

USER_GRANT: frozenset[str] = frozenset(
    {
        "dashboard.view",
        "vendors.view",
        "customers.view",
        "expense_categories.view",
        "expenses.view",
        "expenses.create",
        "expenses.edit",
        "ingrid.chat",
        "ingrid.suggestions.view",
    }
)

CONTROLLER_GRANT: frozenset[str] = frozenset(
    {
        "dashboard.view",
        "analytics.view",
        "analytics.export",
        "expenses.view",
        "expenses.create",
        "expenses.edit",
        "expenses.approve",
        "expenses.review",
        "expenses.delete",
        "vendors.view",
        "vendors.create",
        "vendors.edit",
        "vendors.delete",
        "customers.view",
        "customers.create",
        "customers.edit",
        "customers.delete",
        "gl_accounts.view",
        "gl_accounts.create",
        "gl_accounts.edit",
        "gl_accounts.delete",
        "expense_categories.view",
        "expense_categories.create",
        "expense_categories.edit",
        "expense_categories.delete",
        "users.view",
        "users.create",
        "users.edit",
        "company.settings.view",
        "company.settings.edit",
        "notifications.view",
        "notifications.manage",
    }
)

ADMIN_GRANT: frozenset[str] = frozenset(
    {
        "dashboard.view",
        "users.view",
        "users.create",
        "users.edit",
        "users.delete",
        "company.settings.view",
        "company.settings.edit",
        "vendors.view",
        "vendors.create",
        "vendors.edit",
        "vendors.delete",
        "customers.view",
        "customers.create",
        "customers.edit",
        "customers.delete",
        "gl_accounts.view",
        "gl_accounts.create",
        "gl_accounts.edit",
        "expense_categories.view",
        "expense_categories.create",
        "expense_categories.edit",
        "expenses.view",
        "expenses.create",
        "expenses.edit",
        "expenses.approve",
        "ingrid.suggestions.view",
        "ingrid.suggestions.approve",
        "ingrid.configure",
        "automation.view",
        "automation.create",
        "automation.edit",
        "analytics.view",
        "analytics.export",
        "api.manage",
    }
)

FIXED_ROLE_GRANTS: dict[FixedRole, frozenset[str] | AllPermissions] = {
    FixedRole.USER: USER_GRANT,
    FixedRole.CONTROLLER: CONTROLLER_GRANT,
    FixedRole.ADMIN: ADMIN_GRANT,
    FixedRole.SUPER_ADMIN: ALL_PERMISSIONS,
}


def grant_for_fixed_role(role: FixedRole | str) -> frozenset[str] | AllPermissions:
    """Return the permission keys granted by a fixed role, or ALL_PERMISSIONS.

    Raises:
        ValueError: If role is not one of the four fixed roles.
    """
    return FIXED_ROLE_GRANTS[FixedRole(role)]


def validate_fixed_grants(catalog: PermissionCatalog = DEFAULT_CATALOG) -> None:
    """Check that every enumerated grant references catalog keys only."""
    for role, grant in FIXED_ROLE_GRANTS.items():
        if grant is ALL_PERMISSIONS:
            continue
        unknown = grant - catalog.keys()
        if unknown:
            raise ValueError(
                f"Fixed role '{role.value}' grants unknown keys: {', '.join(sorted(unknown))}"
            )
