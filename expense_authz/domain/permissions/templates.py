"""Built-in, read-only permission templates for creating custom roles."""

from dataclasses import dataclass

from expense_authz.domain.enums import FixedRole


@dataclass(frozen=True)
class PermissionTemplate:
    name: str
    display_name: str
    description: str
    target_role: FixedRole
    permissions: frozenset[str]


BUILTIN_TEMPLATES: dict[str, PermissionTemplate] = {
    t.name: t
    for t in (
        PermissionTemplate(
            name="basic_user",
            display_name="Basic User",
            description="Standard permissions for regular users",
            target_role=FixedRole.USER,
            permissions=frozenset(
                {"dashboard.view", "expenses.view", "expenses.create", "notifications.view"}
            ),
        ),
        PermissionTemplate(
            name="expense_reviewer",
            display_name="Expense Reviewer",
            description="Can review and approve expenses",
            target_role=FixedRole.USER,
            permissions=frozenset(
                {
                    "dashboard.view",
                    "expenses.view",
                    "expenses.create",
                    "expenses.review",
                    "expenses.approve",
                    "analytics.view",
                }
            ),
        ),
        PermissionTemplate(
            name="department_manager",
            display_name="Department Manager",
            description="Manages a department's expenses, vendors and customers",
            target_role=FixedRole.ADMIN,
            permissions=frozenset(
                {
                    "dashboard.view",
                    "analytics.view",
                    "expenses.view",
                    "expenses.create",
                    "expenses.edit",
                    "expenses.approve",
                    "expenses.review",
                    "vendors.view",
                    "vendors.create",
                    "vendors.edit",
                    "customers.view",
                    "customers.create",
                    "customers.edit",
                    "users.view",
                    "notifications.view",
                    "notifications.manage",
                }
            ),
        ),
        PermissionTemplate(
            name="controller",
            display_name="Controller",
            description="Financial controller with full accounting access",
            target_role=FixedRole.ADMIN,
            permissions=frozenset(
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
            ),
        ),
    )
}


def get_template(name: str) -> PermissionTemplate | None:
    return BUILTIN_TEMPLATES.get(name)


def list_templates() -> list[PermissionTemplate]:
    return sorted(BUILTIN_TEMPLATES.values(), key=lambda t: t.name)
