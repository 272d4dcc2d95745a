"""Permission catalog, fixed-role grants and built-in templates."""

from expense_authz.domain.permissions.catalog import (
    DEFAULT_CATALOG,
    Permission,
    PermissionCatalog,
    build_default_catalog,
)
from expense_authz.domain.permissions.fixed_roles import (
    ALL_PERMISSIONS,
    FIXED_ROLE_GRANTS,
    grant_for_fixed_role,
)
from expense_authz.domain.permissions.templates import (
    BUILTIN_TEMPLATES,
    PermissionTemplate,
    get_template,
    list_templates,
)

__all__ = [
    "ALL_PERMISSIONS",
    "BUILTIN_TEMPLATES",
    "DEFAULT_CATALOG",
    "FIXED_ROLE_GRANTS",
    "Permission",
    "PermissionCatalog",
    "PermissionTemplate",
    "build_default_catalog",
    "get_template",
    "grant_for_fixed_role",
    "list_templates",
]
