"""Permission catalog: process-wide registry of permission keys.

Built once at startup and frozen; lookups are pure afterwards. Keys are
namespaced ``resource.action`` strings (``company.settings.view`` is allowed)
and are never reused for different semantics once published.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from expense_authz.domain.exceptions import CatalogConflict, InvalidArgument

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")

GROUP_CORE = "Core System"
GROUP_OPERATIONS = "Operations"
GROUP_ACCOUNTING = "Accounting"
GROUP_AI = "AI Assistant"
GROUP_AUTOMATION = "Automation"
GROUP_ANALYTICS = "Analytics"
GROUP_GENERAL = "General"


@dataclass(frozen=True)
class Permission:
    """A single catalog entry.

    Attributes:
        key: Namespaced key, e.g. ``expenses.approve``.
        name: Short display name.
        description: Plain-English description shown in role editors.
        group: Display group used by ``PermissionCatalog.grouped``.
        requires: Keys that must also be granted for this one to be useful.
    """

    key: str
    name: str
    description: str = ""
    group: str = GROUP_GENERAL
    requires: frozenset[str] = field(default_factory=frozenset)

    @property
    def resource(self) -> str:
        return self.key.rsplit(".", 1)[0]

    @property
    def action(self) -> str:
        return self.key.rsplit(".", 1)[1]


class PermissionCatalog:
    """Registry of permissions; read-only once frozen."""

    def __init__(self, permissions: Iterable[Permission] = ()) -> None:
        self._permissions: dict[str, Permission] = {}
        self._frozen = False
        for permission in permissions:
            self.register(permission)

    def register(self, permission: Permission) -> None:
        """Add a permission.

        Raises:
            CatalogConflict: If the key is already registered, is malformed,
                or the catalog has been frozen.
        """
        if self._frozen:
            raise CatalogConflict(permission.key, "catalog is frozen")
        if not _KEY_RE.match(permission.key):
            raise CatalogConflict(permission.key, "malformed permission key")
        if permission.key in self._permissions:
            raise CatalogConflict(permission.key)
        self._permissions[permission.key] = permission

    def freeze(self) -> "PermissionCatalog":
        """Stop accepting registrations; every ``requires`` entry must resolve."""
        for permission in self._permissions.values():
            unknown = permission.requires - self._permissions.keys()
            if unknown:
                raise CatalogConflict(
                    permission.key,
                    f"requires unknown keys: {', '.join(sorted(unknown))}",
                )
        self._frozen = True
        logger.debug("Permission catalog frozen with %d keys", len(self._permissions))
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list_permissions(self) -> frozenset[Permission]:
        return frozenset(self._permissions.values())

    def keys(self) -> frozenset[str]:
        return frozenset(self._permissions)

    def get(self, key: str) -> Permission | None:
        return self._permissions.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._permissions

    def __len__(self) -> int:
        return len(self._permissions)

    def grouped(self) -> dict[str, list[Permission]]:
        """Return permissions keyed by group, each list sorted by key."""
        groups: dict[str, list[Permission]] = {}
        for key in sorted(self._permissions):
            permission = self._permissions[key]
            groups.setdefault(permission.group, []).append(permission)
        return groups

    def validate_keys(self, keys: Iterable[str]) -> frozenset[str]:
        """Return keys as a frozenset; raise InvalidArgument on any unknown key."""
        requested = frozenset(keys)
        unknown = requested - self._permissions.keys()
        if unknown:
            raise InvalidArgument(
                f"Unknown permission keys: {', '.join(sorted(unknown))}",
                field="permissions",
            )
        return requested

    def missing_dependencies(self, keys: Iterable[str]) -> dict[str, frozenset[str]]:
        """Map each key in ``keys`` to the required keys absent from ``keys``.

        Keys with all dependencies satisfied (or unknown keys) are omitted.
        """
        granted = frozenset(keys)
        missing: dict[str, frozenset[str]] = {}
        for key in sorted(granted):
            permission = self._permissions.get(key)
            if permission is None:
                continue
            absent = permission.requires - granted
            if absent:
                missing[key] = absent
        return missing


def _p(key: str, name: str, description: str, group: str, *requires: str) -> Permission:
    return Permission(key, name, description, group, frozenset(requires))


DEFAULT_PERMISSIONS: tuple[Permission, ...] = (
    # Core System
    _p("dashboard.view", "View Dashboard", "View main dashboard and analytics", GROUP_CORE),
    _p("users.view", "View Users", "View user accounts and profiles", GROUP_CORE),
    _p("users.create", "Create Users", "Add new users to the system", GROUP_CORE, "users.view"),
    _p("users.edit", "Edit Users", "Edit user accounts and permissions", GROUP_CORE, "users.view"),
    _p(
        "users.delete", "Delete Users", "Remove users from the system", GROUP_CORE,
        "users.view", "users.edit",
    ),
    _p(
        "company.settings.view", "View Company Settings",
        "View company settings and configuration", GROUP_CORE,
    ),
    _p(
        "company.settings.edit", "Edit Company Settings",
        "Modify company settings and preferences", GROUP_CORE, "company.settings.view",
    ),
    _p("notifications.view", "View Notifications", "View system notifications", GROUP_CORE),
    _p(
        "notifications.manage", "Manage Notifications",
        "Manage and configure notifications", GROUP_CORE, "notifications.view",
    ),
    # Operations
    _p("vendors.view", "View Vendors", "View vendor directory and information", GROUP_OPERATIONS),
    _p(
        "vendors.create", "Create Vendors", "Add new vendors to the system",
        GROUP_OPERATIONS, "vendors.view",
    ),
    _p(
        "vendors.edit", "Edit Vendors", "Modify vendor information and settings",
        GROUP_OPERATIONS, "vendors.view",
    ),
    _p(
        "vendors.delete", "Delete Vendors", "Remove vendors from the system",
        GROUP_OPERATIONS, "vendors.view", "vendors.edit",
    ),
    _p(
        "customers.view", "View Customers", "View customer directory and information",
        GROUP_OPERATIONS,
    ),
    _p(
        "customers.create", "Create Customers", "Add new customers to the system",
        GROUP_OPERATIONS, "customers.view",
    ),
    _p(
        "customers.edit", "Edit Customers", "Modify customer information and settings",
        GROUP_OPERATIONS, "customers.view",
    ),
    _p(
        "customers.delete", "Delete Customers", "Remove customers from the system",
        GROUP_OPERATIONS, "customers.view", "customers.edit",
    ),
    _p("expenses.view", "View Expenses", "View expense reports and receipts", GROUP_OPERATIONS),
    _p(
        "expenses.create", "Create Expenses", "Submit new expense reports",
        GROUP_OPERATIONS, "expenses.view",
    ),
    _p(
        "expenses.edit", "Edit Expenses", "Modify existing expense reports",
        GROUP_OPERATIONS, "expenses.view",
    ),
    _p(
        "expenses.review", "Review Expenses", "Review and process expense submissions",
        GROUP_OPERATIONS, "expenses.view",
    ),
    _p(
        "expenses.approve", "Approve Expenses", "Approve or reject expense reports",
        GROUP_OPERATIONS, "expenses.view",
    ),
    _p(
        "expenses.delete", "Delete Expenses", "Delete expense reports",
        GROUP_OPERATIONS, "expenses.view", "expenses.edit",
    ),
    # Accounting
    _p("gl_accounts.view", "View GL Accounts", "View general ledger accounts", GROUP_ACCOUNTING),
    _p(
        "gl_accounts.create", "Create GL Accounts", "Create new general ledger accounts",
        GROUP_ACCOUNTING, "gl_accounts.view",
    ),
    _p(
        "gl_accounts.edit", "Edit GL Accounts", "Modify general ledger accounts",
        GROUP_ACCOUNTING, "gl_accounts.view",
    ),
    _p(
        "gl_accounts.delete", "Delete GL Accounts", "Remove general ledger accounts",
        GROUP_ACCOUNTING, "gl_accounts.view", "gl_accounts.edit",
    ),
    _p(
        "expense_categories.view", "View Expense Categories",
        "View expense categories and classifications", GROUP_ACCOUNTING,
    ),
    _p(
        "expense_categories.create", "Create Expense Categories",
        "Create new expense categories", GROUP_ACCOUNTING, "expense_categories.view",
    ),
    _p(
        "expense_categories.edit", "Edit Expense Categories",
        "Modify expense categories", GROUP_ACCOUNTING, "expense_categories.view",
    ),
    _p(
        "expense_categories.delete", "Delete Expense Categories",
        "Remove expense categories", GROUP_ACCOUNTING,
        "expense_categories.view", "expense_categories.edit",
    ),
    # AI Assistant
    _p("ingrid.chat", "Chat with Ingrid", "Use the AI assistant chat", GROUP_AI),
    _p(
        "ingrid.suggestions.view", "View AI Suggestions",
        "View AI-generated suggestions and recommendations", GROUP_AI,
    ),
    _p(
        "ingrid.suggestions.approve", "Approve AI Suggestions",
        "Approve or reject AI suggestions", GROUP_AI, "ingrid.suggestions.view",
    ),
    _p(
        "ingrid.configure", "Configure Ingrid", "Configure AI assistant settings",
        GROUP_AI, "ingrid.suggestions.view",
    ),
    _p(
        "ingrid.analytics.view", "View AI Analytics", "View AI performance analytics", GROUP_AI,
    ),
    # Automation
    _p(
        "automation.view", "View Automation", "View automated workflows and processes",
        GROUP_AUTOMATION,
    ),
    _p(
        "automation.create", "Create Automation", "Create new automated workflows",
        GROUP_AUTOMATION, "automation.view",
    ),
    _p(
        "automation.edit", "Edit Automation", "Modify automated workflows",
        GROUP_AUTOMATION, "automation.view",
    ),
    # Analytics
    _p("analytics.view", "View Analytics", "View reports and analytics dashboards", GROUP_ANALYTICS),
    _p(
        "analytics.export", "Export Analytics", "Export reports and data",
        GROUP_ANALYTICS, "analytics.view",
    ),
    # General
    _p("api.manage", "Manage API Access", "Manage API keys and integrations", GROUP_GENERAL),
)


def build_default_catalog() -> PermissionCatalog:
    """Return a new frozen catalog holding the built-in permissions."""
    return PermissionCatalog(DEFAULT_PERMISSIONS).freeze()


DEFAULT_CATALOG: PermissionCatalog = build_default_catalog()
