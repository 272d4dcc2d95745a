"""Custom role entity: a tenant-defined, named subset of the permission catalog."""

from dataclasses import dataclass, field
from datetime import datetime

from expense_authz.domain.exceptions import InvalidArgument


@dataclass(frozen=True)
class CustomRole:
    """Tenant-scoped custom role.

    Two roles in different companies may share a name but are distinct
    entities. Roles are soft-disabled (is_active=False), never hard-deleted.
    """

    id: str
    company_id: str
    name: str
    permissions: frozenset[str] = field(default_factory=frozenset)
    description: str | None = None
    is_active: bool = True
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidArgument("Custom role name is required", field="name")
        if not isinstance(self.permissions, frozenset):
            object.__setattr__(self, "permissions", frozenset(self.permissions))

    def belongs_to(self, company_id: str) -> bool:
        return self.company_id == company_id
