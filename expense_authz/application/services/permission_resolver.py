"""Permission resolver: effective permission set of a principal in a company.

Read-only and stateless between calls; every decision is a function of the
principal, the target company, ``now`` and the stores.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from expense_authz.application.interfaces.repositories import (
    ICustomRoleRepository,
    IRoleAssignmentRepository,
)
from expense_authz.core.tenant_validation import validate_company_id
from expense_authz.domain.entities import Principal
from expense_authz.domain.exceptions import InvalidArgument
from expense_authz.domain.permissions.catalog import DEFAULT_CATALOG, PermissionCatalog
from expense_authz.domain.permissions.fixed_roles import (
    ALL_PERMISSIONS,
    grant_for_fixed_role,
)
from expense_authz.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectivePermissionSet:
    """Union of granted permission keys, or the ALL sentinel for super-admins."""

    keys: frozenset[str] = field(default_factory=frozenset)
    is_all: bool = False

    @classmethod
    def all(cls) -> EffectivePermissionSet:
        return cls(frozenset(), True)

    @classmethod
    def empty(cls) -> EffectivePermissionSet:
        return cls()

    def __contains__(self, key: object) -> bool:
        return self.is_all or key in self.keys

    def __bool__(self) -> bool:
        return self.is_all or bool(self.keys)

    def expand(self, catalog: PermissionCatalog = DEFAULT_CATALOG) -> frozenset[str]:
        """Return concrete keys; ALL expands to every catalog key."""
        return catalog.keys() if self.is_all else self.keys


class PermissionResolver:
    """Combines fixed-role grants with the principal's effective custom roles."""

    def __init__(
        self,
        role_repo: ICustomRoleRepository,
        assignment_repo: IRoleAssignmentRepository,
        catalog: PermissionCatalog = DEFAULT_CATALOG,
    ) -> None:
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo
        self.catalog = catalog

    async def resolve(
        self, principal: Principal, target_company_id: str, now: datetime
    ) -> EffectivePermissionSet:
        """Return the effective permission set of principal in target_company_id.

        Raises:
            InvalidArgument: Malformed company id or naive ``now``.
            StorageUnavailable: The stores could not be read.
        """
        sources = await self._collect(principal, target_company_id, now)
        if sources is None:
            return EffectivePermissionSet.all()
        return EffectivePermissionSet(frozenset(sources))

    async def has_permission(
        self,
        principal: Principal,
        company_id: str,
        permission_key: str,
        now: datetime,
    ) -> bool:
        return permission_key in await self.resolve(principal, company_id, now)

    async def explain(
        self, principal: Principal, company_id: str, now: datetime
    ) -> dict[str, list[str]]:
        """Map each effective key to the grants it comes from.

        Sources are ``role:<fixed role>`` and ``custom_role:<id>``. A
        super-admin gets every catalog key from ``role:super-admin``.
        """
        sources = await self._collect(principal, company_id, now)
        if sources is None:
            origin = f"role:{principal.fixed_role.value}"
            return {key: [origin] for key in sorted(self.catalog.keys())}
        return {key: sorted(sources[key]) for key in sorted(sources)}

    async def _collect(
        self, principal: Principal, company_id: str, now: datetime
    ) -> dict[str, set[str]] | None:
        """Return key -> sources, or None for the ALL sentinel."""
        validate_company_id(company_id)
        if now.tzinfo is None:
            raise InvalidArgument("now must be timezone-aware", field="now")
        now = ensure_utc(now)  # type: ignore[assignment]

        grant = grant_for_fixed_role(principal.fixed_role)
        if grant is ALL_PERMISSIONS:
            return None
        if company_id != principal.home_company_id:
            return {}

        sources: dict[str, set[str]] = {}
        _add(sources, grant, f"role:{principal.fixed_role.value}")

        assignments = await self._assignment_repo.list_effective(
            principal.id, company_id, now
        )
        effective = [a for a in assignments if a.is_effective_at(now)]
        if not effective:
            return sources

        roles = await self._role_repo.get_by_ids({a.custom_role_id for a in effective})
        for role in roles:
            if not role.is_active:
                continue
            if not role.belongs_to(company_id):
                logger.error(
                    "Assignment for user %s in company %s references custom role %s of company %s",
                    principal.id,
                    company_id,
                    role.id,
                    role.company_id,
                )
                continue
            _add(sources, role.permissions, f"custom_role:{role.id}")
        return sources


def _add(sources: dict[str, set[str]], keys: Iterable[str], origin: str) -> None:
    for key in keys:
        sources.setdefault(key, set()).add(origin)
