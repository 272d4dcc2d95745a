"""Authorization service: the single guard used by every protected operation.

Turns a principal plus an optional requested company into a tenant context,
then asks the PermissionResolver for a decision. Denials raise Forbidden and
carry no detail about which permissions exist.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from expense_authz.application.services.permission_resolver import (
    EffectivePermissionSet,
    PermissionResolver,
)
from expense_authz.core.tenant_validation import validate_company_id
from expense_authz.domain.entities import Principal
from expense_authz.domain.enums import FixedRole
from expense_authz.domain.exceptions import Forbidden
from expense_authz.shared.utils.datetime import resolve_now

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Tenant resolution plus permission and fixed-role checks."""

    def __init__(self, permission_resolver: PermissionResolver) -> None:
        self.permission_resolver = permission_resolver

    def resolve_tenant_context(
        self,
        principal: Principal,
        requested_company_id: str | None = None,
        *,
        strict: bool = False,
    ) -> str:
        """Return the company the request acts on.

        Absent: the principal's home company. Super-admin: the requested
        company. Anyone else naming a foreign company falls back to home when
        ``strict`` is False and is refused with Forbidden when it is True.

        Raises:
            InvalidArgument: requested_company_id is malformed.
            Forbidden: strict and a non-super-admin asked for a foreign company.
        """
        if requested_company_id is None or requested_company_id == "":
            return principal.home_company_id
        validate_company_id(requested_company_id)
        if principal.is_super_admin or requested_company_id == principal.home_company_id:
            return requested_company_id
        if strict:
            logger.info(
                "User %s refused tenant override to %s",
                principal.id,
                requested_company_id,
            )
            raise Forbidden()
        logger.debug(
            "Ignoring tenant override %s for user %s; using home company",
            requested_company_id,
            principal.id,
        )
        return principal.home_company_id

    async def get_permissions(
        self, principal: Principal, company_id: str, now: datetime | None = None
    ) -> EffectivePermissionSet:
        return await self.permission_resolver.resolve(
            principal, company_id, resolve_now(now)
        )

    async def check_permission(
        self,
        principal: Principal,
        company_id: str,
        permission_key: str,
        now: datetime | None = None,
    ) -> bool:
        """Return True if principal holds permission_key in company_id."""
        return await self.permission_resolver.has_permission(
            principal, company_id, permission_key, resolve_now(now)
        )

    async def require_permission(
        self,
        principal: Principal,
        company_id: str,
        permission_key: str,
        now: datetime | None = None,
    ) -> None:
        """Raise Forbidden if principal lacks permission_key in company_id."""
        if not await self.check_permission(principal, company_id, permission_key, now):
            logger.info(
                "Denied %s to user %s in company %s",
                permission_key,
                principal.id,
                company_id,
            )
            raise Forbidden()

    @staticmethod
    def require_fixed_role(
        principal: Principal, allowed_roles: Iterable[FixedRole | str]
    ) -> None:
        """Raise Forbidden unless principal's fixed role is one of allowed_roles.

        Compares the role directly; custom roles never satisfy this check.
        """
        allowed = {FixedRole(r) for r in allowed_roles}
        if principal.fixed_role not in allowed:
            logger.info(
                "Denied fixed-role check for user %s (role %s)",
                principal.id,
                principal.fixed_role.value,
            )
            raise Forbidden()

    @staticmethod
    def require_company_scope(principal: Principal, company_id: str) -> None:
        """Raise Forbidden when a non-super-admin acts outside their home company."""
        if not principal.is_super_admin and company_id != principal.home_company_id:
            logger.info(
                "Denied cross-company action by user %s on company %s",
                principal.id,
                company_id,
            )
            raise Forbidden()
