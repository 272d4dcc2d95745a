"""Custom role application service: create, edit, deactivate and list tenant roles."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from datetime import datetime

from expense_authz.application.dtos.custom_role import RoleDeactivationResult
from expense_authz.application.interfaces.repositories import (
    ICustomRoleRepository,
    IRoleAssignmentRepository,
)
from expense_authz.application.services.authorization_service import AuthorizationService
from expense_authz.core.tenant_validation import validate_company_id
from expense_authz.domain.entities import CustomRole, Principal
from expense_authz.domain.enums import ROLE_ADMINISTRATORS, DeactivationReason
from expense_authz.domain.exceptions import InvalidArgument, RoleNotFound
from expense_authz.domain.permissions.catalog import DEFAULT_CATALOG, PermissionCatalog
from expense_authz.domain.permissions.templates import get_template
from expense_authz.shared.utils.datetime import resolve_now
from expense_authz.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

ROLE_NAME_MAX_LENGTH = 100


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidArgument("Custom role name is required", field="name")
    if len(name) > ROLE_NAME_MAX_LENGTH:
        raise InvalidArgument(
            f"Custom role name must be at most {ROLE_NAME_MAX_LENGTH} characters",
            field="name",
        )
    return name


class CustomRoleService:
    """Tenant-scoped custom roles. All operations require admin or super-admin."""

    def __init__(
        self,
        role_repo: ICustomRoleRepository,
        assignment_repo: IRoleAssignmentRepository,
        catalog: PermissionCatalog = DEFAULT_CATALOG,
    ) -> None:
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo
        self.catalog = catalog

    def _validate_permissions(self, keys: Iterable[str]) -> frozenset[str]:
        """Reject unknown keys and sets with unmet dependencies."""
        permissions = self.catalog.validate_keys(keys)
        missing = self.catalog.missing_dependencies(permissions)
        if missing:
            parts = [f"{k} requires {', '.join(sorted(v))}" for k, v in missing.items()]
            raise InvalidArgument(
                f"Missing permission dependencies: {'; '.join(parts)}",
                field="permissions",
            )
        return permissions

    async def _ensure_name_free(
        self, company_id: str, name: str, exclude_id: str | None = None
    ) -> None:
        existing = await self._role_repo.get_active_by_name(company_id, name)
        if existing is not None and existing.id != exclude_id:
            raise InvalidArgument(
                f"An active custom role named '{name}' already exists", field="name"
            )

    async def _get_visible(self, actor: Principal, custom_role_id: str) -> CustomRole:
        role = await self._role_repo.get_by_id(custom_role_id)
        if role is None or (
            not actor.is_super_admin and not role.belongs_to(actor.home_company_id)
        ):
            raise RoleNotFound(custom_role_id)
        return role

    async def create(
        self,
        actor: Principal,
        company_id: str,
        name: str,
        permissions: Iterable[str],
        description: str | None = None,
        now: datetime | None = None,
    ) -> CustomRole:
        """Create an active custom role in company_id.

        Raises:
            Forbidden: actor is not admin/super-admin or targets a foreign company.
            InvalidArgument: bad name, duplicate active name, unknown keys or
                unmet permission dependencies.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        validate_company_id(company_id)
        AuthorizationService.require_company_scope(actor, company_id)
        name = _clean_name(name)
        keys = self._validate_permissions(permissions)
        await self._ensure_name_free(company_id, name)
        role = CustomRole(
            id=generate_cuid(),
            company_id=company_id,
            name=name,
            permissions=keys,
            description=description,
            is_active=True,
            created_by=actor.id,
            created_at=now,
            updated_at=now,
        )
        created = await self._role_repo.create(role)
        logger.info(
            "Created custom role %s (%s) in company %s with %d permissions",
            created.id,
            created.name,
            company_id,
            len(keys),
        )
        return created

    async def create_from_template(
        self,
        actor: Principal,
        company_id: str,
        template_name: str,
        name: str | None = None,
        now: datetime | None = None,
    ) -> CustomRole:
        """Create a custom role from a built-in template; name defaults to its display name."""
        template = get_template(template_name)
        if template is None:
            raise InvalidArgument(
                f"Unknown permission template: {template_name}", field="template_name"
            )
        return await self.create(
            actor,
            company_id,
            name or template.display_name,
            template.permissions,
            description=template.description,
            now=now,
        )

    async def update(
        self,
        actor: Principal,
        custom_role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        permissions: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> CustomRole:
        """Rename, re-describe or replace the permission set of an active role.

        Permission changes take effect on the next resolution; there is no cache.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        role = await self._get_visible(actor, custom_role_id)
        if not role.is_active:
            raise InvalidArgument(
                "Cannot edit an inactive custom role", field="custom_role_id"
            )
        changes: dict = {"updated_at": now}
        if name is not None:
            cleaned = _clean_name(name)
            if cleaned != role.name:
                await self._ensure_name_free(role.company_id, cleaned, exclude_id=role.id)
            changes["name"] = cleaned
        if description is not None:
            changes["description"] = description
        if permissions is not None:
            changes["permissions"] = self._validate_permissions(permissions)
        updated = await self._role_repo.update(dataclasses.replace(role, **changes))
        logger.info("Updated custom role %s by %s", custom_role_id, actor.id)
        return updated

    async def deactivate(
        self, actor: Principal, custom_role_id: str, now: datetime | None = None
    ) -> RoleDeactivationResult:
        """Soft-disable a role and deactivate every active assignment of it.

        Idempotent: an inactive role is returned with a cascade count of 0.
        """
        now = resolve_now(now)
        AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        role = await self._get_visible(actor, custom_role_id)
        if not role.is_active:
            return RoleDeactivationResult(role, 0)
        cascaded = await self._assignment_repo.deactivate_by_role(
            custom_role_id, now, actor.id, DeactivationReason.ROLE_DEACTIVATED
        )
        updated = await self._role_repo.update(
            dataclasses.replace(role, is_active=False, updated_at=now)
        )
        logger.info(
            "Deactivated custom role %s by %s (%d assignments closed)",
            custom_role_id,
            actor.id,
            cascaded,
        )
        return RoleDeactivationResult(updated, cascaded)

    async def list(
        self, actor: Principal, company_id: str, include_inactive: bool = False
    ) -> list[CustomRole]:
        AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        validate_company_id(company_id)
        AuthorizationService.require_company_scope(actor, company_id)
        return await self._role_repo.list_by_company(company_id, include_inactive)

    async def get(self, actor: Principal, custom_role_id: str) -> CustomRole:
        AuthorizationService.require_fixed_role(actor, ROLE_ADMINISTRATORS)
        return await self._get_visible(actor, custom_role_id)
