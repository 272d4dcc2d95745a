"""CustomRole repository: SQLAlchemy implementation of ICustomRoleRepository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_authz.domain.entities import CustomRole
from expense_authz.domain.exceptions import InvalidArgument, RoleNotFound
from expense_authz.infrastructure.persistence.models.custom_role import CustomRoleModel
from expense_authz.infrastructure.persistence.repositories.base import storage_errors
from expense_authz.shared.utils.datetime import ensure_utc


def _to_entity(model: CustomRoleModel) -> CustomRole:
    return CustomRole(
        id=model.id,
        company_id=model.company_id,
        name=model.name,
        permissions=frozenset(model.permissions or ()),
        description=model.description,
        is_active=model.is_active,
        created_by=model.created_by,
        created_at=ensure_utc(model.created_at),
        updated_at=ensure_utc(model.updated_at),
    )


class CustomRoleRepository:
    """Custom roles stored in table custom_role, one row per role."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_model(self, custom_role_id: str) -> CustomRoleModel | None:
        result = await self.db.execute(
            select(CustomRoleModel).where(CustomRoleModel.id == custom_role_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, custom_role_id: str) -> CustomRole | None:
        with storage_errors("get_custom_role"):
            model = await self._get_model(custom_role_id)
        return _to_entity(model) if model else None

    async def get_by_ids(self, custom_role_ids: Iterable[str]) -> list[CustomRole]:
        ids = set(custom_role_ids)
        if not ids:
            return []
        with storage_errors("get_custom_roles"):
            result = await self.db.execute(
                select(CustomRoleModel).where(CustomRoleModel.id.in_(ids))
            )
            models = result.scalars().all()
        return [_to_entity(m) for m in models]

    async def get_active_by_name(self, company_id: str, name: str) -> CustomRole | None:
        with storage_errors("get_custom_role_by_name"):
            result = await self.db.execute(
                select(CustomRoleModel).where(
                    CustomRoleModel.company_id == company_id,
                    CustomRoleModel.name == name,
                    CustomRoleModel.is_active.is_(True),
                )
            )
            model = result.scalar_one_or_none()
        return _to_entity(model) if model else None

    async def list_by_company(
        self, company_id: str, include_inactive: bool = False
    ) -> list[CustomRole]:
        stmt = select(CustomRoleModel).where(CustomRoleModel.company_id == company_id)
        if not include_inactive:
            stmt = stmt.where(CustomRoleModel.is_active.is_(True))
        with storage_errors("list_custom_roles"):
            result = await self.db.execute(
                stmt.order_by(CustomRoleModel.name, CustomRoleModel.id)
            )
            models = result.scalars().all()
        return [_to_entity(m) for m in models]

    async def create(self, role: CustomRole) -> CustomRole:
        model = CustomRoleModel(
            id=role.id,
            company_id=role.company_id,
            name=role.name,
            description=role.description,
            permissions=sorted(role.permissions),
            is_active=role.is_active,
            created_by=role.created_by,
        )
        if role.created_at is not None:
            model.created_at = role.created_at
            model.updated_at = role.updated_at or role.created_at
        with storage_errors("create_custom_role"):
            try:
                self.db.add(model)
                await self.db.flush()
            except IntegrityError:
                raise InvalidArgument(
                    f"An active custom role named '{role.name}' already exists",
                    field="name",
                ) from None
            await self.db.refresh(model)
        return _to_entity(model)

    async def update(self, role: CustomRole) -> CustomRole:
        with storage_errors("update_custom_role"):
            model = await self._get_model(role.id)
            if model is None:
                raise RoleNotFound(role.id)
            model.name = role.name
            model.description = role.description
            model.permissions = sorted(role.permissions)
            model.is_active = role.is_active
            if role.updated_at is not None:
                model.updated_at = role.updated_at
            try:
                await self.db.flush()
            except IntegrityError:
                raise InvalidArgument(
                    f"An active custom role named '{role.name}' already exists",
                    field="name",
                ) from None
            await self.db.refresh(model)
        return _to_entity(model)
