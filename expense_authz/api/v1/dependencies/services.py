"""Repository and service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from expense_authz.application.services import (
    AssignmentService,
    AuthorizationService,
    CustomRoleService,
    PermissionResolver,
)
from expense_authz.infrastructure.persistence.database import get_db, get_db_transactional
from expense_authz.infrastructure.persistence.repositories import (
    CustomRoleRepository,
    RoleAssignmentRepository,
)


async def get_permission_resolver(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionResolver:
    """Resolver over the read session. No cache: results depend on ``now``."""
    return PermissionResolver(CustomRoleRepository(db), RoleAssignmentRepository(db))


async def get_authorization_service(
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
) -> AuthorizationService:
    return AuthorizationService(resolver)


async def get_custom_role_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CustomRoleService:
    """Custom role service for read operations."""
    return CustomRoleService(CustomRoleRepository(db), RoleAssignmentRepository(db))


async def get_custom_role_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> CustomRoleService:
    """Custom role service for writes (transactional; cascade shares the transaction)."""
    return CustomRoleService(CustomRoleRepository(db), RoleAssignmentRepository(db))


async def get_assignment_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AssignmentService:
    """Assignment service for read operations."""
    return AssignmentService(CustomRoleRepository(db), RoleAssignmentRepository(db))


async def get_assignment_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AssignmentService:
    """Assignment service for writes (transactional)."""
    return AssignmentService(CustomRoleRepository(db), RoleAssignmentRepository(db))
