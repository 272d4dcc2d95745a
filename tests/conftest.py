"""Pytest configuration and fixtures for expense-authz.

Unit tests run the services against the in-memory stores in factories.py;
repository tests use an in-memory SQLite database (aiosqlite + StaticPool);
API tests drive the app through httpx with the service dependencies
overridden to the in-memory stores.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from expense_authz.api.v1.dependencies import (
    get_assignment_service,
    get_assignment_service_for_write,
    get_custom_role_service,
    get_custom_role_service_for_write,
    get_permission_resolver,
)
from expense_authz.application.services import (
    AssignmentService,
    AuthorizationService,
    CustomRoleService,
    PermissionResolver,
)
from expense_authz.core.config import get_settings
from expense_authz.domain.entities import Principal
from expense_authz.domain.enums import FixedRole
from expense_authz.infrastructure.persistence import models  # noqa: F401
from expense_authz.infrastructure.persistence.database import Base
from expense_authz.main import create_app
from factories import (
    COMPANY_A,
    COMPANY_B,
    InMemoryAuthzStore,
    InMemoryCustomRoleRepository,
    InMemoryRoleAssignmentRepository,
)


@pytest.fixture
def store() -> InMemoryAuthzStore:
    return InMemoryAuthzStore()


@pytest.fixture
def role_repo(store: InMemoryAuthzStore) -> InMemoryCustomRoleRepository:
    return InMemoryCustomRoleRepository(store)


@pytest.fixture
def assignment_repo(store: InMemoryAuthzStore) -> InMemoryRoleAssignmentRepository:
    return InMemoryRoleAssignmentRepository(store)


@pytest.fixture
def resolver(role_repo, assignment_repo) -> PermissionResolver:
    return PermissionResolver(role_repo, assignment_repo)


@pytest.fixture
def auth_service(resolver: PermissionResolver) -> AuthorizationService:
    return AuthorizationService(resolver)


@pytest.fixture
def assignment_service(role_repo, assignment_repo) -> AssignmentService:
    return AssignmentService(role_repo, assignment_repo)


@pytest.fixture
def custom_role_service(role_repo, assignment_repo) -> CustomRoleService:
    return CustomRoleService(role_repo, assignment_repo)


@pytest.fixture
def user_a() -> Principal:
    return Principal("user-a", COMPANY_A, FixedRole.USER)


@pytest.fixture
def controller_a() -> Principal:
    return Principal("controller-a", COMPANY_A, FixedRole.CONTROLLER)


@pytest.fixture
def admin_a() -> Principal:
    return Principal("admin-a", COMPANY_A, FixedRole.ADMIN)


@pytest.fixture
def admin_b() -> Principal:
    return Principal("admin-b", COMPANY_B, FixedRole.ADMIN)


@pytest.fixture
def super_admin() -> Principal:
    return Principal("root", COMPANY_A, FixedRole.SUPER_ADMIN)


@pytest.fixture
async def db_session() -> AsyncSession:
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with session_factory() as session:
        yield session
    await engine.dispose()


async def _header_principal_loader(request: Request) -> Principal | None:
    """Test loader: principal from X-Test-User / X-Test-Company / X-Test-Role."""
    user_id = request.headers.get("X-Test-User")
    if not user_id:
        return None
    return Principal(
        id=user_id,
        home_company_id=request.headers.get("X-Test-Company", COMPANY_A),
        fixed_role=FixedRole(request.headers.get("X-Test-Role", "user")),
    )


@pytest.fixture
def app(role_repo, assignment_repo):
    """App wired to the in-memory stores through dependency overrides."""
    get_settings.cache_clear()
    application = create_app(principal_loader=_header_principal_loader)
    application.dependency_overrides[get_permission_resolver] = lambda: PermissionResolver(
        role_repo, assignment_repo
    )
    for dep in (get_custom_role_service, get_custom_role_service_for_write):
        application.dependency_overrides[dep] = lambda: CustomRoleService(
            role_repo, assignment_repo
        )
    for dep in (get_assignment_service, get_assignment_service_for_write):
        application.dependency_overrides[dep] = lambda: AssignmentService(
            role_repo, assignment_repo
        )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
