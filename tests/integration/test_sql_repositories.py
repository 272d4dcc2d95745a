"""SQLAlchemy repositories against an in-memory SQLite database."""

from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from expense_authz.application.services import (
    AssignmentService,
    CustomRoleService,
    PermissionResolver,
)
from expense_authz.domain.entities import CustomRole, Principal, RoleAssignment
from expense_authz.domain.enums import AssignmentStatus, DeactivationReason, FixedRole
from expense_authz.domain.exceptions import (
    AssignmentNotFound,
    DuplicateAssignment,
    InvalidArgument,
    RoleNotFound,
    StorageUnavailable,
)
from expense_authz.infrastructure.persistence.repositories import (
    CustomRoleRepository,
    RoleAssignmentRepository,
)
from expense_authz.infrastructure.persistence.repositories.base import storage_errors
from factories import COMPANY_A, COMPANY_B, NOW, make_role


@pytest.fixture
def role_repo_sql(db_session) -> CustomRoleRepository:
    return CustomRoleRepository(db_session)


@pytest.fixture
def assignment_repo_sql(db_session) -> RoleAssignmentRepository:
    return RoleAssignmentRepository(db_session)


def _assignment(assignment_id: str, user_id: str, role_id: str, **kwargs) -> RoleAssignment:
    return RoleAssignment(
        id=assignment_id,
        user_id=user_id,
        custom_role_id=role_id,
        company_id=kwargs.pop("company_id", COMPANY_A),
        assigned_by="admin-a",
        assigned_at=kwargs.pop("assigned_at", NOW - timedelta(days=1)),
        **kwargs,
    )


class TestCustomRoleRepository:
    async def test_create_and_load(self, role_repo_sql) -> None:
        created = await role_repo_sql.create(
            make_role("cr1", {"expenses.view", "expenses.approve"}, name="Approvers")
        )
        loaded = await role_repo_sql.get_by_id("cr1")

        assert loaded == created
        assert loaded.permissions == {"expenses.view", "expenses.approve"}
        assert loaded.created_at.tzinfo is not None
        assert await role_repo_sql.get_by_id("missing") is None

    async def test_get_by_ids_and_name(self, role_repo_sql) -> None:
        await role_repo_sql.create(make_role("cr1", [], name="One"))
        await role_repo_sql.create(make_role("cr2", [], name="Two"))

        found = await role_repo_sql.get_by_ids(["cr1", "cr2", "nope"])

        assert {r.id for r in found} == {"cr1", "cr2"}
        assert await role_repo_sql.get_by_ids([]) == []
        assert (await role_repo_sql.get_active_by_name(COMPANY_A, "Two")).id == "cr2"
        assert await role_repo_sql.get_active_by_name(COMPANY_B, "Two") is None

    async def test_list_by_company(self, role_repo_sql) -> None:
        await role_repo_sql.create(make_role("b", [], name="Beta"))
        await role_repo_sql.create(make_role("a", [], name="Alpha"))
        await role_repo_sql.create(make_role("g", [], name="Gamma", is_active=False))
        await role_repo_sql.create(make_role("x", [], COMPANY_B, name="Other"))

        active = await role_repo_sql.list_by_company(COMPANY_A)
        everything = await role_repo_sql.list_by_company(COMPANY_A, include_inactive=True)

        assert [r.name for r in active] == ["Alpha", "Beta"]
        assert [r.name for r in everything] == ["Alpha", "Beta", "Gamma"]

    async def test_active_name_unique_per_company(self, db_session, role_repo_sql) -> None:
        await role_repo_sql.create(make_role("cr1", [], name="Approvers"))
        await role_repo_sql.create(make_role("cr-b", [], COMPANY_B, name="Approvers"))
        await role_repo_sql.create(make_role("cr-old", [], name="Approvers", is_active=False))
        await db_session.commit()

        with pytest.raises(InvalidArgument):
            await role_repo_sql.create(make_role("cr2", [], name="Approvers"))
        await db_session.rollback()

    async def test_update(self, role_repo_sql) -> None:
        await role_repo_sql.create(make_role("cr1", ["expenses.view"], name="Old"))
        updated = await role_repo_sql.update(
            CustomRole(
                id="cr1",
                company_id=COMPANY_A,
                name="New",
                permissions=frozenset({"expenses.view", "expenses.create"}),
                updated_at=NOW + timedelta(hours=1),
            )
        )
        assert updated.name == "New"
        assert updated.permissions == {"expenses.view", "expenses.create"}
        assert updated.updated_at == NOW + timedelta(hours=1)

        with pytest.raises(RoleNotFound):
            await role_repo_sql.update(make_role("missing", []))


class TestRoleAssignmentRepository:
    @pytest.fixture(autouse=True)
    async def _roles(self, db_session, role_repo_sql) -> None:
        await role_repo_sql.create(make_role("cr1", ["expenses.view"]))
        await role_repo_sql.create(make_role("cr2", ["vendors.view"]))
        await db_session.commit()

    async def test_create_and_get(self, assignment_repo_sql) -> None:
        created = await assignment_repo_sql.create_active(
            _assignment("ra1", "u1", "cr1", expires_at=NOW + timedelta(days=1)), NOW
        )
        loaded = await assignment_repo_sql.get_by_id("ra1")

        assert loaded == created
        assert loaded.expires_at == NOW + timedelta(days=1)
        assert loaded.status(NOW) == AssignmentStatus.ACTIVE
        assert await assignment_repo_sql.get_by_id("missing") is None

    async def test_duplicate_active_triple(self, db_session, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(_assignment("ra1", "u1", "cr1"), NOW)
        await db_session.commit()

        with pytest.raises(DuplicateAssignment):
            await assignment_repo_sql.create_active(_assignment("ra2", "u1", "cr1"), NOW)
        await db_session.rollback()

        assert await assignment_repo_sql.get_by_id("ra2") is None

    async def test_expired_row_is_closed_out_on_regrant(self, db_session, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(
            _assignment(
                "old",
                "u1",
                "cr1",
                assigned_at=NOW - timedelta(days=10),
                expires_at=NOW - timedelta(days=1),
            ),
            NOW - timedelta(days=10),
        )
        await db_session.commit()

        await assignment_repo_sql.create_active(_assignment("new", "u1", "cr1"), NOW)
        await db_session.commit()

        old = await assignment_repo_sql.get_by_id("old")
        assert not old.is_active
        assert old.deactivation_reason == DeactivationReason.EXPIRED
        assert old.status(NOW) == AssignmentStatus.EXPIRED
        assert (await assignment_repo_sql.get_by_id("new")).is_active

    async def test_inactive_rows_do_not_block_regrant(self, db_session, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(_assignment("ra1", "u1", "cr1"), NOW)
        await assignment_repo_sql.deactivate("ra1", NOW, "admin-a", DeactivationReason.REVOKED)
        await assignment_repo_sql.create_active(_assignment("ra2", "u1", "cr1"), NOW)
        await db_session.commit()

        rows = await assignment_repo_sql.list_for_user("u1", COMPANY_A, include_inactive=True)
        assert {r.id for r in rows} == {"ra1", "ra2"}

    async def test_list_effective_filters_expiry_and_company(self, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(_assignment("live", "u1", "cr1"), NOW)
        await assignment_repo_sql.create_active(
            _assignment("soon", "u1", "cr2", expires_at=NOW + timedelta(minutes=1)), NOW
        )
        await assignment_repo_sql.create_active(
            _assignment("other", "u1", "cr1", company_id=COMPANY_B), NOW
        )

        now_ids = {a.id for a in await assignment_repo_sql.list_effective("u1", COMPANY_A, NOW)}
        later_ids = {
            a.id
            for a in await assignment_repo_sql.list_effective(
                "u1", COMPANY_A, NOW + timedelta(minutes=1)
            )
        }

        assert now_ids == {"live", "soon"}
        assert later_ids == {"live"}

    async def test_list_for_user_orders_newest_first(self, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(
            _assignment("older", "u1", "cr1", assigned_at=NOW - timedelta(days=3)), NOW
        )
        await assignment_repo_sql.create_active(
            _assignment("newer", "u1", "cr2", assigned_at=NOW - timedelta(hours=1)), NOW
        )
        rows = await assignment_repo_sql.list_for_user("u1", COMPANY_A)
        assert [r.id for r in rows] == ["newer", "older"]

    async def test_deactivate_and_update_expiry(self, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(_assignment("ra1", "u1", "cr1"), NOW)

        renewed = await assignment_repo_sql.update_expiry("ra1", NOW + timedelta(days=5))
        assert renewed.expires_at == NOW + timedelta(days=5)

        revoked = await assignment_repo_sql.deactivate(
            "ra1", NOW, "admin-a", DeactivationReason.REVOKED
        )
        assert not revoked.is_active
        assert revoked.deactivated_at == NOW
        assert revoked.deactivated_by == "admin-a"
        assert revoked.status(NOW) == AssignmentStatus.REVOKED

        with pytest.raises(AssignmentNotFound):
            await assignment_repo_sql.deactivate(
                "missing", NOW, "admin-a", DeactivationReason.REVOKED
            )

    async def test_deactivate_by_role(self, assignment_repo_sql) -> None:
        await assignment_repo_sql.create_active(_assignment("ra1", "u1", "cr1"), NOW)
        await assignment_repo_sql.create_active(_assignment("ra2", "u2", "cr1"), NOW)
        await assignment_repo_sql.create_active(_assignment("ra3", "u1", "cr2"), NOW)

        count = await assignment_repo_sql.deactivate_by_role(
            "cr1", NOW, "admin-a", DeactivationReason.ROLE_DEACTIVATED
        )

        assert count == 2
        assert not (await assignment_repo_sql.get_by_id("ra1")).is_active
        assert (await assignment_repo_sql.get_by_id("ra3")).is_active

    async def test_deactivate_by_role_closes_lapsed_rows_as_expired(self, assignment_repo_sql) -> None:
        lapsed = NOW - timedelta(minutes=5)
        await assignment_repo_sql.create_active(
            _assignment("old", "u1", "cr1", expires_at=lapsed), lapsed - timedelta(days=1)
        )
        await assignment_repo_sql.create_active(_assignment("live", "u2", "cr1"), NOW)

        count = await assignment_repo_sql.deactivate_by_role(
            "cr1", NOW, "admin-a", DeactivationReason.ROLE_DEACTIVATED
        )

        assert count == 2
        old = await assignment_repo_sql.get_by_id("old")
        live = await assignment_repo_sql.get_by_id("live")
        assert old.deactivation_reason == DeactivationReason.EXPIRED
        assert old.status(NOW) == AssignmentStatus.EXPIRED
        assert live.deactivation_reason == DeactivationReason.ROLE_DEACTIVATED
        assert live.status(NOW) == AssignmentStatus.REVOKED

    async def test_deactivate_expired_is_company_scoped(self, assignment_repo_sql) -> None:
        lapsed = NOW - timedelta(seconds=1)
        await assignment_repo_sql.create_active(
            _assignment("a", "u1", "cr1", expires_at=lapsed), lapsed - timedelta(days=1)
        )
        await assignment_repo_sql.create_active(
            _assignment("b", "u1", "cr1", company_id=COMPANY_B, expires_at=lapsed),
            lapsed - timedelta(days=1),
        )
        await assignment_repo_sql.create_active(_assignment("c", "u2", "cr1"), NOW)

        assert await assignment_repo_sql.deactivate_expired(COMPANY_A, NOW, "sweeper") == 1
        swept = await assignment_repo_sql.get_by_id("a")
        assert swept.deactivation_reason == DeactivationReason.EXPIRED
        assert (await assignment_repo_sql.get_by_id("b")).is_active
        assert (await assignment_repo_sql.get_by_id("c")).is_active


async def test_services_end_to_end_on_sql(db_session, role_repo_sql, assignment_repo_sql) -> None:
    """Create a role, grant it, resolve, then deactivate the role."""
    admin = Principal("admin-a", COMPANY_A, FixedRole.ADMIN)
    user = Principal("u1", COMPANY_A, FixedRole.USER)
    roles = CustomRoleService(role_repo_sql, assignment_repo_sql)
    assignments = AssignmentService(role_repo_sql, assignment_repo_sql)
    resolver = PermissionResolver(role_repo_sql, assignment_repo_sql)

    role = await roles.create(
        admin, COMPANY_A, "GL", ["gl_accounts.view", "gl_accounts.create"], now=NOW
    )
    await assignments.grant(admin, user.id, role.id, COMPANY_A, now=NOW)
    await db_session.commit()

    assert await resolver.has_permission(user, COMPANY_A, "gl_accounts.create", NOW)
    assert not await resolver.has_permission(user, COMPANY_B, "gl_accounts.create", NOW)

    result = await roles.deactivate(admin, role.id, now=NOW)
    await db_session.commit()

    assert result.deactivated_assignments == 1
    assert not await resolver.has_permission(user, COMPANY_A, "gl_accounts.create", NOW)


def test_storage_errors_maps_driver_failures() -> None:
    with pytest.raises(StorageUnavailable) as exc_info:
        with storage_errors("list_effective_assignments"):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))
    assert exc_info.value.details == {"operation": "list_effective_assignments"}


def test_storage_errors_passes_integrity_errors_through() -> None:
    with pytest.raises(IntegrityError):
        with storage_errors("create_assignment"):
            raise IntegrityError("INSERT", {}, Exception("unique"))
