"""Tests for PermissionResolver: fixed grants, custom roles, expiry and tenant isolation."""

from datetime import timedelta

import pytest

from expense_authz.application.services import EffectivePermissionSet, PermissionResolver
from expense_authz.domain.entities import Principal
from expense_authz.domain.enums import FixedRole
from expense_authz.domain.exceptions import InvalidArgument, StorageUnavailable
from expense_authz.domain.permissions import DEFAULT_CATALOG, grant_for_fixed_role
from factories import COMPANY_A, COMPANY_B, NOW, make_assignment, make_role

U1 = Principal("u1", COMPANY_A, FixedRole.USER)


def test_effective_permission_set_sentinels() -> None:
    everything = EffectivePermissionSet.all()
    nothing = EffectivePermissionSet.empty()
    assert "anything.at_all" in everything
    assert everything.expand() == DEFAULT_CATALOG.keys()
    assert "dashboard.view" not in nothing
    assert not nothing
    assert nothing.expand() == frozenset()


async def test_scenario_a_custom_role_grants_in_home_company_only(store, resolver) -> None:
    """u1 (user) holding CR1 with expenses.approve may approve in t1, never in t2."""
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr1")

    assert await resolver.has_permission(U1, COMPANY_A, "expenses.approve", NOW)
    assert not await resolver.has_permission(U1, COMPANY_B, "expenses.approve", NOW)


async def test_scenario_b_expired_assignment_grants_nothing(store, resolver) -> None:
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.assignments["ra1"] = make_assignment(
        "ra1", "u1", "cr1", expires_at=NOW - timedelta(seconds=1)
    )
    assert not await resolver.has_permission(U1, COMPANY_A, "expenses.approve", NOW)


@pytest.mark.parametrize("role", [FixedRole.USER, FixedRole.CONTROLLER, FixedRole.ADMIN])
async def test_scenario_c_fixed_grant_table_is_ground_truth(resolver, role: FixedRole) -> None:
    """Without assignments, has_permission answers exactly from the fixed grant table."""
    principal = Principal("u2", COMPANY_A, role)
    grant = grant_for_fixed_role(role)
    for key in sorted(DEFAULT_CATALOG.keys()):
        assert await resolver.has_permission(principal, COMPANY_A, key, NOW) is (key in grant)


async def test_admin_gl_accounts_view(resolver, admin_a) -> None:
    assert await resolver.has_permission(admin_a, COMPANY_A, "gl_accounts.view", NOW)


@pytest.mark.parametrize("company_id", [COMPANY_A, COMPANY_B, "company-zzz"])
@pytest.mark.parametrize("offset_days", [-3650, 0, 3650])
async def test_super_admin_resolves_to_all_everywhere(
    store, resolver, super_admin, company_id: str, offset_days: int
) -> None:
    result = await resolver.resolve(super_admin, company_id, NOW + timedelta(days=offset_days))
    assert result == EffectivePermissionSet.all()
    assert store.calls == 0


@pytest.mark.parametrize("role", [FixedRole.USER, FixedRole.CONTROLLER, FixedRole.ADMIN])
async def test_foreign_company_is_empty_without_store_access(store, resolver, role) -> None:
    store.roles["cr-b"] = make_role("cr-b", {"expenses.approve"}, COMPANY_B)
    store.assignments["ra-b"] = make_assignment("ra-b", "u9", "cr-b", COMPANY_B)
    principal = Principal("u9", COMPANY_A, role)

    result = await resolver.resolve(principal, COMPANY_B, NOW)

    assert result == EffectivePermissionSet.empty()
    assert store.calls == 0


async def test_union_of_fixed_grant_and_custom_roles(store, resolver) -> None:
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.roles["cr2"] = make_role("cr2", {"gl_accounts.view", "gl_accounts.create"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr1")
    store.assignments["ra2"] = make_assignment(
        "ra2", "u1", "cr2", expires_at=NOW + timedelta(days=1)
    )

    result = await resolver.resolve(U1, COMPANY_A, NOW)

    assert result.keys == grant_for_fixed_role(FixedRole.USER) | {
        "expenses.approve",
        "gl_accounts.view",
        "gl_accounts.create",
    }


async def test_inactive_or_revoked_sources_are_ignored(store, resolver) -> None:
    store.roles["cr-off"] = make_role("cr-off", {"gl_accounts.view"}, is_active=False)
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr-off")
    store.assignments["ra2"] = make_assignment("ra2", "u1", "cr1", is_active=False)

    result = await resolver.resolve(U1, COMPANY_A, NOW)

    assert result.keys == grant_for_fixed_role(FixedRole.USER)


async def test_role_from_other_company_is_ignored(store, resolver) -> None:
    """A corrupt assignment pointing at another tenant's role contributes nothing."""
    store.roles["cr-b"] = make_role("cr-b", {"expenses.approve"}, COMPANY_B)
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr-b", COMPANY_A)

    assert not await resolver.has_permission(U1, COMPANY_A, "expenses.approve", NOW)


async def test_resolve_is_idempotent(store, resolver) -> None:
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr1")
    snapshot = (dict(store.roles), dict(store.assignments))

    first = await resolver.resolve(U1, COMPANY_A, NOW)
    second = await resolver.resolve(U1, COMPANY_A, NOW)

    assert first == second
    assert (store.roles, store.assignments) == snapshot


async def test_expiry_monotonicity(store, resolver) -> None:
    expires = NOW + timedelta(hours=1)
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr1", expires_at=expires)

    assert "expenses.approve" in await resolver.resolve(U1, COMPANY_A, NOW)
    for later in (expires, expires + timedelta(seconds=1), expires + timedelta(days=400)):
        assert "expenses.approve" not in await resolver.resolve(U1, COMPANY_A, later)


async def test_expired_source_does_not_mask_other_valid_source(store, resolver) -> None:
    expires = NOW + timedelta(hours=1)
    store.roles["cr1"] = make_role("cr1", {"expenses.approve"})
    store.roles["cr2"] = make_role("cr2", {"expenses.approve", "expenses.view"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr1", expires_at=expires)
    store.assignments["ra2"] = make_assignment("ra2", "u1", "cr2")

    later = expires + timedelta(minutes=5)
    assert "expenses.approve" in await resolver.resolve(U1, COMPANY_A, later)


async def test_explain_lists_sources(store, resolver) -> None:
    store.roles["cr1"] = make_role("cr1", {"expenses.approve", "expenses.view"})
    store.assignments["ra1"] = make_assignment("ra1", "u1", "cr1")

    explained = await resolver.explain(U1, COMPANY_A, NOW)

    assert explained["expenses.approve"] == ["custom_role:cr1"]
    assert explained["expenses.view"] == ["custom_role:cr1", "role:user"]
    assert explained["dashboard.view"] == ["role:user"]


async def test_explain_super_admin_covers_catalog(resolver, super_admin) -> None:
    explained = await resolver.explain(super_admin, COMPANY_B, NOW)
    assert set(explained) == DEFAULT_CATALOG.keys()
    assert explained["api.manage"] == ["role:super-admin"]


@pytest.mark.parametrize("company_id", ["", "bad id", None, 7])
async def test_malformed_company_id_is_invalid_argument(resolver, company_id) -> None:
    with pytest.raises(InvalidArgument):
        await resolver.resolve(U1, company_id, NOW)


async def test_naive_now_is_invalid_argument(resolver) -> None:
    with pytest.raises(InvalidArgument):
        await resolver.resolve(U1, COMPANY_A, NOW.replace(tzinfo=None))


async def test_store_failure_surfaces_as_storage_unavailable(store, resolver) -> None:
    store.fail = True
    with pytest.raises(StorageUnavailable):
        await resolver.resolve(U1, COMPANY_A, NOW)


async def test_resolver_with_custom_catalog(role_repo, assignment_repo, super_admin) -> None:
    from expense_authz.domain.permissions import Permission, PermissionCatalog

    catalog = PermissionCatalog([Permission("reports.view", "View Reports")]).freeze()
    resolver = PermissionResolver(role_repo, assignment_repo, catalog)
    explained = await resolver.explain(super_admin, COMPANY_A, NOW)
    assert explained == {"reports.view": ["role:super-admin"]}
