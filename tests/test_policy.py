import pytest

from roster.domain.catalog import CommunityRank, PermissionGroup
from roster.domain.policy import PermissionConfig, RosterPolicy

pytestmark = pytest.mark.anyio


def test_default_policy_matches_catalogs() -> None:
    policy = RosterPolicy()

    assert policy.rank_index(CommunityRank.STAFF) == 3
    assert policy.group_for_rank("Senior Staff") is PermissionGroup.STAFF
    assert policy.requirement_for("Unknown") == 0.0
    assert set(policy.permissions) == set(PermissionGroup)


def test_policy_rejects_default_status_outside_catalog() -> None:
    with pytest.raises(ValueError):
        RosterPolicy(statuses=["Active"], default_status="LOA")


def test_policy_survives_json_round_trip() -> None:
    policy = RosterPolicy()
    policy.auth.invite_code = "abc"

    restored = RosterPolicy.model_validate(policy.model_dump(mode="json"))

    assert restored == policy


@pytest.fixture
async def director(seed_member, seed_account):
    await seed_member("4521", CommunityRank.HEAD_ADMIN)
    return await seed_account("director@roster.local", link="4521")


async def test_policy_changes_are_read_on_next_operation(service, director, seed_account) -> None:
    policy = RosterPolicy()
    policy.auth.community_rank_to_group[CommunityRank.MEMBER] = PermissionGroup.STAFF

    assert (await service.update_policy(director.id, policy)).ok

    fetched = await service.get_policy()
    assert fetched.data.auth.community_rank_to_group[CommunityRank.MEMBER] is PermissionGroup.STAFF


async def test_update_policy_requires_manage_settings(service, seed_account) -> None:
    admin = await seed_account("admin@roster.local", override=PermissionGroup.ADMINISTRATION)

    result = await service.update_policy(admin.id, RosterPolicy(departments=["LSPD"]))

    assert result.error_code == "CAPABILITY_DENIED"
    assert (await service.get_policy()).data == RosterPolicy()


async def test_permission_matrix_is_head_administration_only(
    service, director, seed_account
) -> None:
    # Administration gains settings rights but is still not Head Administration.
    policy = RosterPolicy()
    policy.permissions[PermissionGroup.ADMINISTRATION] = PermissionConfig(
        can_manage_settings=True, can_manage_permissions=True, can_manage_users=True
    )
    assert (await service.update_policy(director.id, policy)).ok
    admin = await seed_account("admin@roster.local", override=PermissionGroup.ADMINISTRATION)

    changed = policy.model_copy(deep=True)
    changed.permissions[PermissionGroup.STAFF] = PermissionConfig()
    denied = await service.update_policy(admin.id, changed)

    unchanged_matrix = policy.model_copy(deep=True)
    unchanged_matrix.departments.append("Air Support")
    allowed = await service.update_policy(admin.id, unchanged_matrix)

    assert denied.error_code == "CAPABILITY_DENIED"
    assert allowed.ok
    assert "Air Support" in (await service.get_policy()).data.departments


async def test_matrix_change_needs_only_permission_rights(service, director) -> None:
    policy = RosterPolicy()
    policy.permissions[PermissionGroup.HEAD_ADMINISTRATION] = PermissionConfig(
        can_manage_permissions=True
    )
    assert (await service.update_policy(director.id, policy)).ok

    matrix_only = policy.model_copy(deep=True)
    matrix_only.permissions[PermissionGroup.STAFF] = PermissionConfig()
    allowed = await service.update_policy(director.id, matrix_only)

    settings_too = matrix_only.model_copy(deep=True)
    settings_too.departments.append("Air Support")
    denied = await service.update_policy(director.id, settings_too)

    assert allowed.ok
    assert denied.error_code == "CAPABILITY_DENIED"
    assert denied.error["details"]["capability"] == "can_manage_settings"
    stored = (await service.get_policy()).data
    assert stored.permissions[PermissionGroup.STAFF] == PermissionConfig()
    assert "Air Support" not in stored.departments
