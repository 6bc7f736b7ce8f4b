import uuid
from types import SimpleNamespace

import pytest

from roster.auth.resolver import (
    NO_RANK_CEILING,
    PrincipalSource,
    classify_principal,
    resolve_access,
    resolve_permission_group,
)
from roster.domain.catalog import (
    COMMUNITY_RANKS,
    Capability,
    CommunityRank,
    PermissionGroup,
)
from roster.domain.policy import RosterPolicy


def make_account(
    *,
    enabled: bool = True,
    link: str | None = None,
    override: PermissionGroup | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid.uuid4(),
        enabled=enabled,
        linked_community_number=link,
        role_override=override.value if override else None,
    )


def make_member(number: str, rank: CommunityRank) -> SimpleNamespace:
    return SimpleNamespace(community_number=number, community_rank=rank.value)


@pytest.fixture
def policy() -> RosterPolicy:
    return RosterPolicy()


def test_anonymous_resolves_to_member_without_capabilities(policy: RosterPolicy) -> None:
    access = resolve_access(None, None, policy)

    assert access.source is PrincipalSource.ANONYMOUS
    assert access.group is PermissionGroup.MEMBER
    assert access.capabilities == frozenset()
    assert access.rank_ceiling == NO_RANK_CEILING
    assert access.is_authenticated is False


@pytest.mark.parametrize("override", [None, *PermissionGroup])
@pytest.mark.parametrize("rank", list(CommunityRank))
def test_disabled_account_is_always_member(
    policy: RosterPolicy, override: PermissionGroup | None, rank: CommunityRank
) -> None:
    account = make_account(enabled=False, link="4521", override=override)
    member = make_member("4521", rank)

    access = resolve_access(account, member, policy)

    assert access.source is PrincipalSource.DISABLED
    assert access.group is PermissionGroup.MEMBER
    assert access.rank_ceiling == NO_RANK_CEILING
    assert not access.can(Capability.ADD_MEMBERS)


def test_override_wins_over_link(policy: RosterPolicy) -> None:
    account = make_account(link="4521", override=PermissionGroup.STAFF)
    member = make_member("4521", CommunityRank.HEAD_ADMIN)

    assert classify_principal(account, member) is PrincipalSource.OVERRIDE
    assert resolve_permission_group(account, member, policy) is PermissionGroup.STAFF


def test_link_maps_rank_through_policy(policy: RosterPolicy) -> None:
    account = make_account(link="1234")
    member = make_member("1234", CommunityRank.SENIOR_STAFF)

    access = resolve_access(account, member, policy)

    assert access.source is PrincipalSource.LINKED
    assert access.group is PermissionGroup.STAFF
    assert access.rank_ceiling == COMMUNITY_RANKS.index(CommunityRank.SENIOR_STAFF)
    assert access.can(Capability.TRANSFER_DEPTS)
    assert not access.can(Capability.MANAGE_USERS)


def test_unlinked_account_is_member(policy: RosterPolicy) -> None:
    account = make_account()

    access = resolve_access(account, None, policy)

    assert access.source is PrincipalSource.UNLINKED
    assert access.group is PermissionGroup.MEMBER
    assert access.is_authenticated is True
    assert access.is_staff is False


def test_link_to_missing_member_degrades_to_member(policy: RosterPolicy) -> None:
    # The linked record was discharged, so no active member is supplied.
    account = make_account(link="1234")

    access = resolve_access(account, None, policy)

    assert access.group is PermissionGroup.MEMBER
    assert access.rank_ceiling == NO_RANK_CEILING


def test_mismatched_member_is_not_treated_as_link(policy: RosterPolicy) -> None:
    account = make_account(link="1234")
    other = make_member("9999", CommunityRank.HEAD_ADMIN)

    assert classify_principal(account, other) is PrincipalSource.UNLINKED
    assert resolve_permission_group(account, other, policy) is PermissionGroup.MEMBER


def test_head_administration_is_unbounded(policy: RosterPolicy) -> None:
    account = make_account(override=PermissionGroup.HEAD_ADMINISTRATION)

    access = resolve_access(account, None, policy)

    assert access.rank_ceiling is None
    assert access.assignable_ranks(policy) == list(COMMUNITY_RANKS)
    assert access.capabilities == frozenset(Capability)


def test_override_without_link_cannot_assign_ranks(policy: RosterPolicy) -> None:
    account = make_account(override=PermissionGroup.ADMINISTRATION)

    access = resolve_access(account, None, policy)

    assert access.group is PermissionGroup.ADMINISTRATION
    assert access.rank_ceiling == NO_RANK_CEILING
    assert access.assignable_ranks(policy) == []


def test_assignable_ranks_stop_at_own_rank(policy: RosterPolicy) -> None:
    account = make_account(link="1234")
    member = make_member("1234", CommunityRank.STAFF)

    access = resolve_access(account, member, policy)

    assert access.assignable_ranks(policy) == [
        CommunityRank.RECRUIT,
        CommunityRank.MEMBER,
        CommunityRank.STAFF_IN_TRAINING,
        CommunityRank.STAFF,
    ]


def test_changing_mapping_reconfigures_access() -> None:
    policy = RosterPolicy()
    policy.auth.community_rank_to_group[CommunityRank.MEMBER] = PermissionGroup.STAFF
    account = make_account(link="1234")
    member = make_member("1234", CommunityRank.MEMBER)

    access = resolve_access(account, member, policy)

    assert access.group is PermissionGroup.STAFF
    assert access.can(Capability.REMOVE_MEMBERS)
