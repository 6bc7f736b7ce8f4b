"""
Access resolution - effective permission group, capabilities and rank ceiling.

Resolution is a pure function of (account, linked member, policy). Callers
load the account, its linked ACTIVE member and the current policy, then call
resolve_access(); nothing here touches a store or raises.

Precedence (first applicable wins):
1. No account, or account disabled -> Member
2. Explicit group override -> the override, verbatim
3. Linked to an active member -> policy mapping of that member's rank
4. Otherwise -> Member
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ..domain.catalog import Capability, CommunityRank, PermissionGroup
from ..domain.policy import RosterPolicy

NO_RANK_CEILING = -1


class PrincipalAccount(Protocol):
    id: uuid.UUID
    enabled: bool
    linked_community_number: str | None
    role_override: str | None


class LinkedMember(Protocol):
    community_number: str
    community_rank: str


class PrincipalSource(str, Enum):
    """Which precedence rule decided a principal's group."""

    ANONYMOUS = "anonymous"
    DISABLED = "disabled"
    OVERRIDE = "override"
    LINKED = "linked"
    UNLINKED = "unlinked"


@dataclass(frozen=True)
class AccessContext:
    account_id: uuid.UUID | None
    source: PrincipalSource
    group: PermissionGroup
    capabilities: frozenset[Capability]
    # Highest assignable rank index; None means unbounded.
    rank_ceiling: int | None

    @property
    def is_authenticated(self) -> bool:
        return self.source not in (PrincipalSource.ANONYMOUS, PrincipalSource.DISABLED)

    @property
    def is_staff(self) -> bool:
        return self.is_authenticated and self.group is not PermissionGroup.MEMBER

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def allows_rank_index(self, index: int) -> bool:
        return self.rank_ceiling is None or index <= self.rank_ceiling

    def assignable_ranks(self, policy: RosterPolicy) -> list[CommunityRank]:
        return [
            rank
            for index, rank in enumerate(policy.community_ranks)
            if self.allows_rank_index(index)
        ]


def classify_principal(
    account: PrincipalAccount | None,
    linked_member: LinkedMember | None,
) -> PrincipalSource:
    if account is None:
        return PrincipalSource.ANONYMOUS
    if not account.enabled:
        return PrincipalSource.DISABLED
    if account.role_override:
        return PrincipalSource.OVERRIDE
    if _is_linked(account, linked_member):
        return PrincipalSource.LINKED
    return PrincipalSource.UNLINKED


def resolve_permission_group(
    account: PrincipalAccount | None,
    linked_member: LinkedMember | None,
    policy: RosterPolicy,
) -> PermissionGroup:
    source = classify_principal(account, linked_member)
    if source is PrincipalSource.OVERRIDE:
        return PermissionGroup(account.role_override)
    if source is PrincipalSource.LINKED:
        return policy.group_for_rank(linked_member.community_rank)
    return PermissionGroup.MEMBER


def resolve_rank_ceiling(
    group: PermissionGroup,
    account: PrincipalAccount | None,
    linked_member: LinkedMember | None,
    policy: RosterPolicy,
) -> int | None:
    if group is PermissionGroup.HEAD_ADMINISTRATION:
        return None
    if account is None or not account.enabled or not _is_linked(account, linked_member):
        return NO_RANK_CEILING
    index = policy.rank_index(linked_member.community_rank)
    return NO_RANK_CEILING if index is None else index


def resolve_access(
    account: PrincipalAccount | None,
    linked_member: LinkedMember | None,
    policy: RosterPolicy,
) -> AccessContext:
    source = classify_principal(account, linked_member)
    group = resolve_permission_group(account, linked_member, policy)
    return AccessContext(
        account_id=account.id if account is not None else None,
        source=source,
        group=group,
        capabilities=policy.capabilities_for(group),
        rank_ceiling=resolve_rank_ceiling(group, account, linked_member, policy),
    )


def _is_linked(account: PrincipalAccount, linked_member: LinkedMember | None) -> bool:
    return (
        linked_member is not None
        and bool(account.linked_community_number)
        and linked_member.community_number == account.linked_community_number
    )
