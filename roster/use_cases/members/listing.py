import uuid

from ...auth.resolver import AccessContext
from ...domain.catalog import Capability, CommunityRank, PermissionGroup
from ...domain.ordering import rank_position, sort_members
from ...domain.policy import RosterPolicy
from ...domain.ports.roster import RosterUnitOfWork
from ...models.member import Member
from ...schemas.listing import TAB_ALL, TAB_STAFF_PLUS, MemberFilter, SortDirection, SortKey
from ...schemas.member import (
    ArchivedMemberRead,
    MemberRead,
    RemovalLogRead,
    TransferLogRead,
)
from ...services.access_service import load_access, require


def can_view_sensitive(access: AccessContext) -> bool:
    return access.group is not PermissionGroup.MEMBER and access.can(
        Capability.EDIT_MEMBERS
    )


def _contains(haystack: str | None, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def matches_filter(member: Member, query: MemberFilter, policy: RosterPolicy) -> bool:
    if query.tab == TAB_STAFF_PLUS:
        index = policy.rank_index(member.community_rank)
        staff_index = policy.rank_index(CommunityRank.STAFF)
        if index is None or staff_index is None or index < staff_index:
            return False
    elif query.tab and query.tab != TAB_ALL and member.department != query.tab:
        return False

    search = query.search.strip()
    if search and not (
        _contains(member.name, search)
        or search in member.community_number
        or _contains(member.unit_number, search)
    ):
        return False

    checks = (
        (query.community_number, lambda v: v in member.community_number),
        (query.unit_number, lambda v: _contains(member.unit_number, v)),
        (query.name, lambda v: _contains(member.name, v)),
        (query.department, lambda v: member.department == v),
        (query.department_rank, lambda v: _contains(member.department_rank, v)),
        (query.status, lambda v: member.status == v),
        (query.subdivisions, lambda v: _contains(member.subdivisions, v)),
    )
    for value, check in checks:
        if value.strip() and not check(value.strip()):
            return False
    if query.community_rank is not None and member.community_rank != query.community_rank.value:
        return False
    return True


def _sort_value(key: SortKey, policy: RosterPolicy):
    if key is SortKey.COMMUNITY_NUMBER:
        return lambda m: int(m.community_number)
    if key is SortKey.COMMUNITY_RANK:
        return lambda m: rank_position(policy, m)
    attribute = {
        SortKey.UNIT_NUMBER: "unit_number",
        SortKey.NAME: "name",
        SortKey.DEPARTMENT: "department",
        SortKey.RANK: "department_rank",
        SortKey.STATUS: "status",
    }[key]
    return lambda m: getattr(m, attribute) or ""


async def list_members(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    query: MemberFilter | None = None,
    *,
    prefix: str,
) -> list[MemberRead]:
    """
    Filtered, ordered roster view.

    Anyone may read the roster. Contact fields are blanked unless the viewer
    is above Member and may edit members.
    """
    query = query or MemberFilter()
    policy = await uow.policies.load_policy()
    access = await load_access(uow, actor_id, policy)
    show_sensitive = can_view_sensitive(access)

    members = [m for m in await uow.members.list_all() if matches_filter(m, query, policy)]
    ordered = sort_members(
        members,
        policy,
        _sort_value(query.sort_key, policy) if query.sort_key else None,
        descending=query.sort_direction is SortDirection.DESC,
    )
    return [
        MemberRead.from_record(m, prefix=prefix, show_sensitive=show_sensitive)
        for m in ordered
    ]


async def list_archive(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    *,
    prefix: str,
    search: str = "",
) -> list[ArchivedMemberRead]:
    access = await load_access(uow, actor_id)
    require(access, Capability.ACCESS_ARCHIVE)
    archived = await uow.archive.list_all()
    needle = search.strip()
    if needle:
        archived = [
            a
            for a in archived
            if _contains(a.name, needle) or needle in a.community_number
        ]
    return [ArchivedMemberRead.from_record(a, prefix=prefix) for a in archived]


async def list_removal_logs(
    uow: RosterUnitOfWork, actor_id: uuid.UUID | None, limit: int = 100
) -> list[RemovalLogRead]:
    access = await load_access(uow, actor_id)
    require(access, Capability.ACCESS_ARCHIVE)
    return [RemovalLogRead.model_validate(e) for e in await uow.logs.list_removals(limit)]


async def list_transfer_logs(
    uow: RosterUnitOfWork, actor_id: uuid.UUID | None, limit: int = 100
) -> list[TransferLogRead]:
    access = await load_access(uow, actor_id)
    require(access, Capability.ACCESS_ARCHIVE)
    return [TransferLogRead.model_validate(e) for e in await uow.logs.list_transfers(limit)]
