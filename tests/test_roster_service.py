import asyncio
from contextlib import asynccontextmanager

import pytest
from sqlalchemy.exc import OperationalError

from roster.config import Settings
from roster.domain.catalog import CommunityRank, RemovalReason
from roster.database import build_engine, shares_connection
from roster.models.member import archive_record
from roster.schemas.member import DischargeRequest, MemberUpdate
from roster.services.locks import MemberLocks
from roster.services.roster_service import RosterService

pytestmark = pytest.mark.anyio


async def test_store_failure_becomes_internal_error() -> None:
    class BrokenPolicies:
        async def load_policy(self):
            raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    class BrokenUnitOfWork:
        policies = BrokenPolicies()

        async def commit(self) -> None:
            pass

        async def rollback(self) -> None:
            pass

    @asynccontextmanager
    async def factory():
        yield BrokenUnitOfWork()

    service = RosterService(factory, settings=Settings())

    result = await service.get_policy()

    assert result.ok is False
    assert result.status_code == 500
    assert result.error_code == "INTERNAL_ERROR"


async def test_login_failure_is_returned_not_raised(service, seed_account) -> None:
    await seed_account("x@y.com")

    result = await service.login("x@y.com", "bad")

    assert result.ok is False
    assert result.error_code == "BAD_CREDENTIAL"
    assert result.status_code == 401


async def test_login_and_current_account(service, seed_account) -> None:
    account = await seed_account("x@y.com")

    login = await service.login("x@y.com", "correct-horse")
    current = await service.current_account(login.data.token)
    await service.logout(login.data.token)
    after_logout = await service.current_account(login.data.token)

    assert login.ok
    assert current.data.id == account.id
    assert after_logout.data is None


async def test_concurrent_discharges_of_same_member_apply_once(
    service, seed_member, seed_account
) -> None:
    await seed_member("4521", CommunityRank.HEAD_ADMIN)
    director = await seed_account("director@roster.local", link="4521")
    await seed_member("3001", CommunityRank.MEMBER)
    request = DischargeRequest(reason=RemovalReason.OTHER, detail="Duplicate click")

    results = await asyncio.gather(
        service.discharge_member(director.id, "3001", request),
        service.discharge_member(director.id, "3001", request),
    )

    assert sorted(r.ok for r in results) == [False, True]
    assert [r.error_code for r in results if not r.ok] == ["NOT_FOUND"]
    removals = await service.list_removal_logs(director.id)
    assert len(removals.data) == 1


async def test_rejected_edits_do_not_undo_a_concurrent_discharge(
    service, seed_member, seed_account, load_member, load_account
) -> None:
    await seed_member("4521", CommunityRank.HEAD_ADMIN)
    director = await seed_account("director@roster.local", link="4521")
    await seed_member("2001", CommunityRank.SENIOR_STAFF)
    staff = await seed_account("staff@roster.local", link="2001")
    await seed_member("3001", CommunityRank.MEMBER)
    linked = await seed_account("member@roster.local", link="3001")
    await seed_member("3002", CommunityRank.MEMBER)
    request = DischargeRequest(reason=RemovalReason.PROPER_RESIGNATION, detail="Left")
    over_ceiling = MemberUpdate(community_rank=CommunityRank.HEAD_ADMIN)

    discharge, *edits = await asyncio.gather(
        service.discharge_member(director.id, "3001", request),
        *(service.edit_member(staff.id, "3002", over_ceiling) for _ in range(5)),
    )

    assert discharge.ok
    assert [e.error_code for e in edits] == ["RANK_CEILING_VIOLATION"] * 5
    assert await load_member("3001") is None
    assert (await load_member("3002")).community_rank == CommunityRank.MEMBER.value
    assert (await load_account(linked.id)).enabled is False
    removals = await service.list_removal_logs(director.id)
    assert [e.community_number for e in removals.data] == ["3001"]
    archive = await service.list_archive(director.id)
    assert [a.community_number for a in archive.data] == ["3001"]


async def test_only_in_memory_engine_shares_one_connection(engine) -> None:
    file_engine = build_engine("sqlite+aiosqlite:///roster.db")

    assert shares_connection(engine) is True
    assert shares_connection(file_engine) is False
    await file_engine.dispose()


async def test_bootstrap_seeds_director_once(uow_factory) -> None:
    settings = Settings(bootstrap_director_password="director-pass")
    service = RosterService(uow_factory, settings=settings)

    first = await service.bootstrap()
    second = await service.bootstrap()

    assert first.ok and first.data.email == "director@roster.local"
    assert second.ok and second.data is None
    access = await service.access_for(first.data.id)
    assert access.data.rank_ceiling is None
    members = await service.list_members(first.data.id)
    assert [(m.community_id, m.name) for m in members.data] == [("SRP-4521", "John Doe")]


async def test_bootstrap_refuses_number_held_by_archive(uow_factory, seed_member) -> None:
    member = await seed_member("4521", CommunityRank.STAFF)
    async with uow_factory() as uow:
        archived = archive_record(member, reason=RemovalReason.RETIREMENT.value, detail="Retired")
        await uow.members.delete(await uow.members.get("4521"))
        await uow.archive.add(archived)
        await uow.commit()
    service = RosterService(
        uow_factory, settings=Settings(bootstrap_director_password="director-pass")
    )

    result = await service.bootstrap()

    assert result.error_code == "CONFLICT_ERROR"
    async with uow_factory() as uow:
        assert await uow.members.numbers() == set()
        assert await uow.archive.numbers() == {"4521"}
        assert await uow.accounts.list_all() == []


async def test_bootstrap_without_password_is_noop(service) -> None:
    result = await service.bootstrap()

    assert result.ok and result.data is None


async def test_member_locks_serialize_same_key() -> None:
    locks = MemberLocks()
    order: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold("4521"):
            order.append(f"{name}:start")
            await asyncio.sleep(0)
            order.append(f"{name}:end")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a:start", "a:end", "b:start", "b:end"]
    assert locks.is_held("4521") is False
