"""Shared test fixtures and configuration."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from roster.config import Settings  # noqa: E402
from roster.crud.unit_of_work import unit_of_work_factory  # noqa: E402
from roster.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    init_models,
    shares_connection,
)
from roster.domain.catalog import CommunityRank, PermissionGroup  # noqa: E402
from roster.models.account import Account  # noqa: E402
from roster.models.member import Member  # noqa: E402
from roster.security.passwords import hash_password  # noqa: E402
from roster.services.roster_service import RosterService  # noqa: E402

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(TEST_PASSWORD, iterations=1_000)


@pytest.fixture
async def engine(anyio_backend):
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def uow_factory(engine):
    return unit_of_work_factory(build_session_factory(engine))


@pytest.fixture
def roster_settings() -> Settings:
    return Settings(community_number_max_attempts=50, community_id_prefix="SRP")


@pytest.fixture
def service(engine, uow_factory, roster_settings) -> RosterService:
    return RosterService(
        uow_factory, settings=roster_settings, exclusive=shares_connection(engine)
    )


@pytest.fixture
def seed_member(uow_factory):
    async def _seed(
        community_number: str,
        community_rank: CommunityRank = CommunityRank.MEMBER,
        *,
        name: str | None = None,
        department: str = "LSPD",
        status: str = "Active",
        **fields,
    ) -> Member:
        async with uow_factory() as uow:
            member = await uow.members.add(
                Member(
                    name=name or f"Member {community_number}",
                    community_number=community_number,
                    unit_number=fields.pop("unit_number", f"1A-{community_number[-2:]}"),
                    department=department,
                    department_rank=fields.pop("department_rank", "Officer"),
                    community_rank=CommunityRank(community_rank).value,
                    subdivisions=fields.pop("subdivisions", ""),
                    status=status,
                    current_month_hours=fields.pop("current_month_hours", 0.0),
                    **fields,
                )
            )
            await uow.commit()
            return member

    return _seed


@pytest.fixture
def seed_account(uow_factory, password_hash):
    async def _seed(
        email: str,
        *,
        link: str | None = None,
        override: PermissionGroup | None = None,
        enabled: bool = True,
    ) -> Account:
        async with uow_factory() as uow:
            account = await uow.accounts.create(
                email=email,
                display_name=email,
                password_hash=password_hash,
                linked_community_number=link,
                role_override=override.value if override else None,
            )
            account.enabled = enabled
            await uow.commit()
            return account

    return _seed


@pytest.fixture
def load_member(uow_factory):
    async def _load(community_number: str) -> Member | None:
        async with uow_factory() as uow:
            return await uow.members.get(community_number)

    return _load


@pytest.fixture
def load_account(uow_factory):
    async def _load(account_id) -> Account | None:
        async with uow_factory() as uow:
            return await uow.accounts.get_by_id(account_id)

    return _load
