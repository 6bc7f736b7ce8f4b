from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..domain.ports.roster import RosterUnitOfWork, RosterUnitOfWorkFactory
from .account import AccountRepository, SessionRepository
from .audit_log import AuditLogRepository
from .logs import LifecycleLogRepository
from .member import ArchiveRepository, MemberRepository
from .settings import PolicyRepository


class SqlRosterUnitOfWork(RosterUnitOfWork):
    """All roster stores sharing one AsyncSession, committed together."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.members = MemberRepository(session)
        self.archive = ArchiveRepository(session)
        self.accounts = AccountRepository(session)
        self.sessions = SessionRepository(session)
        self.logs = LifecycleLogRepository(session)
        self.policies = PolicyRepository(session)
        self.audit = AuditLogRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def unit_of_work_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> RosterUnitOfWorkFactory:
    @asynccontextmanager
    async def factory() -> AsyncIterator[RosterUnitOfWork]:
        async with session_factory() as session:
            yield SqlRosterUnitOfWork(session)

    return factory
