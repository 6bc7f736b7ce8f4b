from __future__ import annotations

from typing import AsyncContextManager, Callable, Protocol

from ...models import ArchivedMember, AuditLog, Member, RemovalLog, TransferLog
from ..policy import RosterPolicy
from .account import AccountPort, SessionPort


class MemberStorePort(Protocol):
    async def get(self, community_number: str) -> Member | None:
        ...

    async def list_all(self) -> list[Member]:
        ...

    async def numbers(self) -> set[str]:
        ...

    async def add(self, member: Member) -> Member:
        ...

    async def delete(self, member: Member) -> None:
        ...


class ArchiveStorePort(Protocol):
    async def get(self, community_number: str) -> ArchivedMember | None:
        ...

    async def list_all(self) -> list[ArchivedMember]:
        ...

    async def numbers(self) -> set[str]:
        ...

    async def add(self, archived: ArchivedMember) -> ArchivedMember:
        ...

    async def delete(self, archived: ArchivedMember) -> None:
        ...


class LifecycleLogPort(Protocol):
    async def append_removal(self, entry: RemovalLog) -> RemovalLog:
        ...

    async def append_transfer(self, entry: TransferLog) -> TransferLog:
        ...

    async def list_removals(self, limit: int = 100) -> list[RemovalLog]:
        ...

    async def list_transfers(self, limit: int = 100) -> list[TransferLog]:
        ...


class PolicyPort(Protocol):
    async def load_policy(self) -> RosterPolicy:
        ...

    async def save_policy(self, policy: RosterPolicy) -> None:
        ...


class AuditPort(Protocol):
    async def create(self, entry: AuditLog) -> AuditLog:
        ...

    async def list_by_entity(
        self, entity_type: str, entity_id: str, limit: int = 100
    ) -> list[AuditLog]:
        ...


class RosterUnitOfWork(Protocol):
    """Every store of the roster, bound to one transaction."""

    members: MemberStorePort
    archive: ArchiveStorePort
    accounts: AccountPort
    sessions: SessionPort
    logs: LifecycleLogPort
    policies: PolicyPort
    audit: AuditPort

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...


RosterUnitOfWorkFactory = Callable[[], AsyncContextManager[RosterUnitOfWork]]
