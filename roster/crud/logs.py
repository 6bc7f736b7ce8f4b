from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.logs import RemovalLog, TransferLog


class LifecycleLogRepository:
    """Append-only removal and transfer logs. Entries are never updated."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append_removal(self, entry: RemovalLog) -> RemovalLog:
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def append_transfer(self, entry: TransferLog) -> TransferLog:
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_removals(self, limit: int = 100) -> list[RemovalLog]:
        result = await self.session.execute(
            select(RemovalLog).order_by(RemovalLog.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_transfers(self, limit: int = 100) -> list[TransferLog]:
        result = await self.session.execute(
            select(TransferLog).order_by(TransferLog.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())
