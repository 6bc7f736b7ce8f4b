from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.member import ArchivedMember, Member


class MemberRepository:
    """Roster Store: active members keyed by community number."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, community_number: str) -> Member | None:
        result = await self.session.execute(
            select(Member).where(Member.community_number == community_number)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Member]:
        result = await self.session.execute(select(Member))
        return list(result.scalars().all())

    async def numbers(self) -> set[str]:
        result = await self.session.execute(select(Member.community_number))
        return set(result.scalars().all())

    async def add(self, member: Member) -> Member:
        self.session.add(member)
        await self.session.flush()
        return member

    async def delete(self, member: Member) -> None:
        await self.session.delete(member)
        await self.session.flush()


class ArchiveRepository:
    """Archive Store: discharged members plus discharge metadata."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, community_number: str) -> ArchivedMember | None:
        result = await self.session.execute(
            select(ArchivedMember).where(
                ArchivedMember.community_number == community_number
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[ArchivedMember]:
        result = await self.session.execute(
            select(ArchivedMember).order_by(ArchivedMember.discharge_date.desc())
        )
        return list(result.scalars().all())

    async def numbers(self) -> set[str]:
        result = await self.session.execute(select(ArchivedMember.community_number))
        return set(result.scalars().all())

    async def add(self, archived: ArchivedMember) -> ArchivedMember:
        self.session.add(archived)
        await self.session.flush()
        return archived

    async def delete(self, archived: ArchivedMember) -> None:
        await self.session.delete(archived)
        await self.session.flush()
