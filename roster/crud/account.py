import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.ports.account import AccountPort, SessionPort
from ..models.account import Account, AuthSession


class AccountRepository(AccountPort):
    """Account Store: principals, credentials and links."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: uuid.UUID) -> Account | None:
        return await self._session.get(Account, account_id)

    async def get_by_email(self, email: str) -> Account | None:
        result = await self._session.execute(
            select(Account).where(func.lower(Account.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Account]:
        result = await self._session.execute(select(Account).order_by(Account.email))
        return list(result.scalars().all())

    async def list_linked(self, community_number: str) -> list[Account]:
        result = await self._session.execute(
            select(Account).where(Account.linked_community_number == community_number)
        )
        return list(result.scalars().all())

    async def create(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        linked_community_number: str | None = None,
        role_override: str | None = None,
    ) -> Account:
        account = Account(
            email=email,
            display_name=display_name,
            password_hash=password_hash,
            enabled=True,
            linked_community_number=linked_community_number,
            role_override=role_override,
        )
        self._session.add(account)
        await self._session.flush()
        return account

    async def delete(self, account: Account) -> None:
        await self._session.delete(account)
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()


class SessionRepository(SessionPort):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def issue(self, account_id: uuid.UUID, token_hash: str) -> AuthSession:
        # Only one session is meaningful at a time.
        await self._session.execute(delete(AuthSession))
        auth_session = AuthSession(account_id=account_id, token_hash=token_hash)
        self._session.add(auth_session)
        await self._session.flush()
        return auth_session

    async def get_by_hash(self, token_hash: str) -> AuthSession | None:
        result = await self._session.execute(
            select(AuthSession).where(AuthSession.token_hash == token_hash)
        )
        return result.scalars().first()

    async def revoke(self, token_hash: str) -> bool:
        result = await self._session.execute(
            delete(AuthSession).where(AuthSession.token_hash == token_hash)
        )
        return bool(result.rowcount)

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
