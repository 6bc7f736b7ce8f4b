from ...domain.ports.account import AccountData
from ...domain.ports.roster import RosterUnitOfWork
from ...security.passwords import hash_session_token


async def current_account(uow: RosterUnitOfWork, token: str | None) -> AccountData | None:
    """Resolve a session token to its account; unknown tokens resolve to None."""
    if not token:
        return None
    stored = await uow.sessions.get_by_hash(hash_session_token(token))
    if stored is None:
        return None
    return await uow.accounts.get_by_id(stored.account_id)
