import asyncio
import logging

from ...domain.ports.roster import RosterUnitOfWork
from ...errors import (
    AccountDisabledError,
    AccountNotFoundError,
    AppError,
    BadCredentialError,
)
from ...models.base import utcnow
from ...schemas.account import AccountRead, IssuedSession
from ...security.passwords import (
    create_session_token,
    hash_session_token,
    verify_password,
)

logger = logging.getLogger(__name__)


async def login_user(uow: RosterUnitOfWork, email: str, password: str) -> IssuedSession:
    """
    Authenticate by email and password and issue a fresh session.

    Raises:
        AccountNotFoundError: If no account has this email
        AccountDisabledError: If the account exists but is disabled
        BadCredentialError: If the password does not match
    """
    normalized = (email or "").strip().lower()
    try:
        account = await uow.accounts.get_by_email(normalized)
        if account is None:
            raise AccountNotFoundError()
        if not account.enabled:
            raise AccountDisabledError()

        matches = await asyncio.to_thread(
            verify_password, password or "", account.password_hash
        )
        if not matches:
            logger.warning("login_rejected account_id=%s reason=bad_credential", account.id)
            raise BadCredentialError()

        token = create_session_token()
        await uow.sessions.issue(account.id, hash_session_token(token))
        account.last_login_at = utcnow()
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info("operation=auth:login account_id=%s", account.id)
    return IssuedSession(token=token, account=AccountRead.model_validate(account))
