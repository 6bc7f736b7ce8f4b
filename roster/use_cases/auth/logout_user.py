import logging

from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError
from ...security.passwords import hash_session_token

logger = logging.getLogger(__name__)


async def logout_user(uow: RosterUnitOfWork, token: str | None) -> bool:
    if not token:
        return False
    try:
        revoked = await uow.sessions.revoke(hash_session_token(token))
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info("operation=auth:logout revoked=%s", revoked)
    return revoked
