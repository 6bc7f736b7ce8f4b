import asyncio
import logging

from ...domain.invariants import normalize_email, validate_password
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, ConflictError, ValidationError
from ...models.base import utcnow
from ...schemas.account import AccountRead, IssuedSession, RegisterRequest
from ...security.passwords import (
    create_session_token,
    hash_password,
    hash_session_token,
)
from ...services.audit_service import AuditService

logger = logging.getLogger(__name__)


async def register_user(uow: RosterUnitOfWork, payload: RegisterRequest) -> IssuedSession:
    """
    Invite sign-up.

    Creates an unlinked, override-free account, which resolves to Member until
    staff link or promote it, and signs it in.
    """
    try:
        policy = await uow.policies.load_policy()
        if not policy.auth.allow_invite_signup:
            raise ValidationError("Sign-up is disabled. Contact Admin/Head Admin.")
        expected_code = policy.auth.invite_code.strip()
        if expected_code and payload.invite_code.strip() != expected_code:
            logger.warning("signup_rejected reason=invalid_invite_code")
            raise ValidationError("Invalid invite code", details={"field": "invite_code"})

        email = normalize_email(payload.email)
        if await uow.accounts.get_by_email(email) is not None:
            raise ConflictError("Email already registered", details={"field": "email"})
        validate_password(payload.password)

        password_hash = await asyncio.to_thread(hash_password, payload.password)
        account = await uow.accounts.create(
            email=email,
            display_name=(payload.display_name or "").strip() or email,
            password_hash=password_hash,
        )
        await AuditService(uow.audit).log_create(
            "account",
            account.id,
            {"email": email, "source": "signup"},
            actor_id=account.id,
        )

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

    logger.info("operation=auth:register account_id=%s", account.id)
    return IssuedSession(token=token, account=AccountRead.model_validate(account))
