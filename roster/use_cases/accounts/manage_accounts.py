"""
Account administration.

Every operation here requires can_manage_users. Holders of it may set any
override, Head Administration included; links must point at a community
number on the roster or in the archive, and nobody may delete their own
account.
"""
import asyncio
import logging
import uuid

from ...auth.resolver import resolve_permission_group
from ...domain.catalog import Capability, PermissionGroup
from ...domain.invariants import normalize_email, validate_password
from ...domain.policy import RosterPolicy
from ...domain.ports.account import AccountData
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import (
    AppError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ...schemas.account import AccountCreate, AccountSummary, AccountUpdate
from ...security.passwords import hash_password
from ...services.access_service import load_access, require
from ...services.audit_service import AuditService

logger = logging.getLogger(__name__)


def account_snapshot(account: AccountData) -> dict:
    return {
        "email": account.email,
        "display_name": account.display_name,
        "enabled": account.enabled,
        "linked_community_number": account.linked_community_number,
        "role_override": account.role_override,
    }


async def _require_account(uow: RosterUnitOfWork, account_id: uuid.UUID) -> AccountData:
    account = await uow.accounts.get_by_id(account_id)
    if account is None:
        raise NotFoundError("Account not found", details={"account_id": str(account_id)})
    return account


async def _validate_link(uow: RosterUnitOfWork, community_number: str | None) -> str | None:
    cleaned = (community_number or "").strip()
    if not cleaned:
        return None
    if cleaned not in (await uow.members.numbers() | await uow.archive.numbers()):
        raise ValidationError(
            f"No member or archived member has community number {cleaned}",
            details={"field": "linked_community_number", "value": cleaned},
        )
    return cleaned


async def _effective_group(
    uow: RosterUnitOfWork, account, policy: RosterPolicy
) -> PermissionGroup:
    linked = None
    if account.linked_community_number:
        linked = await uow.members.get(account.linked_community_number)
    return resolve_permission_group(account, linked, policy)


async def list_accounts(
    uow: RosterUnitOfWork, actor_id: uuid.UUID | None
) -> list[AccountSummary]:
    policy = await uow.policies.load_policy()
    access = await load_access(uow, actor_id, policy)
    require(access, Capability.MANAGE_USERS)

    summaries = []
    for account in await uow.accounts.list_all():
        summaries.append(
            AccountSummary(
                id=account.id,
                email=account.email,
                display_name=account.display_name,
                enabled=account.enabled,
                linked_community_number=account.linked_community_number,
                role_override=account.role_override,
                created_at=account.created_at,
                last_login_at=account.last_login_at,
                effective_group=await _effective_group(uow, account, policy),
            )
        )
    return summaries


async def create_account(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    payload: AccountCreate,
) -> AccountData:
    """
    Create an account.

    Raises:
        ConflictError: If the email (case-insensitive) is taken
        ValidationError: If the email is malformed, the password is shorter
            than 8 characters or the link points nowhere
        CapabilityError: If the actor lacks can_manage_users
    """
    try:
        access = await load_access(uow, actor_id)
        require(access, Capability.MANAGE_USERS)

        email = normalize_email(payload.email)
        if await uow.accounts.get_by_email(email) is not None:
            raise ConflictError("Email already exists", details={"field": "email"})
        validate_password(payload.password)
        link = await _validate_link(uow, payload.linked_community_number)
        override = payload.role_override.value if payload.role_override else None

        password_hash = await asyncio.to_thread(hash_password, payload.password)
        account = await uow.accounts.create(
            email=email,
            display_name=(payload.display_name or "").strip() or email,
            password_hash=password_hash,
            linked_community_number=link,
            role_override=override,
        )
        await AuditService(uow.audit).log_create(
            "account", account.id, account_snapshot(account), actor_id=actor_id
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=account:create account_id=%s linked=%s override=%s actor_id=%s",
        account.id,
        link,
        override,
        actor_id,
    )
    return account


async def set_password(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    account_id: uuid.UUID,
    new_password: str,
) -> None:
    """Administrative reset: replaces the hash without checking the old password."""
    try:
        access = await load_access(uow, actor_id)
        require(access, Capability.MANAGE_USERS)
        validate_password(new_password)
        account = await _require_account(uow, account_id)

        account.password_hash = await asyncio.to_thread(hash_password, new_password)
        await AuditService(uow.audit).log(
            action="account.password_reset",
            entity_type="account",
            entity_id=account.id,
            actor_id=actor_id,
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=account:set-password account_id=%s actor_id=%s", account_id, actor_id
    )


async def update_account(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    account_id: uuid.UUID,
    payload: AccountUpdate,
) -> AccountData:
    try:
        access = await load_access(uow, actor_id)
        require(access, Capability.MANAGE_USERS)
        account = await _require_account(uow, account_id)
        before = account_snapshot(account)

        changes = payload.model_dump(exclude_unset=True)
        display_name = account.display_name
        if "display_name" in changes:
            display_name = (changes["display_name"] or "").strip() or account.email
        enabled = account.enabled
        if changes.get("enabled") is not None:
            enabled = changes["enabled"]
        link = account.linked_community_number
        if "linked_community_number" in changes:
            link = await _validate_link(uow, changes["linked_community_number"])
        override = account.role_override
        if "role_override" in changes:
            override = changes["role_override"].value if changes["role_override"] else None

        account.display_name = display_name
        account.enabled = enabled
        account.linked_community_number = link
        account.role_override = override
        await AuditService(uow.audit).log_update(
            "account",
            account.id,
            before,
            account_snapshot(account),
            actor_id=actor_id,
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=account:update account_id=%s fields=%s actor_id=%s",
        account_id,
        ",".join(sorted(changes)),
        actor_id,
    )
    return account


async def delete_account(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    account_id: uuid.UUID,
) -> None:
    try:
        access = await load_access(uow, actor_id)
        require(access, Capability.MANAGE_USERS)
        if actor_id is not None and account_id == actor_id:
            raise ValidationError(
                "You cannot delete your own account",
                details={"account_id": str(account_id)},
            )
        account = await _require_account(uow, account_id)
        snapshot = account_snapshot(account)

        await uow.accounts.delete(account)
        await AuditService(uow.audit).log_delete(
            "account", account_id, snapshot, actor_id=actor_id
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info("operation=account:delete account_id=%s actor_id=%s", account_id, actor_id)
