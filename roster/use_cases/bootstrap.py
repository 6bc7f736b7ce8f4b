"""
First-run seeding.

On an empty account store this writes the default policy, the director's
roster record (Head Admin) and the director account linked to it. Running it
again changes nothing. A director number already held by an archived member
is refused.
"""
import asyncio
import logging

from ..domain.catalog import CommunityRank
from ..domain.invariants import normalize_email, validate_password
from ..domain.ports.account import AccountData
from ..domain.ports.roster import RosterUnitOfWork
from ..errors import AppError, ConflictError
from ..models.member import Member
from ..security.passwords import hash_password
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)

DIRECTOR_NAME = "John Doe"
DIRECTOR_DEPARTMENT = "Development"


async def bootstrap_roster(
    uow: RosterUnitOfWork,
    *,
    email: str,
    password: str,
    community_number: str,
) -> AccountData | None:
    """
    Seed the director. Returns the new account, or None when accounts exist.
    """
    try:
        if await uow.accounts.list_all():
            logger.info("bootstrap_skipped reason=accounts_exist")
            return None

        email = normalize_email(email)
        validate_password(password)
        if community_number in await uow.archive.numbers():
            raise ConflictError(
                f"Community number {community_number} belongs to an archived member",
                details={"community_number": community_number},
            )
        policy = await uow.policies.load_policy()
        await uow.policies.save_policy(policy)

        if await uow.members.get(community_number) is None:
            department = (
                DIRECTOR_DEPARTMENT
                if DIRECTOR_DEPARTMENT in policy.departments
                else policy.departments[0]
            )
            await uow.members.add(
                Member(
                    name=DIRECTOR_NAME,
                    community_number=community_number,
                    unit_number="Director",
                    department=department,
                    department_rank="Director",
                    community_rank=CommunityRank.HEAD_ADMIN.value,
                    subdivisions="",
                    status=policy.default_status,
                    current_month_hours=0.0,
                )
            )

        password_hash = await asyncio.to_thread(hash_password, password)
        account = await uow.accounts.create(
            email=email,
            display_name="Director",
            password_hash=password_hash,
            linked_community_number=community_number,
        )
        await AuditService(uow.audit).log_create(
            "account",
            account.id,
            {"email": email, "linked_community_number": community_number},
            actor_type="system",
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=bootstrap account_id=%s community_number=%s",
        account.id,
        community_number,
    )
    return account
