import logging
import uuid

from ...domain.catalog import Capability
from ...domain.community_number import generate_community_number
from ...domain.invariants import (
    validate_department,
    validate_member_name,
    validate_rank_ceiling,
    validate_status,
)
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError
from ...models.member import Member
from ...schemas.member import MemberCreate
from ...services.access_service import load_access, require

logger = logging.getLogger(__name__)


async def add_member(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    payload: MemberCreate,
    *,
    max_attempts: int,
) -> Member:
    """
    Create an active member under a freshly issued community number.

    Hours start at zero; status falls back to the policy default. The number
    is unique against the roster and the archive together.
    """
    try:
        policy = await uow.policies.load_policy()
        access = await load_access(uow, actor_id, policy)
        require(access, Capability.ADD_MEMBERS)

        name = validate_member_name(payload.name)
        department = validate_department(payload.department, policy)
        community_rank = validate_rank_ceiling(access, payload.community_rank, policy)
        status = validate_status(payload.status or policy.default_status, policy)

        taken = await uow.members.numbers() | await uow.archive.numbers()
        community_number = generate_community_number(taken, max_attempts=max_attempts)

        member = await uow.members.add(
            Member(
                name=name,
                community_number=community_number,
                unit_number=payload.unit_number,
                department=department,
                department_rank=payload.department_rank,
                community_rank=community_rank.value,
                subdivisions=payload.subdivisions,
                status=status,
                current_month_hours=0.0,
                discord_id=payload.discord_id,
                website_link=payload.website_link,
                teamspeak_uid=payload.teamspeak_uid,
            )
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=member:add community_number=%s department=%s actor_id=%s",
        member.community_number,
        member.department,
        actor_id,
    )
    return member
