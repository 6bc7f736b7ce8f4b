import logging
import uuid
from collections.abc import Mapping

from ...domain.catalog import ACTIVITY_EXEMPT_STATUSES, Capability
from ...domain.invariants import validate_hours
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, NotFoundError
from ...services.access_service import load_access, require

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "Active"
INACTIVE_STATUS = "Inactive"


async def record_hours(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    hours_by_number: Mapping[str, float],
) -> dict[str, float]:
    """Set current-month hours for several members at once, all or nothing."""
    try:
        access = await load_access(uow, actor_id)
        require(access, Capability.EDIT_MEMBERS)

        pending = []
        for community_number, hours in hours_by_number.items():
            value = validate_hours(community_number, hours)
            member = await uow.members.get(community_number)
            if member is None:
                raise NotFoundError(
                    f"Member #{community_number} not found",
                    details={"community_number": community_number},
                )
            pending.append((member, value))

        for member, value in pending:
            member.current_month_hours = value
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=activity:record-hours members=%s actor_id=%s",
        len(pending),
        actor_id,
    )
    return {member.community_number: value for member, value in pending}


async def run_activity_check(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
) -> list[str]:
    """
    Re-derive Active/Inactive from hours against department requirements.

    Members on LOA, Reserve, Suspended or Training are skipped. Returns the
    community numbers whose status changed.
    """
    try:
        policy = await uow.policies.load_policy()
        access = await load_access(uow, actor_id, policy)
        require(access, Capability.EDIT_MEMBERS)

        changed: list[str] = []
        for member in await uow.members.list_all():
            if member.status in ACTIVITY_EXEMPT_STATUSES:
                continue
            required = policy.requirement_for(member.department)
            status = ACTIVE_STATUS if member.current_month_hours >= required else INACTIVE_STATUS
            if status != member.status:
                member.status = status
                changed.append(member.community_number)
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=activity:check changed=%s actor_id=%s",
        len(changed),
        actor_id,
    )
    return sorted(changed)
