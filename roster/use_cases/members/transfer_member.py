import logging
import uuid

from ...domain.catalog import Capability
from ...domain.invariants import (
    validate_department,
    validate_rank_ceiling,
    validate_status,
)
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, NotFoundError, ValidationError
from ...models.logs import TransferLog
from ...models.member import Member
from ...schemas.member import TransferRequest
from ...services.access_service import load_access, require

logger = logging.getLogger(__name__)


async def transfer_member(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    community_number: str,
    payload: TransferRequest,
) -> Member:
    """
    Move an active member to another department.

    The transfer log entry and the member update commit together. Every check
    (capability, catalogs, rank ceiling) runs before either is written.
    """
    try:
        policy = await uow.policies.load_policy()
        access = await load_access(uow, actor_id, policy)
        require(access, Capability.TRANSFER_DEPTS)

        member = await uow.members.get(community_number)
        if member is None:
            raise NotFoundError(
                f"Member #{community_number} not found",
                details={"community_number": community_number},
            )

        to_department = validate_department(payload.department, policy)
        if to_department == member.department:
            raise ValidationError(
                "Transfer must move the member to a different department",
                details={"department": to_department},
            )
        status = validate_status(payload.status, policy)
        community_rank = validate_rank_ceiling(access, payload.community_rank, policy)

        await uow.logs.append_transfer(
            TransferLog(
                name=member.name,
                community_number=member.community_number,
                from_department=member.department,
                to_department=to_department,
                reason=payload.reason.value,
                detail=payload.detail,
                actor_id=actor_id,
            )
        )
        from_department = member.department
        member.department = to_department
        member.unit_number = payload.unit_number
        member.department_rank = payload.department_rank
        member.community_rank = community_rank.value
        member.subdivisions = payload.subdivisions
        member.status = status
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=member:transfer community_number=%s from=%s to=%s reason=%s actor_id=%s",
        community_number,
        from_department,
        to_department,
        payload.reason.value,
        actor_id,
    )
    return member
