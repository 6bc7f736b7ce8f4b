import logging
import uuid

from ...domain.catalog import Capability
from ...domain.invariants import (
    validate_department,
    validate_member_name,
    validate_rank_ceiling,
    validate_status,
)
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, NotFoundError
from ...models.member import Member
from ...schemas.member import SENSITIVE_FIELDS, MemberUpdate
from ...services.access_service import load_access, require

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("unit_number", "department_rank", "subdivisions")


async def edit_member(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    community_number: str,
    payload: MemberUpdate,
) -> Member:
    """
    Replace the explicitly set fields of an active member.

    The community number and system fields never change here. The resulting
    community rank is checked against the actor's ceiling before anything is
    written, so a rejected edit leaves the record untouched.
    """
    try:
        policy = await uow.policies.load_policy()
        access = await load_access(uow, actor_id, policy)
        require(access, Capability.EDIT_MEMBERS)

        member = await uow.members.get(community_number)
        if member is None:
            raise NotFoundError(
                f"Member #{community_number} not found",
                details={"community_number": community_number},
            )

        changes = payload.model_dump(exclude_unset=True)
        target_rank = changes.get("community_rank") or member.community_rank
        updates: dict = {
            "community_rank": validate_rank_ceiling(access, target_rank, policy).value
        }
        if "name" in changes:
            updates["name"] = validate_member_name(changes["name"])
        if "department" in changes:
            updates["department"] = validate_department(changes["department"], policy)
        if "status" in changes:
            updates["status"] = validate_status(changes["status"], policy)
        for field in TEXT_FIELDS:
            if field in changes:
                updates[field] = (changes[field] or "").strip()
        for field in SENSITIVE_FIELDS:
            if field in changes:
                updates[field] = changes[field]

        for field, value in updates.items():
            setattr(member, field, value)
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=member:edit community_number=%s fields=%s actor_id=%s",
        community_number,
        ",".join(sorted(changes)),
        actor_id,
    )
    return member
