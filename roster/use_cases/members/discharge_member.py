import logging
import uuid

from ...domain.catalog import Capability
from ...domain.invariants import validate_discharge_detail
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, NotFoundError
from ...models.logs import RemovalLog
from ...models.member import ArchivedMember, archive_record
from ...schemas.member import DischargeRequest
from ...services.access_service import load_access, require

logger = logging.getLogger(__name__)


async def discharge_member(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    community_number: str,
    payload: DischargeRequest,
) -> ArchivedMember:
    """
    Move an active member into the archive.

    One transaction appends the removal log, swaps the roster record for an
    archive record and, when the policy asks for it, disables every account
    linked to the community number.
    """
    try:
        policy = await uow.policies.load_policy()
        access = await load_access(uow, actor_id, policy)
        require(access, Capability.REMOVE_MEMBERS)

        detail = validate_discharge_detail(payload.detail)
        member = await uow.members.get(community_number)
        if member is None:
            raise NotFoundError(
                f"Member #{community_number} not found",
                details={"community_number": community_number},
            )

        await uow.logs.append_removal(
            RemovalLog(
                name=member.name,
                community_number=member.community_number,
                department=member.department,
                reason=payload.reason.value,
                detail=detail,
                actor_id=actor_id,
            )
        )
        archived = archive_record(member, reason=payload.reason.value, detail=detail)
        await uow.members.delete(member)
        await uow.archive.add(archived)

        disabled: list[str] = []
        if policy.auth.disable_account_on_discharge:
            for account in await uow.accounts.list_linked(community_number):
                if account.enabled:
                    account.enabled = False
                    disabled.append(str(account.id))
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=member:discharge community_number=%s reason=%s "
        "disabled_accounts=%s actor_id=%s",
        community_number,
        payload.reason.value,
        ",".join(disabled) or "-",
        actor_id,
    )
    return archived
