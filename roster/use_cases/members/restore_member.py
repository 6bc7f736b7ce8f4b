import logging
import uuid

from ...domain.catalog import Capability
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, ConflictError, NotFoundError
from ...models.member import Member, restore_record
from ...services.access_service import load_access, require

logger = logging.getLogger(__name__)


async def restore_member(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    community_number: str,
) -> Member:
    """
    Bring an archived member back onto the roster.

    Linked accounts are always re-enabled, whatever the discharge policy.
    """
    try:
        access = await load_access(uow, actor_id)
        require(access, Capability.ACCESS_ARCHIVE)

        archived = await uow.archive.get(community_number)
        if archived is None:
            raise NotFoundError(
                f"Archived member #{community_number} not found",
                details={"community_number": community_number},
            )
        if await uow.members.get(community_number) is not None:
            raise ConflictError(
                f"Member #{community_number} is already on the roster",
                details={"community_number": community_number},
            )

        member = restore_record(archived)
        await uow.archive.delete(archived)
        await uow.members.add(member)

        enabled: list[str] = []
        for account in await uow.accounts.list_linked(community_number):
            if not account.enabled:
                account.enabled = True
                enabled.append(str(account.id))
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "operation=member:restore community_number=%s enabled_accounts=%s actor_id=%s",
        community_number,
        ",".join(enabled) or "-",
        actor_id,
    )
    return member
