import logging
import uuid

from ...domain.catalog import Capability, PermissionGroup
from ...domain.policy import RosterPolicy
from ...domain.ports.roster import RosterUnitOfWork
from ...errors import AppError, CapabilityError
from ...services.access_service import load_access, require
from ...services.audit_service import AuditService

logger = logging.getLogger(__name__)

POLICY_ENTITY_ID = "roster_policy"


async def get_policy(uow: RosterUnitOfWork) -> RosterPolicy:
    return await uow.policies.load_policy()


async def update_policy(
    uow: RosterUnitOfWork,
    actor_id: uuid.UUID | None,
    new_policy: RosterPolicy,
) -> RosterPolicy:
    """
    Replace the roster policy.

    Changing anything outside the permission matrix requires
    can_manage_settings, and changing the rank catalog or the rank to group
    mapping also requires can_manage_ranks. The matrix itself is gated only
    by Head Administration holding can_manage_permissions.
    """
    try:
        current = await uow.policies.load_policy()
        access = await load_access(uow, actor_id, current)

        matrix_changed = new_policy.permissions != current.permissions
        settings_changed = new_policy.model_dump(
            exclude={"permissions"}
        ) != current.model_dump(exclude={"permissions"})
        if settings_changed or not matrix_changed:
            require(access, Capability.MANAGE_SETTINGS)

        if (
            new_policy.community_ranks != current.community_ranks
            or new_policy.auth.community_rank_to_group
            != current.auth.community_rank_to_group
        ):
            require(access, Capability.MANAGE_RANKS)

        if matrix_changed:
            require(access, Capability.MANAGE_PERMISSIONS)
            if access.group is not PermissionGroup.HEAD_ADMINISTRATION:
                logger.warning(
                    "permission_matrix_denied account_id=%s group=%s",
                    access.account_id,
                    access.group.value,
                )
                raise CapabilityError(
                    "Only Head Administration can change the permission matrix",
                    details={
                        "capability": Capability.MANAGE_PERMISSIONS.value,
                        "group": access.group.value,
                    },
                )

        await uow.policies.save_policy(new_policy)
        await AuditService(uow.audit).log_update(
            "policy",
            POLICY_ENTITY_ID,
            current.model_dump(mode="json"),
            new_policy.model_dump(mode="json"),
            actor_id=actor_id,
        )
        await uow.commit()
    except AppError:
        await uow.rollback()
        raise
    except Exception:
        await uow.rollback()
        raise

    logger.info("operation=policy:update actor_id=%s", actor_id)
    return new_policy
