"""
Access loading and capability enforcement.

The resolver is pure; this module feeds it. Every call re-reads the account,
its linked active member and the policy, so a disabled account or a changed
rank mapping takes effect on the very next operation.
"""
import logging
import uuid

from ..auth.resolver import AccessContext, resolve_access
from ..domain.catalog import Capability
from ..domain.policy import RosterPolicy
from ..domain.ports.roster import RosterUnitOfWork
from ..errors import CapabilityError

logger = logging.getLogger(__name__)


async def load_access(
    uow: RosterUnitOfWork,
    account_id: uuid.UUID | None,
    policy: RosterPolicy | None = None,
) -> AccessContext:
    if policy is None:
        policy = await uow.policies.load_policy()
    account = await uow.accounts.get_by_id(account_id) if account_id else None
    linked_member = None
    if account is not None and account.linked_community_number:
        linked_member = await uow.members.get(account.linked_community_number)
    return resolve_access(account, linked_member, policy)


def require(access: AccessContext, capability: Capability) -> None:
    if not access.can(capability):
        logger.warning(
            "capability_denied account_id=%s group=%s capability=%s",
            access.account_id,
            access.group.value,
            capability.value,
        )
        raise CapabilityError(
            f"Missing capability: {capability.value}",
            details={"capability": capability.value, "group": access.group.value},
        )
