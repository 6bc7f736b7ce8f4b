import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.policy import RosterPolicy
from ..models.setting import SettingEntry

logger = logging.getLogger(__name__)

POLICY_KEY = "roster_policy"


class PolicyRepository:
    """Settings collection holding the roster policy document."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_policy(self) -> RosterPolicy:
        entry = await self.session.get(SettingEntry, POLICY_KEY)
        if entry is None:
            return RosterPolicy()
        return RosterPolicy.model_validate(entry.value)

    async def save_policy(self, policy: RosterPolicy) -> None:
        value = policy.model_dump(mode="json")
        entry = await self.session.get(SettingEntry, POLICY_KEY)
        if entry is None:
            self.session.add(SettingEntry(key=POLICY_KEY, value=value))
        else:
            entry.value = value
        await self.session.flush()
        logger.info("operation=policy:save key=%s", POLICY_KEY)
