"""
Roster service - the in-process API of the roster.

Every public method returns an OperationResult. Domain errors come back as
typed failures (code, message, details, status), unexpected store failures
as INTERNAL_ERROR; nothing is raised past this class, and the use case has
already rolled back whatever it had written.

Lifecycle transitions on the same community number are serialized through
MemberLocks. Member creation serializes on a shared issuance key. When the
store hands every session the same connection (in-memory SQLite), sessions
also share one transaction, so an exclusive service runs one operation at a
time.
"""
import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable, Mapping
from contextlib import AsyncExitStack
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ..config import Settings, get_settings
from ..domain.policy import RosterPolicy
from ..domain.ports.roster import RosterUnitOfWorkFactory
from ..errors import AppError, InternalError
from ..schemas.account import (
    AccessRead,
    AccountCreate,
    AccountRead,
    AccountUpdate,
    RegisterRequest,
)
from ..schemas.listing import MemberFilter
from ..schemas.member import (
    ArchivedMemberRead,
    DischargeRequest,
    MemberCreate,
    MemberRead,
    MemberUpdate,
    TransferRequest,
)
from ..schemas.result import OperationResult
from ..use_cases.accounts.manage_accounts import (
    create_account,
    delete_account,
    list_accounts,
    set_password,
    update_account,
)
from ..use_cases.auth.current_account import current_account
from ..use_cases.auth.login_user import login_user
from ..use_cases.auth.logout_user import logout_user
from ..use_cases.auth.register_user import register_user
from ..use_cases.bootstrap import bootstrap_roster
from ..use_cases.members.activity import record_hours, run_activity_check
from ..use_cases.members.add_member import add_member
from ..use_cases.members.discharge_member import discharge_member
from ..use_cases.members.edit_member import edit_member
from ..use_cases.members.listing import (
    list_archive,
    list_members,
    list_removal_logs,
    list_transfer_logs,
)
from ..use_cases.members.restore_member import restore_member
from ..use_cases.members.transfer_member import transfer_member
from ..use_cases.settings.manage_policy import get_policy, update_policy
from .access_service import load_access
from .locks import ISSUE_KEY, MemberLocks

logger = logging.getLogger(__name__)

ActorId = uuid.UUID | None


class RosterService:
    def __init__(
        self,
        uow_factory: RosterUnitOfWorkFactory,
        *,
        settings: Settings | None = None,
        locks: MemberLocks | None = None,
        exclusive: bool = False,
    ) -> None:
        self.uow_factory = uow_factory
        self.settings = settings or get_settings()
        self.locks = locks or MemberLocks()
        self._store_lock = asyncio.Lock() if exclusive else None

    @property
    def prefix(self) -> str:
        return self.settings.community_id_prefix

    async def _run(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        *,
        lock_key: str | None = None,
    ) -> OperationResult:
        try:
            async with AsyncExitStack() as stack:
                if lock_key is not None:
                    await stack.enter_async_context(self.locks.hold(lock_key))
                if self._store_lock is not None:
                    await stack.enter_async_context(self._store_lock)
                data = await call()
        except AppError as exc:
            logger.info(
                "operation_rejected operation=%s code=%s status=%s",
                operation,
                exc.code,
                exc.status_code,
            )
            return OperationResult.failure(exc)
        except SQLAlchemyError:
            logger.exception("operation_failed operation=%s", operation)
            return OperationResult.failure(InternalError())
        return OperationResult.success(data)

    def _member(self, record) -> MemberRead:
        return MemberRead.from_record(record, prefix=self.prefix)

    # Auth

    async def login(self, email: str, password: str) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await login_user(uow, email, password)

        return await self._run("auth:login", call)

    async def logout(self, token: str | None) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await logout_user(uow, token)

        return await self._run("auth:logout", call)

    async def register(self, payload: RegisterRequest) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await register_user(uow, payload)

        return await self._run("auth:register", call)

    async def current_account(self, token: str | None) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                account = await current_account(uow, token)
                return AccountRead.model_validate(account) if account else None

        return await self._run("auth:current", call)

    async def access_for(self, actor_id: ActorId) -> OperationResult:
        """Effective group, capabilities, ceiling and assignable ranks."""

        async def call():
            async with self.uow_factory() as uow:
                policy = await uow.policies.load_policy()
                access = await load_access(uow, actor_id, policy)
                return AccessRead(
                    account_id=access.account_id,
                    authenticated=access.is_authenticated,
                    group=access.group,
                    capabilities=sorted(access.capabilities, key=lambda c: c.value),
                    rank_ceiling=access.rank_ceiling,
                    assignable_ranks=access.assignable_ranks(policy),
                )

        return await self._run("auth:access", call)

    # Lifecycle

    async def add_member(self, actor_id: ActorId, payload: MemberCreate) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                member = await add_member(
                    uow,
                    actor_id,
                    payload,
                    max_attempts=self.settings.community_number_max_attempts,
                )
                return self._member(member)

        return await self._run("member:add", call, lock_key=ISSUE_KEY)

    async def edit_member(
        self, actor_id: ActorId, community_number: str, payload: MemberUpdate
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                member = await edit_member(uow, actor_id, community_number, payload)
                return self._member(member)

        return await self._run("member:edit", call, lock_key=community_number)

    async def transfer_member(
        self, actor_id: ActorId, community_number: str, payload: TransferRequest
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                member = await transfer_member(uow, actor_id, community_number, payload)
                return self._member(member)

        return await self._run("member:transfer", call, lock_key=community_number)

    async def discharge_member(
        self, actor_id: ActorId, community_number: str, payload: DischargeRequest
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                archived = await discharge_member(uow, actor_id, community_number, payload)
                return ArchivedMemberRead.from_record(archived, prefix=self.prefix)

        return await self._run("member:discharge", call, lock_key=community_number)

    async def restore_member(self, actor_id: ActorId, community_number: str) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                member = await restore_member(uow, actor_id, community_number)
                return self._member(member)

        return await self._run("member:restore", call, lock_key=community_number)

    # Activity

    async def record_hours(
        self, actor_id: ActorId, hours_by_number: Mapping[str, float]
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await record_hours(uow, actor_id, hours_by_number)

        return await self._run("activity:record-hours", call)

    async def run_activity_check(self, actor_id: ActorId) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await run_activity_check(uow, actor_id)

        return await self._run("activity:check", call)

    # Read models

    async def list_members(
        self, actor_id: ActorId, query: MemberFilter | None = None
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await list_members(uow, actor_id, query, prefix=self.prefix)

        return await self._run("member:list", call)

    async def list_archive(self, actor_id: ActorId, search: str = "") -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await list_archive(uow, actor_id, prefix=self.prefix, search=search)

        return await self._run("archive:list", call)

    async def list_removal_logs(self, actor_id: ActorId, limit: int = 100) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await list_removal_logs(uow, actor_id, limit)

        return await self._run("logs:removals", call)

    async def list_transfer_logs(self, actor_id: ActorId, limit: int = 100) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await list_transfer_logs(uow, actor_id, limit)

        return await self._run("logs:transfers", call)

    # Accounts

    async def list_accounts(self, actor_id: ActorId) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await list_accounts(uow, actor_id)

        return await self._run("account:list", call)

    async def create_account(self, actor_id: ActorId, payload: AccountCreate) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                account = await create_account(uow, actor_id, payload)
                return AccountRead.model_validate(account)

        return await self._run("account:create", call)

    async def set_password(
        self, actor_id: ActorId, account_id: uuid.UUID, new_password: str
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                await set_password(uow, actor_id, account_id, new_password)

        return await self._run("account:set-password", call)

    async def update_account(
        self, actor_id: ActorId, account_id: uuid.UUID, payload: AccountUpdate
    ) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                account = await update_account(uow, actor_id, account_id, payload)
                return AccountRead.model_validate(account)

        return await self._run("account:update", call)

    async def delete_account(self, actor_id: ActorId, account_id: uuid.UUID) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                await delete_account(uow, actor_id, account_id)

        return await self._run("account:delete", call)

    # Policy

    async def get_policy(self) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await get_policy(uow)

        return await self._run("policy:get", call)

    async def update_policy(self, actor_id: ActorId, policy: RosterPolicy) -> OperationResult:
        async def call():
            async with self.uow_factory() as uow:
                return await update_policy(uow, actor_id, policy)

        return await self._run("policy:update", call)

    async def bootstrap(self) -> OperationResult:
        """Seed the director when BOOTSTRAP_DIRECTOR_PASSWORD is configured."""
        password = self.settings.bootstrap_director_password

        async def call():
            if not password:
                return None
            async with self.uow_factory() as uow:
                account = await bootstrap_roster(
                    uow,
                    email=self.settings.bootstrap_director_email,
                    password=password,
                    community_number=self.settings.bootstrap_community_number,
                )
                return AccountRead.model_validate(account) if account else None

        return await self._run("bootstrap", call)
