from __future__ import annotations

import uuid
from datetime import datetime
from typing import Protocol


class AccountData(Protocol):
    id: uuid.UUID
    email: str
    display_name: str
    password_hash: str
    enabled: bool
    linked_community_number: str | None
    role_override: str | None
    created_at: datetime
    last_login_at: datetime | None


class SessionData(Protocol):
    account_id: uuid.UUID
    token_hash: str
    created_at: datetime


class AccountPort(Protocol):
    async def get_by_id(self, account_id: uuid.UUID) -> AccountData | None:
        ...

    async def get_by_email(self, email: str) -> AccountData | None:
        ...

    async def list_all(self) -> list[AccountData]:
        ...

    async def list_linked(self, community_number: str) -> list[AccountData]:
        ...

    async def create(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        linked_community_number: str | None = None,
        role_override: str | None = None,
    ) -> AccountData:
        ...

    async def delete(self, account: AccountData) -> None:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...


class SessionPort(Protocol):
    async def issue(self, account_id: uuid.UUID, token_hash: str) -> SessionData:
        ...

    async def get_by_hash(self, token_hash: str) -> SessionData | None:
        ...

    async def revoke(self, token_hash: str) -> bool:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
