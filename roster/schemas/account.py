import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..domain.catalog import Capability, CommunityRank, PermissionGroup


class AccountCreate(BaseModel):
    email: str = Field(..., max_length=255)
    password: str
    display_name: str | None = Field(None, max_length=255)
    linked_community_number: str | None = Field(None, max_length=4)
    role_override: PermissionGroup | None = None


class AccountUpdate(BaseModel):
    """
    Partial account update.

    A field left out is untouched; a field explicitly set to None clears the
    link or the override.
    """

    display_name: str | None = Field(None, max_length=255)
    enabled: bool | None = None
    linked_community_number: str | None = Field(None, max_length=4)
    role_override: PermissionGroup | None = None


class AccountRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    display_name: str
    enabled: bool
    linked_community_number: str | None = None
    role_override: PermissionGroup | None = None
    created_at: datetime
    last_login_at: datetime | None = None


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str
    display_name: str | None = Field(None, max_length=255)
    invite_code: str = ""


class IssuedSession(BaseModel):
    token: str
    account: AccountRead


class AccessRead(BaseModel):
    account_id: uuid.UUID | None = None
    authenticated: bool
    group: PermissionGroup
    capabilities: list[Capability]
    rank_ceiling: int | None
    assignable_ranks: list[CommunityRank]


class AccountSummary(AccountRead):
    effective_group: PermissionGroup
