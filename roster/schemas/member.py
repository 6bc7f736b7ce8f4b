import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.catalog import CommunityRank, RemovalReason, TransferReason
from ..domain.community_number import format_community_id

SENSITIVE_FIELDS: tuple[str, ...] = ("discord_id", "website_link", "teamspeak_uid")


def _strip(value: str | None) -> str:
    return (value or "").strip()


def _optional(value: str | None) -> str | None:
    cleaned = (value or "").strip()
    return cleaned or None


class MemberBase(BaseModel):
    name: str = Field(..., max_length=255)
    unit_number: str = Field("", max_length=50)
    department: str = Field(..., max_length=100)
    department_rank: str = Field("", max_length=100)
    community_rank: CommunityRank
    subdivisions: str = ""
    discord_id: str | None = Field(None, max_length=100)
    website_link: str | None = Field(None, max_length=500)
    teamspeak_uid: str | None = Field(None, max_length=100)

    @field_validator("name", "unit_number", "department", "department_rank", "subdivisions")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        return _strip(value)

    @field_validator(*SENSITIVE_FIELDS)
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return _optional(value)


class MemberCreate(MemberBase):
    # None means the policy's default status.
    status: str | None = None


class MemberUpdate(BaseModel):
    """Partial edit. Only fields that were explicitly set are applied."""

    name: str | None = Field(None, max_length=255)
    unit_number: str | None = Field(None, max_length=50)
    department: str | None = Field(None, max_length=100)
    department_rank: str | None = Field(None, max_length=100)
    community_rank: CommunityRank | None = None
    subdivisions: str | None = None
    status: str | None = None
    discord_id: str | None = Field(None, max_length=100)
    website_link: str | None = Field(None, max_length=500)
    teamspeak_uid: str | None = Field(None, max_length=100)

    @field_validator(*SENSITIVE_FIELDS)
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return _optional(value)


class TransferRequest(BaseModel):
    department: str = Field(..., max_length=100)
    unit_number: str = Field("", max_length=50)
    department_rank: str = Field("", max_length=100)
    community_rank: CommunityRank
    subdivisions: str = ""
    status: str
    reason: TransferReason
    detail: str = ""

    @field_validator("department", "unit_number", "department_rank", "subdivisions", "status")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        return _strip(value)


class DischargeRequest(BaseModel):
    reason: RemovalReason
    # Checked as mandatory by the discharge use case.
    detail: str = ""


class MemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    community_number: str
    community_id: str = ""
    unit_number: str
    department: str
    department_rank: str
    community_rank: CommunityRank
    subdivisions: str
    status: str
    current_month_hours: float
    last_patrol_date: date | None = None
    discord_id: str | None = None
    website_link: str | None = None
    teamspeak_uid: str | None = None
    created_at: datetime

    @classmethod
    def from_record(cls, record, *, prefix: str, show_sensitive: bool = True):
        read = cls.model_validate(record)
        updates: dict = {
            "community_id": format_community_id(prefix, record.community_number)
        }
        if not show_sensitive:
            updates.update({field: None for field in SENSITIVE_FIELDS})
        return read.model_copy(update=updates)


class ArchivedMemberRead(MemberRead):
    discharge_reason: RemovalReason
    discharge_detail: str
    discharge_date: datetime


class RemovalLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    community_number: str
    department: str
    reason: RemovalReason
    detail: str
    actor_id: uuid.UUID | None = None
    created_at: datetime


class TransferLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    community_number: str
    from_department: str
    to_department: str
    reason: TransferReason
    detail: str
    actor_id: uuid.UUID | None = None
    created_at: datetime
