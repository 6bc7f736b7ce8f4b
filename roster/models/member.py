import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class MemberFieldsMixin:
    """Columns shared by active and archived roster records."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    community_number: Mapped[str] = mapped_column(
        String(4), unique=True, nullable=False, index=True
    )  # immutable once issued
    unit_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    department: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    department_rank: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    community_rank: Mapped[str] = mapped_column(String(50), nullable=False)
    subdivisions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    current_month_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_patrol_date: Mapped[date | None] = mapped_column(Date)
    # Sensitive contact fields
    discord_id: Mapped[str | None] = mapped_column(String(100))
    website_link: Mapped[str | None] = mapped_column(String(500))
    teamspeak_uid: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


MEMBER_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "community_number",
    "unit_number",
    "department",
    "department_rank",
    "community_rank",
    "subdivisions",
    "status",
    "current_month_hours",
    "last_patrol_date",
    "discord_id",
    "website_link",
    "teamspeak_uid",
    "created_at",
)

DISCHARGE_FIELDS: tuple[str, ...] = (
    "discharge_reason",
    "discharge_detail",
    "discharge_date",
)


class Member(MemberFieldsMixin, Base):
    __tablename__ = "members"


class ArchivedMember(MemberFieldsMixin, Base):
    __tablename__ = "archived_members"

    discharge_reason: Mapped[str] = mapped_column(String(50), nullable=False)
    discharge_detail: Mapped[str] = mapped_column(Text, nullable=False)
    discharge_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


def archive_record(
    member: Member,
    *,
    reason: str,
    detail: str,
    discharge_date: datetime | None = None,
) -> ArchivedMember:
    """Snapshot a member into an archive record carrying the discharge fields."""
    return ArchivedMember(
        **{field: getattr(member, field) for field in MEMBER_FIELDS},
        discharge_reason=reason,
        discharge_detail=detail,
        discharge_date=discharge_date or utcnow(),
    )


def restore_record(archived: ArchivedMember) -> Member:
    """Rebuild the active member by stripping the discharge fields."""
    return Member(**{field: getattr(archived, field) for field in MEMBER_FIELDS})
