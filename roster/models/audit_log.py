import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, JSON, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from .base import Base, utcnow

ACTOR_TYPES = frozenset({"account", "system"})


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    actor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    actor_type: Mapped[str] = mapped_column(String(50), nullable=False)
    action: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )  # e.g. 'account.update', 'policy.update'
    entity_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    before: Mapped[dict | None] = mapped_column(JSON)
    after: Mapped[dict | None] = mapped_column(JSON)
    reason: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "actor_type IN ('account', 'system')",
            name="valid_actor_type",
        ),
    )

    @validates("actor_type")
    def validate_actor_type(self, key: str, value: str) -> str:
        if value not in ACTOR_TYPES:
            raise ValueError(
                f"Invalid actor_type '{value}'. "
                f"Must be one of: {', '.join(sorted(ACTOR_TYPES))}"
            )
        return value
