import uuid
from typing import Any

from ..domain.ports.roster import AuditPort
from ..models.audit_log import ACTOR_TYPES, AuditLog


class AuditService:
    """Writes audit rows inside the caller's transaction."""

    def __init__(self, audit_port: AuditPort):
        self.audit_port = audit_port

    def _validate_actor_type(self, actor_type: str) -> None:
        if actor_type not in ACTOR_TYPES:
            raise ValueError(
                f"Invalid actor_type '{actor_type}'. "
                f"Must be one of: {', '.join(sorted(ACTOR_TYPES))}"
            )

    async def log(
        self,
        action: str,
        entity_type: str,
        entity_id: str | uuid.UUID,
        actor_id: uuid.UUID | None = None,
        actor_type: str = "account",
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
        reason: str | None = None,
    ) -> AuditLog:
        """
        Append an audit event.

        Args:
            action: The action performed (e.g. 'account.update')
            entity_type: The type of entity (e.g. 'account', 'policy')
            entity_id: The ID of the entity
            actor_id: The acting account, None for system actions
            actor_type: 'account' or 'system'
            before: State before the change
            after: State after the change
            reason: Optional reason for the change

        Raises:
            ValueError: If actor_type is invalid
        """
        self._validate_actor_type(actor_type)
        return await self.audit_port.create(
            AuditLog(
                actor_id=actor_id,
                actor_type=actor_type,
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id),
                before=before,
                after=after,
                reason=reason,
            )
        )

    async def log_create(
        self,
        entity_type: str,
        entity_id: str | uuid.UUID,
        entity_data: dict[str, Any],
        actor_id: uuid.UUID | None = None,
        actor_type: str = "account",
    ) -> AuditLog:
        return await self.log(
            action=f"{entity_type}.create",
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            actor_type=actor_type,
            after=entity_data,
        )

    async def log_update(
        self,
        entity_type: str,
        entity_id: str | uuid.UUID,
        before_data: dict[str, Any],
        after_data: dict[str, Any],
        actor_id: uuid.UUID | None = None,
        actor_type: str = "account",
    ) -> AuditLog:
        return await self.log(
            action=f"{entity_type}.update",
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            actor_type=actor_type,
            before=before_data,
            after=after_data,
        )

    async def log_delete(
        self,
        entity_type: str,
        entity_id: str | uuid.UUID,
        entity_data: dict[str, Any],
        actor_id: uuid.UUID | None = None,
    ) -> AuditLog:
        return await self.log(
            action=f"{entity_type}.delete",
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            before=entity_data,
        )
