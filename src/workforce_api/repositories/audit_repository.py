"""Audit log repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, select

from workforce_api.models.orm.audit_log import AuditLogORM
from workforce_api.repositories.base import BaseRepository


class AuditRepository(BaseRepository[AuditLogORM]):
    """Repository for audit log operations."""

    model = AuditLogORM
    search_columns = ("entity", "entity_id", "action")

    def base_query(self) -> Select:
        return select(AuditLogORM)

    async def log(
        self,
        action: str,
        entity: str,
        entity_id: str | None = None,
        actor_id: UUID | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLogORM:
        """Create an audit log entry.

        Args:
            action: Action verb (CREATE, UPDATE, ...)
            entity: Type of entity affected
            entity_id: ID of affected entity
            actor_id: User who performed the action
            old_values: Snapshot before the change
            new_values: Snapshot after the change
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Created AuditLogORM
        """
        entry = AuditLogORM(
            action=action,
            entity=entity,
            entity_id=entity_id,
            actor_id=actor_id,
            old_values=old_values,
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete entries created before a cutoff; returns the row count."""
        result = await self.session.execute(
            delete(AuditLogORM).where(AuditLogORM.created_at < cutoff)
        )
        return result.rowcount or 0
