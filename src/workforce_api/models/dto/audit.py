"""Audit log DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    """Audit log entry response."""

    id: UUID
    actor_id: UUID | None = None
    actor_email: str | None = None
    action: str
    entity: str
    entity_id: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime
