"""Audit log listing service."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import ValidationError
from workforce_api.models.dto.audit import AuditLogResponse
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.orm.audit_log import AuditLogORM
from workforce_api.repositories.audit_repository import AuditRepository
from workforce_api.repositories.user_repository import UserRepository
from workforce_api.utils.query import ListQuery


def _parse_datetime(key: str, raw: str | None) -> datetime | None:
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid value for filter '{key}'") from e


class AuditLogService:
    """Read access to the audit log."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = AuditRepository(session)
        self.user_repo = UserRepository(session)

    async def list_entries(self, query: ListQuery) -> PaginatedResponse[AuditLogResponse]:
        """List entries newest first with the actor's email.

        Filters are exact matches on entity, entity_id, action and
        actor_id, plus ``date_from``/``date_to`` bounds on created_at.
        """
        stmt = self.repo.base_query()
        date_from = _parse_datetime("date_from", query.pop_filter("date_from"))
        date_to = _parse_datetime("date_to", query.pop_filter("date_to"))
        if date_from is not None:
            stmt = stmt.where(AuditLogORM.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(AuditLogORM.created_at <= date_to)

        entries, total = await self.repo.list(query, stmt)

        actor_ids = {entry.actor_id for entry in entries if entry.actor_id}
        emails = await self.user_repo.get_emails_by_ids(actor_ids)

        return PaginatedResponse(
            data=[
                AuditLogResponse(
                    id=entry.id,
                    actor_id=entry.actor_id,
                    actor_email=emails.get(entry.actor_id) if entry.actor_id else None,
                    action=entry.action,
                    entity=entry.entity,
                    entity_id=entry.entity_id,
                    old_values=entry.old_values,
                    new_values=entry.new_values,
                    ip_address=entry.ip_address,
                    created_at=entry.created_at,
                )
                for entry in entries
            ],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )
