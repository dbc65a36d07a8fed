"""Worksite service."""

from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import ConflictError, NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import DeletionResult, PaginatedResponse, PaginationMeta
from workforce_api.models.dto.worksite import WorksiteCreate, WorksiteResponse, WorksiteUpdate
from workforce_api.models.orm.worksite import WorksiteORM
from workforce_api.repositories.base import RetireOutcome
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.utils.query import ListQuery


class WorksiteService:
    """Service for managing worksites."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = WorksiteRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, worksite_id: UUID) -> WorksiteORM:
        worksite = await self.repo.get(worksite_id)
        if worksite is None:
            raise NotFoundError("Worksite", worksite_id)
        return worksite

    @staticmethod
    def _check_dates(start_date, end_date) -> None:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("end_date must not precede start_date")

    async def list_worksites(self, query: ListQuery) -> PaginatedResponse[WorksiteResponse]:
        worksites, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[WorksiteResponse.model_validate(w) for w in worksites],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_worksite(self, worksite_id: UUID) -> WorksiteResponse:
        return WorksiteResponse.model_validate(await self._get(worksite_id))

    async def create_worksite(
        self,
        data: WorksiteCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> WorksiteResponse:
        """Create a worksite.

        Raises:
            ConflictError: If the code is already in use
            ValidationError: If the date range is inverted
        """
        if await self.repo.get_by_code(data.code) is not None:
            raise ConflictError(f"Worksite code {data.code} already exists")

        self._check_dates(data.start_date, data.end_date)
        values = data.model_dump()
        values["status"] = data.status.value
        worksite = await self.repo.create(**values)

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.WORKSITE,
            entity_id=worksite.id,
            actor_id=current_user.id,
            new_values=snapshot(worksite),
            request=http_request,
        )
        await self.session.commit()
        return WorksiteResponse.model_validate(worksite)

    async def update_worksite(
        self,
        worksite_id: UUID,
        data: WorksiteUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> WorksiteResponse:
        """Apply a partial update to a worksite."""
        worksite = await self._get(worksite_id)
        before = snapshot(worksite)

        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "status" and value is not None:
                value = value.value if hasattr(value, "value") else value
            setattr(worksite, field, value)
        self._check_dates(worksite.start_date, worksite.end_date)

        await self.session.flush()
        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.WORKSITE,
            entity_id=worksite_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(worksite),
        )
        await self.session.commit()
        return WorksiteResponse.model_validate(worksite)

    async def delete_worksite(
        self,
        worksite_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DeletionResult:
        """Delete a worksite nothing points at, otherwise deactivate it."""
        worksite = await self._get(worksite_id)
        before = snapshot(worksite)

        outcome = await self.repo.retire_or_delete(worksite)
        deleted = outcome == RetireOutcome.DELETED

        await self.audit_service.log(
            action=AuditAction.DELETE if deleted else AuditAction.DEACTIVATE,
            entity=EntityType.WORKSITE,
            entity_id=worksite_id,
            actor_id=current_user.id,
            old_values=before,
            new_values=None if deleted else {"is_active": False},
            request=http_request,
        )
        await self.session.commit()
        return DeletionResult(id=str(worksite_id), deleted=deleted, deactivated=not deleted)
