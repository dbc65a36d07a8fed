"""Site transfer service."""

import logging
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.domain.workflow import TRANSFER_TRANSITIONS, TransferStatus, ensure_transition
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.dto.operations import TransferCreate, TransferDecision, TransferResponse
from workforce_api.models.orm.base import utcnow
from workforce_api.models.orm.transfer import EmployeeSiteTransferORM
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.transfer_repository import TransferRepository
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

_DECISION_ACTIONS = {
    TransferStatus.APPROVED: AuditAction.APPROVE,
    TransferStatus.REJECTED: AuditAction.REJECT,
    TransferStatus.CANCELLED: AuditAction.CANCEL,
    TransferStatus.COMPLETED: AuditAction.COMPLETE,
}


class TransferService:
    """Service for moving employees between worksites."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = TransferRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, transfer_id: UUID) -> EmployeeSiteTransferORM:
        transfer = await self.repo.get_full(transfer_id)
        if transfer is None:
            raise NotFoundError("Transfer", transfer_id)
        return transfer

    async def list_transfers(self, query: ListQuery) -> PaginatedResponse[TransferResponse]:
        transfers, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[TransferResponse.model_validate(t) for t in transfers],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_transfer(self, transfer_id: UUID) -> TransferResponse:
        return TransferResponse.model_validate(await self._get(transfer_id))

    async def create_transfer(
        self,
        data: TransferCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> TransferResponse:
        """Request a transfer from the employee's current worksite.

        Raises:
            NotFoundError: Unknown employee or target worksite
            ValidationError: Target is the current worksite or inactive
        """
        employee = await self.employee_repo.get(data.employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", data.employee_id)
        target = await self.worksite_repo.get(data.to_worksite_id)
        if target is None:
            raise NotFoundError("Worksite", data.to_worksite_id)
        if not target.is_active:
            raise ValidationError(f"Worksite {target.code} is inactive")

        employment = await self.employee_repo.get_section(data.employee_id, "employment")
        from_worksite_id = employment.worksite_id if employment is not None else None
        if from_worksite_id == data.to_worksite_id:
            raise ValidationError("Employee already works at the target worksite")

        transfer = await self.repo.create(
            **data.model_dump(),
            from_worksite_id=from_worksite_id,
            status=TransferStatus.PENDING.value,
            requested_by=current_user.id,
        )
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.TRANSFER,
            entity_id=transfer.id,
            actor_id=current_user.id,
            new_values={**data.model_dump(), "from_worksite_id": from_worksite_id},
            request=http_request,
        )
        await self.session.commit()
        return TransferResponse.model_validate(await self._get(transfer.id))

    async def _move(self, transfer: EmployeeSiteTransferORM, target: TransferStatus) -> None:
        """Apply one status step; completion moves the employment."""
        ensure_transition("Transfer", TRANSFER_TRANSITIONS, transfer.status, target)
        transfer.status = target.value
        if target == TransferStatus.COMPLETED:
            await self.employee_repo.move_to_worksite(
                transfer.employee_id, transfer.to_worksite_id, transfer.transfer_date
            )
            transfer.completed_at = utcnow()
            logger.info(f"Transfer {transfer.id} completed")

    async def decide(
        self,
        transfer_id: UUID,
        decision: TransferDecision,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> TransferResponse:
        """Move a transfer to a new status.

        With ``auto_complete`` an approval also completes the transfer in the
        same transaction.

        Raises:
            InvalidStateTransitionError: The transfer cannot reach the status
        """
        transfer = await self._get(transfer_id)
        previous = transfer.status

        await self._move(transfer, decision.status)
        if decision.status == TransferStatus.APPROVED:
            transfer.approved_by = current_user.id
            transfer.approved_at = utcnow()
            if decision.auto_complete:
                await self._move(transfer, TransferStatus.COMPLETED)
        await self.session.flush()

        await self.audit_service.log(
            action=_DECISION_ACTIONS[TransferStatus(transfer.status)],
            entity=EntityType.TRANSFER,
            entity_id=transfer_id,
            actor_id=current_user.id,
            old_values={"status": previous},
            new_values={"status": transfer.status},
            request=http_request,
        )
        await self.session.commit()
        return TransferResponse.model_validate(await self._get(transfer_id))
