"""Leave request service."""

from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import ConflictError, NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.domain.workflow import LEAVE_TRANSITIONS, LeaveStatus, ensure_transition
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.dto.operations import LeaveDecision, LeaveRequestCreate, LeaveRequestResponse
from workforce_api.models.orm.base import utcnow
from workforce_api.models.orm.leave import LeaveRequestORM
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.leave_repository import LeaveRequestRepository
from workforce_api.repositories.reference_repository import LeaveTypeRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType
from workforce_api.utils.dates import inclusive_days
from workforce_api.utils.query import ListQuery

_DECISION_ACTIONS = {
    LeaveStatus.APPROVED: AuditAction.APPROVE,
    LeaveStatus.REJECTED: AuditAction.REJECT,
    LeaveStatus.CANCELLED: AuditAction.CANCEL,
}


class LeaveService:
    """Service for leave requests."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = LeaveRequestRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.leave_type_repo = LeaveTypeRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, leave_id: UUID) -> LeaveRequestORM:
        leave = await self.repo.get_full(leave_id)
        if leave is None:
            raise NotFoundError("Leave request", leave_id)
        return leave

    async def list_leaves(self, query: ListQuery) -> PaginatedResponse[LeaveRequestResponse]:
        leaves, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[LeaveRequestResponse.model_validate(leave) for leave in leaves],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_leave(self, leave_id: UUID) -> LeaveRequestResponse:
        return LeaveRequestResponse.model_validate(await self._get(leave_id))

    async def create_leave(
        self,
        data: LeaveRequestCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> LeaveRequestResponse:
        """File a PENDING leave request.

        Raises:
            NotFoundError: Unknown employee or leave type
            ConflictError: Overlaps a pending or approved leave of the employee
        """
        employee = await self.employee_repo.get(data.employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", data.employee_id)
        leave_type = await self.leave_type_repo.get(data.leave_type_id)
        if leave_type is None:
            raise NotFoundError("Leave type", data.leave_type_id)
        if not leave_type.is_active:
            raise ValidationError(f"Leave type {leave_type.code} is inactive")
        if await self.repo.has_overlap(data.employee_id, data.start_date, data.end_date):
            raise ConflictError("Leave overlaps an existing request")

        days = inclusive_days(data.start_date, data.end_date)
        leave = await self.repo.create(
            **data.model_dump(),
            days=days,
            status=LeaveStatus.PENDING.value,
        )
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.LEAVE_REQUEST,
            entity_id=leave.id,
            actor_id=current_user.id,
            new_values={**data.model_dump(), "days": days},
            request=http_request,
        )
        await self.session.commit()
        return LeaveRequestResponse.model_validate(await self._get(leave.id))

    async def decide(
        self,
        leave_id: UUID,
        decision: LeaveDecision,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> LeaveRequestResponse:
        """Approve, reject or cancel a leave request.

        Raises:
            InvalidStateTransitionError: The request cannot reach the status
        """
        leave = await self._get(leave_id)
        previous = leave.status
        ensure_transition("Leave request", LEAVE_TRANSITIONS, previous, decision.status)

        leave.status = decision.status.value
        leave.decided_by = current_user.id
        leave.decided_at = utcnow()
        if decision.status == LeaveStatus.REJECTED:
            leave.rejection_reason = decision.rejection_reason
        await self.session.flush()

        await self.audit_service.log(
            action=_DECISION_ACTIONS.get(decision.status, AuditAction.UPDATE),
            entity=EntityType.LEAVE_REQUEST,
            entity_id=leave_id,
            actor_id=current_user.id,
            old_values={"status": previous},
            new_values={"status": leave.status},
            request=http_request,
        )
        await self.session.commit()
        return LeaveRequestResponse.model_validate(await self._get(leave_id))
