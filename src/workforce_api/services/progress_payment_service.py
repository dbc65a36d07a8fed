"""Progress payment (hakkediş) service.

A progress payment pays a worksite's measured work by quantity times unit
price. Its total is always the sum of its items; items are only added while
the progress payment is a draft.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.constants.permissions import Permissions
from workforce_api.exceptions import NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.domain.workflow import (
    PROGRESS_PAYMENT_TRANSITIONS,
    ProgressPaymentStatus,
    ensure_transition,
)
from workforce_api.models.dto.common import DeletionResult, PaginatedResponse, PaginationMeta
from workforce_api.models.dto.progress_payment import (
    ProgressPaymentCreate,
    ProgressPaymentDetailResponse,
    ProgressPaymentItemCreate,
    ProgressPaymentItemResponse,
    ProgressPaymentResponse,
    ProgressPaymentUpdate,
)
from workforce_api.models.orm.progress_payment import ProgressPaymentORM
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.progress_payment_repository import (
    ProgressPaymentItemRepository,
    ProgressPaymentRepository,
)
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.security.auth import ensure_worksite_access
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

_STATUS_ACTIONS = {
    ProgressPaymentStatus.SUBMITTED: AuditAction.SUBMIT,
    ProgressPaymentStatus.APPROVED: AuditAction.APPROVE,
    ProgressPaymentStatus.DRAFT: AuditAction.REOPEN,
}


class ProgressPaymentService:
    """Service for progress payments and their items."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = ProgressPaymentRepository(session)
        self.item_repo = ProgressPaymentItemRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, progress_payment_id: UUID) -> ProgressPaymentORM:
        progress_payment = await self.repo.get_with_items(progress_payment_id)
        if progress_payment is None:
            raise NotFoundError("ProgressPayment", progress_payment_id)
        return progress_payment

    async def list_progress_payments(self, query: ListQuery) -> PaginatedResponse[ProgressPaymentResponse]:
        """List progress payments.

        Filters: worksite_id, period, status.
        """
        progress_payments, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[ProgressPaymentResponse.model_validate(p) for p in progress_payments],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_progress_payment(self, progress_payment_id: UUID) -> ProgressPaymentDetailResponse:
        return ProgressPaymentDetailResponse.model_validate(await self._get(progress_payment_id))

    async def create_progress_payment(
        self,
        data: ProgressPaymentCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> ProgressPaymentDetailResponse:
        """Open a draft progress payment for a worksite.

        Raises:
            NotFoundError: Unknown worksite
            PermissionDeniedError: The user cannot create on the worksite
        """
        ensure_worksite_access(current_user, Permissions.PROGRESS_PAYMENTS_CREATE, data.worksite_id)
        if await self.worksite_repo.get(data.worksite_id) is None:
            raise NotFoundError("Worksite", data.worksite_id)

        progress_payment = await self.repo.create(
            **data.model_dump(),
            status=ProgressPaymentStatus.DRAFT.value,
            total_amount=Decimal("0"),
            created_by=current_user.id,
        )
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.PROGRESS_PAYMENT,
            entity_id=progress_payment.id,
            actor_id=current_user.id,
            new_values=data.model_dump(),
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Created progress payment {progress_payment.id} for worksite {data.worksite_id}")
        return ProgressPaymentDetailResponse.model_validate(await self._get(progress_payment.id))

    async def update_progress_payment(
        self,
        progress_payment_id: UUID,
        data: ProgressPaymentUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> ProgressPaymentDetailResponse:
        """Change period, notes or status.

        Approval additionally needs ``progress_payments.approve`` on the
        worksite. An approved progress payment is final.

        Raises:
            InvalidStateTransitionError: The status cannot be reached
            ValidationError: The progress payment is already approved
        """
        progress_payment = await self._get(progress_payment_id)
        ensure_worksite_access(
            current_user, Permissions.PROGRESS_PAYMENTS_EDIT, progress_payment.worksite_id
        )
        changes = data.model_dump(exclude_unset=True)
        target = changes.pop("status", None)

        if progress_payment.status == ProgressPaymentStatus.APPROVED.value and changes:
            raise ValidationError("An approved progress payment cannot be changed")

        before = snapshot(progress_payment, fields=["period", "status", "notes"])
        for field, value in changes.items():
            setattr(progress_payment, field, value)

        action = AuditAction.UPDATE
        if target is not None and target != progress_payment.status:
            if target == ProgressPaymentStatus.APPROVED:
                ensure_worksite_access(
                    current_user, Permissions.PROGRESS_PAYMENTS_APPROVE, progress_payment.worksite_id
                )
            ensure_transition(
                "ProgressPayment", PROGRESS_PAYMENT_TRANSITIONS, progress_payment.status, target
            )
            progress_payment.status = target.value
            action = _STATUS_ACTIONS[target]

        await self.session.flush()
        await self.audit_service.log_entity_change(
            action=action,
            entity=EntityType.PROGRESS_PAYMENT,
            entity_id=progress_payment_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(progress_payment, fields=["period", "status", "notes"]),
        )
        await self.session.commit()
        return ProgressPaymentDetailResponse.model_validate(await self._get(progress_payment_id))

    async def add_item(
        self,
        progress_payment_id: UUID,
        data: ProgressPaymentItemCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> ProgressPaymentItemResponse:
        """Add a measured work item and recompute the progress payment total.

        The item total is quantity times unit price; the header total is the
        sum of item totals rounded to the cent.

        Raises:
            NotFoundError: Unknown progress payment or employee
            ValidationError: The progress payment is not a draft
        """
        progress_payment = await self._get(progress_payment_id)
        ensure_worksite_access(
            current_user, Permissions.PROGRESS_PAYMENTS_EDIT, progress_payment.worksite_id
        )
        if progress_payment.status != ProgressPaymentStatus.DRAFT.value:
            raise ValidationError("Items can only be added to a draft progress payment")
        if data.employee_id is not None:
            employee = await self.employee_repo.get(data.employee_id)
            if employee is None or employee.deleted_at is not None:
                raise NotFoundError("Employee", data.employee_id)

        total = (data.quantity * data.unit_price).quantize(CENT, rounding=ROUND_HALF_UP)
        item = await self.item_repo.create(
            progress_payment_id=progress_payment_id,
            total_amount=total,
            **data.model_dump(),
        )
        progress_payment.total_amount = (await self.item_repo.sum_for(progress_payment_id)).quantize(
            CENT, rounding=ROUND_HALF_UP
        )
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.ADD_ITEM,
            entity=EntityType.PROGRESS_PAYMENT,
            entity_id=progress_payment_id,
            actor_id=current_user.id,
            new_values={"item_id": item.id, "work_item": data.work_item, "total_amount": total},
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Progress payment {progress_payment_id} total is now {progress_payment.total_amount}")

        refreshed = await self._get(progress_payment_id)
        return ProgressPaymentItemResponse.model_validate(
            next(i for i in refreshed.items if i.id == item.id)
        )

    async def delete_progress_payment(
        self,
        progress_payment_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DeletionResult:
        """Delete a draft progress payment together with its items.

        Raises:
            ValidationError: The progress payment is not a draft
        """
        progress_payment = await self._get(progress_payment_id)
        ensure_worksite_access(
            current_user, Permissions.PROGRESS_PAYMENTS_DELETE, progress_payment.worksite_id
        )
        if progress_payment.status != ProgressPaymentStatus.DRAFT.value:
            raise ValidationError("Only draft progress payments can be deleted")

        before = snapshot(progress_payment)
        before["item_count"] = len(progress_payment.items)
        await self.session.delete(progress_payment)
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.PROGRESS_PAYMENT,
            entity_id=progress_payment_id,
            actor_id=current_user.id,
            old_values=before,
            request=http_request,
        )
        await self.session.commit()
        return DeletionResult(id=str(progress_payment_id), deleted=True, deactivated=False)
