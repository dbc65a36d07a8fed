"""Payroll service for runs, items and one-off entries."""

import logging
from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.config import get_settings
from workforce_api.constants.permissions import Permissions
from workforce_api.exceptions import ConflictError, NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.domain.workflow import (
    PAYROLL_CALCULATION_ALLOWED,
    PAYROLL_TRANSITIONS,
    PayrollRunStatus,
    ensure_transition,
)
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.dto.payroll import (
    EntryKind,
    ManualAdjustmentRequest,
    PayrollEntryCreate,
    PayrollEntryResponse,
    PayrollItemResponse,
    PayrollRunCreate,
    PayrollRunDetailResponse,
    PayrollRunResponse,
    PayrollRunUpdate,
)
from workforce_api.models.orm.base import utcnow
from workforce_api.models.orm.payroll import PayrollEntryORM, PayrollItemORM, PayrollRunORM
from workforce_api.repositories.attendance_repository import AttendanceRecordRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.payroll_repository import (
    PayrollEntryRepository,
    PayrollItemRepository,
    PayrollRunRepository,
)
from workforce_api.repositories.reference_repository import (
    DeductionCategoryRepository,
    EarningCategoryRepository,
    PayrollRuleRepository,
)
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.security.auth import ensure_worksite_access
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.services.payroll_calculator import (
    HUNDRED,
    ZERO,
    AttendanceTotals,
    PayrollSettings,
    SalaryTerms,
    calculate_pay,
    net_amount,
    resolve_tax_rate,
)
from workforce_api.utils.dates import month_bounds
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

_RUN_STAMPS = {
    PayrollRunStatus.APPROVED: ("approved_at", AuditAction.APPROVE),
    PayrollRunStatus.PAID: ("paid_at", AuditAction.PAY),
    PayrollRunStatus.LOCKED: ("locked_at", AuditAction.LOCK),
    PayrollRunStatus.CANCELLED: (None, AuditAction.CANCEL),
    PayrollRunStatus.DRAFT: (None, AuditAction.REOPEN),
}


def apply_run_totals(run: PayrollRunORM, items: list[PayrollItemORM]) -> None:
    """Set a run's aggregate totals to the sums over its items."""
    run.employee_count = len(items)
    run.total_gross = sum((item.gross_amount for item in items), ZERO)
    run.total_tax = sum((item.tax_amount for item in items), ZERO)
    run.total_deductions = sum((item.deductions_amount for item in items), ZERO)
    run.total_net = sum((item.net_amount for item in items), ZERO)


class PayrollService:
    """Service for payroll runs."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.run_repo = PayrollRunRepository(session)
        self.item_repo = PayrollItemRepository(session)
        self.entry_repo = PayrollEntryRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.attendance_repo = AttendanceRecordRepository(session)
        self.rule_repo = PayrollRuleRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.earning_repo = EarningCategoryRepository(session)
        self.deduction_repo = DeductionCategoryRepository(session)
        self.audit_service = AuditService(session)

    async def _get_run(self, run_id: UUID) -> PayrollRunORM:
        run = await self.run_repo.get(run_id)
        if run is None:
            raise NotFoundError("Payroll run", run_id)
        return run

    async def _detail(self, run_id: UUID) -> PayrollRunDetailResponse:
        run = await self.run_repo.get_with_items(run_id)
        if run is None:
            raise NotFoundError("Payroll run", run_id)
        detail = PayrollRunDetailResponse.model_validate(run)
        detail.items = sorted(
            detail.items,
            key=lambda item: (item.employee.employee_no if item.employee else "", str(item.employee_id)),
        )
        return detail

    async def _tax_rates(self, period: str) -> dict[str, Decimal]:
        """Percent rate of every payroll rule in force on the first day of a period."""
        start, _ = month_bounds(period)
        versions = await self.rule_repo.get_effective_versions(start)
        return {
            code: version.rate if version.is_percentage else version.rate * HUNDRED
            for code, version in versions.items()
        }

    # =========================================================================
    # Runs
    # =========================================================================

    async def list_runs(self, query: ListQuery) -> PaginatedResponse[PayrollRunResponse]:
        runs, total = await self.run_repo.list(query)
        return PaginatedResponse(
            data=[PayrollRunResponse.model_validate(run) for run in runs],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_run(self, run_id: UUID) -> PayrollRunDetailResponse:
        return await self._detail(run_id)

    async def create_run(
        self,
        request: PayrollRunCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollRunDetailResponse:
        """Create a DRAFT run for a worksite (or all worksites) and month.

        Raises:
            NotFoundError: Unknown worksite
            ConflictError: A non-cancelled run exists for the same scope and month
        """
        if request.worksite_id is not None:
            ensure_worksite_access(current_user, Permissions.PAYROLL_CREATE, request.worksite_id)
            if await self.worksite_repo.get(request.worksite_id) is None:
                raise NotFoundError("Worksite", request.worksite_id)

        existing = await self.run_repo.find_active(request.worksite_id, request.period)
        if existing is not None:
            raise ConflictError(
                f"A payroll run for {request.period} already exists",
                details={"payroll_run_id": str(existing.id), "status": existing.status},
            )

        run = await self.run_repo.create(
            worksite_id=request.worksite_id,
            period=request.period,
            notes=request.notes,
            status=PayrollRunStatus.DRAFT.value,
            created_by=current_user.id,
        )
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.PAYROLL_RUN,
            entity_id=run.id,
            actor_id=current_user.id,
            new_values={"worksite_id": request.worksite_id, "period": request.period},
            request=http_request,
        )
        await self.session.commit()
        return await self._detail(run.id)

    async def update_run(
        self,
        run_id: UUID,
        request: PayrollRunUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollRunDetailResponse:
        run = await self._get_run(run_id)
        before = {"notes": run.notes}
        run.notes = request.notes
        await self.session.flush()
        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.PAYROLL_RUN,
            entity_id=run_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values={"notes": run.notes},
        )
        await self.session.commit()
        return await self._detail(run_id)

    async def calculate(
        self,
        run_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollRunDetailResponse:
        """Compute one item per payable employee and refresh the run totals.

        Items are replaced on every call; manual adjustments are carried over
        to the new items. Running it again on unchanged data gives the same
        figures.

        Raises:
            NotFoundError: Unknown run
            InvalidStateTransitionError: The run is past CALCULATED
        """
        run = await self._get_run(run_id)
        ensure_worksite_access(current_user, Permissions.PAYROLL_EDIT, run.worksite_id)
        ensure_transition("Payroll run", PAYROLL_TRANSITIONS, run.status, PayrollRunStatus.CALCULATED)

        app_settings = get_settings()
        schedule = PayrollSettings(
            working_days_per_month=app_settings.payroll_working_days_per_month,
            working_hours_per_day=app_settings.payroll_working_hours_per_day,
        )
        resident_default = Decimal(str(app_settings.ndfl_resident_rate))
        non_resident_default = Decimal(str(app_settings.ndfl_non_resident_rate))
        rule_rates = await self._tax_rates(run.period)

        start, end = month_bounds(run.period)
        employees = await self.employee_repo.get_payable(run.worksite_id)
        records = await self.attendance_repo.get_in_range(
            start, end, run.worksite_id, [employee.id for employee in employees]
        )
        records_by_employee = defaultdict(list)
        for record in records:
            records_by_employee[record.employee_id].append(record)

        earnings: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
        deductions: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
        for entry in await self.entry_repo.get_for_run(run_id):
            if entry.kind == EntryKind.DEDUCTION:
                deductions[entry.employee_id] += entry.amount
            elif entry.is_approved:
                earnings[entry.employee_id] += entry.amount

        adjustments = await self.item_repo.get_adjustments(run_id)
        await self.item_repo.delete_for_run(run_id)

        items = []
        for employee in employees:
            profile = employee.salary_profile
            tax_rate = resolve_tax_rate(
                profile.tax_status,
                profile.custom_ndfl_rate,
                rule_rates,
                resident_default,
                non_resident_default,
            )
            attendance = AttendanceTotals.from_records(records_by_employee[employee.id])
            adjustment, note = adjustments.get(employee.id, (ZERO, None))
            figures = calculate_pay(
                SalaryTerms.from_profile(profile),
                attendance,
                tax_rate,
                earnings=earnings[employee.id],
                deductions=deductions[employee.id],
                manual_adjustment=adjustment,
                settings=schedule,
            )
            item = PayrollItemORM(
                payroll_run_id=run_id,
                employee_id=employee.id,
                payment_type=profile.payment_type,
                tax_status=profile.tax_status,
                worked_days=attendance.worked_days,
                worked_hours=attendance.worked_hours,
                overtime_hours=attendance.overtime_hours,
                night_hours=attendance.night_hours,
                holiday_hours=attendance.holiday_hours,
                base_amount=figures.base_amount,
                overtime_amount=figures.overtime_amount,
                night_amount=figures.night_amount,
                holiday_amount=figures.holiday_amount,
                earnings_amount=figures.earnings_amount,
                gross_amount=figures.gross_amount,
                tax_rate=figures.tax_rate,
                tax_amount=figures.tax_amount,
                deductions_amount=figures.deductions_amount,
                manual_adjustment=figures.manual_adjustment,
                adjustment_note=note,
                net_amount=figures.net_amount,
            )
            self.session.add(item)
            items.append(item)

        apply_run_totals(run, items)
        previous = run.status
        run.status = PayrollRunStatus.CALCULATED.value
        run.calculated_at = utcnow()
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.CALCULATE,
            entity=EntityType.PAYROLL_RUN,
            entity_id=run_id,
            actor_id=current_user.id,
            old_values={"status": previous},
            new_values={
                "status": run.status,
                "employee_count": run.employee_count,
                "total_gross": run.total_gross,
                "total_tax": run.total_tax,
                "total_net": run.total_net,
            },
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Calculated payroll run {run_id}: {len(items)} items")
        return await self._detail(run_id)

    async def _transition(
        self,
        run_id: UUID,
        target: PayrollRunStatus,
        current_user: CurrentUser,
        http_request: Request | None,
    ) -> PayrollRunDetailResponse:
        run = await self._get_run(run_id)
        permission = Permissions.PAYROLL_EDIT if target == PayrollRunStatus.DRAFT else Permissions.PAYROLL_APPROVE
        ensure_worksite_access(current_user, permission, run.worksite_id)

        previous = run.status
        ensure_transition("Payroll run", PAYROLL_TRANSITIONS, previous, target)
        if target == PayrollRunStatus.APPROVED and not await self.item_repo.get_for_run(run_id):
            raise ValidationError("Cannot approve a payroll run without items")

        stamp, action = _RUN_STAMPS[target]
        run.status = target.value
        if stamp is not None:
            setattr(run, stamp, utcnow())
        if target == PayrollRunStatus.APPROVED:
            run.approved_by = current_user.id
        await self.session.flush()

        await self.audit_service.log(
            action=action,
            entity=EntityType.PAYROLL_RUN,
            entity_id=run_id,
            actor_id=current_user.id,
            old_values={"status": previous},
            new_values={"status": target.value},
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Payroll run {run_id} moved {previous} -> {target.value}")
        return await self._detail(run_id)

    async def approve(self, run_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        """Approve a CALCULATED run; its figures are frozen from here on."""
        return await self._transition(run_id, PayrollRunStatus.APPROVED, current_user, http_request)

    async def mark_paid(self, run_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self._transition(run_id, PayrollRunStatus.PAID, current_user, http_request)

    async def lock(self, run_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self._transition(run_id, PayrollRunStatus.LOCKED, current_user, http_request)

    async def cancel(self, run_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self._transition(run_id, PayrollRunStatus.CANCELLED, current_user, http_request)

    async def reopen(self, run_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        """Send a CALCULATED run back to DRAFT."""
        return await self._transition(run_id, PayrollRunStatus.DRAFT, current_user, http_request)

    # =========================================================================
    # Items
    # =========================================================================

    async def adjust_item(
        self,
        run_id: UUID,
        item_id: UUID,
        request: ManualAdjustmentRequest,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollItemResponse:
        """Set the manual adjustment of one item of a CALCULATED run.

        The item's net and the run totals are recomputed.
        """
        run = await self._get_run(run_id)
        ensure_worksite_access(current_user, Permissions.PAYROLL_EDIT, run.worksite_id)
        if run.status != PayrollRunStatus.CALCULATED:
            raise ValidationError("Manual adjustments are only allowed on CALCULATED payroll runs")

        items = await self.item_repo.get_for_run(run_id)
        item = next((i for i in items if i.id == item_id), None)
        if item is None:
            raise NotFoundError("Payroll item", item_id)

        before = snapshot(item, ("manual_adjustment", "adjustment_note", "net_amount"))
        item.manual_adjustment = request.amount
        item.adjustment_note = request.note
        item.net_amount = net_amount(item, request.amount)
        apply_run_totals(run, items)
        await self.session.flush()

        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.PAYROLL_ITEM,
            entity_id=item_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(item, ("manual_adjustment", "adjustment_note", "net_amount")),
        )
        await self.session.commit()
        return PayrollItemResponse.model_validate(item)

    # =========================================================================
    # One-off entries
    # =========================================================================

    async def list_entries(self, run_id: UUID) -> list[PayrollEntryResponse]:
        await self._get_run(run_id)
        return [PayrollEntryResponse.model_validate(e) for e in await self.entry_repo.get_for_run(run_id)]

    async def _editable_run(self, run_id: UUID, current_user: CurrentUser) -> PayrollRunORM:
        run = await self._get_run(run_id)
        ensure_worksite_access(current_user, Permissions.PAYROLL_EDIT, run.worksite_id)
        if PayrollRunStatus(run.status) not in PAYROLL_CALCULATION_ALLOWED:
            raise ValidationError(f"Payroll run is {run.status}; entries can no longer change")
        return run

    async def _get_entry(self, run_id: UUID, entry_id: UUID) -> PayrollEntryORM:
        entry = await self.entry_repo.get(entry_id)
        if entry is None or entry.payroll_run_id != run_id:
            raise NotFoundError("Payroll entry", entry_id)
        return entry

    async def add_entry(
        self,
        run_id: UUID,
        request: PayrollEntryCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollEntryResponse:
        """Add a one-off earning or deduction; it enters the next calculation.

        Raises:
            ValidationError: The run is past CALCULATED or the category is unknown
        """
        await self._editable_run(run_id, current_user)
        employee = await self.employee_repo.get(request.employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", request.employee_id)

        category_repo = self.earning_repo if request.kind == EntryKind.EARNING else self.deduction_repo
        category = await category_repo.get_by_code(request.category_code)
        if category is None or not category.is_active:
            raise ValidationError(f"Unknown {request.kind.lower()} category {request.category_code}")

        entry = await self.entry_repo.create(
            payroll_run_id=run_id,
            created_by=current_user.id,
            **request.model_dump(),
        )
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.PAYROLL_ENTRY,
            entity_id=entry.id,
            actor_id=current_user.id,
            new_values=snapshot(entry),
            request=http_request,
        )
        await self.session.commit()
        return PayrollEntryResponse.model_validate(entry)

    async def approve_entry(
        self,
        run_id: UUID,
        entry_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollEntryResponse:
        await self._editable_run(run_id, current_user)
        entry = await self._get_entry(run_id, entry_id)
        entry.is_approved = True
        await self.session.flush()
        await self.audit_service.log(
            action=AuditAction.APPROVE,
            entity=EntityType.PAYROLL_ENTRY,
            entity_id=entry_id,
            actor_id=current_user.id,
            new_values={"is_approved": True},
            request=http_request,
        )
        await self.session.commit()
        return PayrollEntryResponse.model_validate(entry)

    async def delete_entry(
        self,
        run_id: UUID,
        entry_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> None:
        await self._editable_run(run_id, current_user)
        entry = await self._get_entry(run_id, entry_id)
        before = snapshot(entry)
        await self.session.delete(entry)
        await self.session.flush()
        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.PAYROLL_ENTRY,
            entity_id=entry_id,
            actor_id=current_user.id,
            old_values=before,
            request=http_request,
        )
        await self.session.commit()
