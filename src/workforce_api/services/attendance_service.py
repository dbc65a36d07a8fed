"""Attendance service for daily records and monthly periods."""

import logging
from datetime import date
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.constants.permissions import Permissions
from workforce_api.exceptions import NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.domain.workflow import PERIOD_TRANSITIONS, PeriodStatus, ensure_transition
from workforce_api.models.dto.attendance import (
    AttendancePeriodResponse,
    AttendanceRecordInput,
    AttendanceRecordResponse,
    BulkAttendanceRequest,
    BulkAttendanceResult,
    PeriodRequest,
)
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.orm.attendance import AttendancePeriodORM, AttendanceRecordORM
from workforce_api.models.orm.base import utcnow
from workforce_api.repositories.attendance_repository import (
    AttendancePeriodRepository,
    AttendanceRecordRepository,
)
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.security.auth import ensure_worksite_access
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.utils.dates import month_bounds, period_of
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("attendance_type", "total_hours", "overtime_hours", "night_hours", "notes", "worksite_id")

# Actor and timestamp columns stamped by each period transition
_TRANSITION_STAMPS = {
    PeriodStatus.SUBMITTED: ("submitted_by", "submitted_at", AuditAction.SUBMIT),
    PeriodStatus.APPROVED: ("approved_by", "approved_at", AuditAction.APPROVE),
    PeriodStatus.LOCKED: ("locked_by", "locked_at", AuditAction.LOCK),
}


def ensure_period_open(period: AttendancePeriodORM) -> None:
    """Reject record writes into a period that has left OPEN.

    Raises:
        ValidationError: If the period is not OPEN
    """
    if period.status != PeriodStatus.OPEN:
        raise ValidationError(
            f"Attendance period {period.period} is {period.status}; records can only change while it is OPEN",
            details={"period_id": str(period.id), "status": period.status},
        )


def _date_filter(query: ListQuery, key: str) -> date | None:
    raw = query.pop_filter(key)
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid value for filter '{key}'") from e


class AttendanceService:
    """Service for attendance records and the period workflow."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.period_repo = AttendancePeriodRepository(session)
        self.record_repo = AttendanceRecordRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.audit_service = AuditService(session)

    async def _get_period(self, period_id: UUID) -> AttendancePeriodORM:
        period = await self.period_repo.get(period_id)
        if period is None:
            raise NotFoundError("Attendance period", period_id)
        return period

    async def _period_response(self, period_id: UUID) -> AttendancePeriodResponse:
        result = await self.session.execute(
            self.period_repo.base_query()
            .where(AttendancePeriodORM.id == period_id)
            .execution_options(populate_existing=True)
        )
        return AttendancePeriodResponse.model_validate(result.scalar_one())

    # =========================================================================
    # Records
    # =========================================================================

    async def list_records(self, query: ListQuery) -> PaginatedResponse[AttendanceRecordResponse]:
        """List records.

        Besides column filters, ``month`` (YYYY-MM), ``date_from`` and
        ``date_to`` restrict the work date.
        """
        stmt = self.record_repo.base_query()

        month = query.pop_filter("month")
        if month is not None:
            start, end = month_bounds(month)
            stmt = stmt.where(AttendanceRecordORM.work_date.between(start, end))
        date_from = _date_filter(query, "date_from")
        if date_from is not None:
            stmt = stmt.where(AttendanceRecordORM.work_date >= date_from)
        date_to = _date_filter(query, "date_to")
        if date_to is not None:
            stmt = stmt.where(AttendanceRecordORM.work_date <= date_to)

        if query.sort == "created_at":
            query.sort = "work_date"
        records, total = await self.record_repo.list(query, stmt)
        return PaginatedResponse(
            data=[AttendanceRecordResponse.model_validate(r) for r in records],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def _write_record(
        self,
        data: AttendanceRecordInput,
        current_user: CurrentUser,
        periods: dict[tuple[UUID, str], AttendancePeriodORM],
    ) -> tuple[AttendanceRecordORM, dict | None]:
        """Insert or update one record; returns the row and its prior values."""
        ensure_worksite_access(current_user, Permissions.ATTENDANCE_CREATE, data.worksite_id)

        employee = await self.employee_repo.get(data.employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", data.employee_id)

        key = (data.worksite_id, period_of(data.work_date))
        period = periods.get(key)
        if period is None:
            if await self.worksite_repo.get(data.worksite_id) is None:
                raise NotFoundError("Worksite", data.worksite_id)
            period = await self.period_repo.get_or_create(*key)
            periods[key] = period
        ensure_period_open(period)

        values = data.model_dump(include=set(RECORD_FIELDS))
        existing = await self.record_repo.get_for_day(data.employee_id, data.work_date)
        if existing is None:
            record = AttendanceRecordORM(
                employee_id=data.employee_id,
                work_date=data.work_date,
                period_id=period.id,
                **values,
            )
            self.session.add(record)
            await self.session.flush()
            return record, None

        ensure_worksite_access(current_user, Permissions.ATTENDANCE_EDIT, existing.worksite_id)
        if existing.period_id != period.id:
            # Moving a day to another worksite also touches the old period
            ensure_period_open(await self._get_period(existing.period_id))
        before = snapshot(existing, RECORD_FIELDS)
        for field, value in values.items():
            setattr(existing, field, value)
        existing.period_id = period.id
        await self.session.flush()
        return existing, before

    async def upsert_record(
        self,
        data: AttendanceRecordInput,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> AttendanceRecordResponse:
        """Create or update the record of one employee on one date.

        The worksite's period for that month is created on first use.

        Raises:
            NotFoundError: Unknown employee or worksite
            ValidationError: The period is not OPEN
        """
        record, before = await self._write_record(data, current_user, {})

        await self.audit_service.log_entity_change(
            action=AuditAction.CREATE if before is None else AuditAction.UPDATE,
            entity=EntityType.ATTENDANCE_RECORD,
            entity_id=record.id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before or {},
            new_values=snapshot(record, RECORD_FIELDS),
        )
        await self.session.commit()
        return AttendanceRecordResponse.model_validate(record)

    async def bulk_upsert(
        self,
        request: BulkAttendanceRequest,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> BulkAttendanceResult:
        """Write many records in one transaction; any rejection rolls back all."""
        periods: dict[tuple[UUID, str], AttendancePeriodORM] = {}
        records = []
        created = updated = 0
        for item in request.records:
            record, before = await self._write_record(item, current_user, periods)
            records.append(record)
            if before is None:
                created += 1
            else:
                updated += 1

        await self.audit_service.log(
            action=AuditAction.UPDATE,
            entity=EntityType.ATTENDANCE_RECORD,
            actor_id=current_user.id,
            new_values={
                "created": created,
                "updated": updated,
                "periods": sorted(f"{ws}:{p}" for ws, p in periods),
            },
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Bulk attendance: {created} created, {updated} updated")
        return BulkAttendanceResult(
            created=created,
            updated=updated,
            records=[AttendanceRecordResponse.model_validate(r) for r in records],
        )

    async def delete_record(
        self,
        record_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> None:
        """Delete a record while its period is still OPEN."""
        record = await self.record_repo.get(record_id)
        if record is None:
            raise NotFoundError("Attendance record", record_id)
        ensure_worksite_access(current_user, Permissions.ATTENDANCE_EDIT, record.worksite_id)
        ensure_period_open(await self._get_period(record.period_id))

        before = snapshot(record)
        await self.session.delete(record)
        await self.session.flush()
        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.ATTENDANCE_RECORD,
            entity_id=record_id,
            actor_id=current_user.id,
            old_values=before,
            request=http_request,
        )
        await self.session.commit()

    # =========================================================================
    # Periods
    # =========================================================================

    async def list_periods(self, query: ListQuery) -> PaginatedResponse[AttendancePeriodResponse]:
        if query.sort == "created_at":
            query.sort = "period"
        periods, total = await self.period_repo.list(query)
        return PaginatedResponse(
            data=[AttendancePeriodResponse.model_validate(p) for p in periods],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_period(self, period_id: UUID) -> AttendancePeriodResponse:
        await self._get_period(period_id)
        return await self._period_response(period_id)

    async def get_or_create_period(
        self,
        request: PeriodRequest,
        current_user: CurrentUser,
    ) -> AttendancePeriodResponse:
        """Look up a worksite's period for a month, creating it OPEN if absent."""
        ensure_worksite_access(current_user, Permissions.ATTENDANCE_VIEW, request.worksite_id)
        if await self.worksite_repo.get(request.worksite_id) is None:
            raise NotFoundError("Worksite", request.worksite_id)
        period = await self.period_repo.get_or_create(request.worksite_id, request.period)
        await self.session.commit()
        return await self._period_response(period.id)

    async def transition_period(
        self,
        period_id: UUID,
        target: PeriodStatus,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> AttendancePeriodResponse:
        """Advance a period one step: OPEN → SUBMITTED → APPROVED → LOCKED.

        Args:
            period_id: Period UUID
            target: SUBMITTED, APPROVED or LOCKED
            current_user: Acting user, stamped on the period
            http_request: Request for audit metadata

        Raises:
            NotFoundError: Unknown period
            InvalidStateTransitionError: Target is not the immediate successor
        """
        period = await self._get_period(period_id)
        permission = Permissions.ATTENDANCE_EDIT if target == PeriodStatus.SUBMITTED else Permissions.ATTENDANCE_APPROVE
        ensure_worksite_access(current_user, permission, period.worksite_id)

        previous = period.status
        ensure_transition("Attendance period", PERIOD_TRANSITIONS, previous, target)

        actor_column, time_column, action = _TRANSITION_STAMPS[target]
        period.status = target.value
        setattr(period, actor_column, current_user.id)
        setattr(period, time_column, utcnow())
        await self.session.flush()

        await self.audit_service.log(
            action=action,
            entity=EntityType.ATTENDANCE_PERIOD,
            entity_id=period_id,
            actor_id=current_user.id,
            old_values={"status": previous},
            new_values={"status": target.value, "period": period.period},
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Attendance period {period.period} moved {previous} -> {target.value}")
        return await self._period_response(period_id)

    async def submit_period(self, period_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self.transition_period(period_id, PeriodStatus.SUBMITTED, current_user, http_request)

    async def approve_period(self, period_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self.transition_period(period_id, PeriodStatus.APPROVED, current_user, http_request)

    async def lock_period(self, period_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self.transition_period(period_id, PeriodStatus.LOCKED, current_user, http_request)
