"""Attendance repositories."""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.attendance import AttendancePeriodORM, AttendanceRecordORM
from workforce_api.repositories.base import BaseRepository


class AttendancePeriodRepository(BaseRepository[AttendancePeriodORM]):
    """Repository for monthly attendance periods."""

    model = AttendancePeriodORM
    filter_relations = ("worksite",)

    def base_query(self) -> Select:
        return select(AttendancePeriodORM).options(selectinload(AttendancePeriodORM.worksite))

    async def get_for(self, worksite_id: UUID, period: str) -> AttendancePeriodORM | None:
        result = await self.session.execute(
            select(AttendancePeriodORM).where(
                AttendancePeriodORM.worksite_id == worksite_id,
                AttendancePeriodORM.period == period,
            )
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, worksite_id: UUID, period: str) -> AttendancePeriodORM:
        """Look up the period of a worksite and month, creating it OPEN if absent."""
        existing = await self.get_for(worksite_id, period)
        if existing is not None:
            return existing
        return await self.create(worksite_id=worksite_id, period=period, status="OPEN")

    async def count_by_status(self, status: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(AttendancePeriodORM)
            .where(AttendancePeriodORM.status == status)
        )
        return result.scalar_one()


class AttendanceRecordRepository(BaseRepository[AttendanceRecordORM]):
    """Repository for daily attendance records."""

    model = AttendanceRecordORM
    filter_relations = ("employee",)

    def base_query(self) -> Select:
        return select(AttendanceRecordORM).options(selectinload(AttendanceRecordORM.employee))

    async def get_for_day(self, employee_id: UUID, work_date: date) -> AttendanceRecordORM | None:
        result = await self.session.execute(
            select(AttendanceRecordORM).where(
                AttendanceRecordORM.employee_id == employee_id,
                AttendanceRecordORM.work_date == work_date,
            )
        )
        return result.scalar_one_or_none()

    async def get_in_range(
        self,
        start: date,
        end: date,
        worksite_id: UUID | None = None,
        employee_ids: list[UUID] | None = None,
    ) -> list[AttendanceRecordORM]:
        """Records dated within [start, end], optionally per worksite/employees."""
        stmt = select(AttendanceRecordORM).where(
            AttendanceRecordORM.work_date >= start,
            AttendanceRecordORM.work_date <= end,
        )
        if worksite_id is not None:
            stmt = stmt.where(AttendanceRecordORM.worksite_id == worksite_id)
        if employee_ids is not None:
            stmt = stmt.where(AttendanceRecordORM.employee_id.in_(employee_ids))
        result = await self.session.execute(stmt.order_by(AttendanceRecordORM.work_date))
        return list(result.scalars().all())
