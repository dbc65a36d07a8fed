"""Leave request repository."""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.leave import LeaveRequestORM
from workforce_api.repositories.base import BaseRepository


class LeaveRequestRepository(BaseRepository[LeaveRequestORM]):
    """Repository for leave requests."""

    model = LeaveRequestORM
    filter_relations = ("employee", "leave_type")

    def base_query(self) -> Select:
        return select(LeaveRequestORM).options(
            selectinload(LeaveRequestORM.employee),
            selectinload(LeaveRequestORM.leave_type),
        )

    async def get_full(self, leave_id: UUID) -> LeaveRequestORM | None:
        result = await self.session.execute(
            self.base_query()
            .where(LeaveRequestORM.id == leave_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def has_overlap(self, employee_id: UUID, start: date, end: date) -> bool:
        """Whether a pending or approved leave of the employee overlaps [start, end]."""
        result = await self.session.execute(
            select(func.count())
            .select_from(LeaveRequestORM)
            .where(
                LeaveRequestORM.employee_id == employee_id,
                LeaveRequestORM.status.in_(("PENDING", "APPROVED")),
                LeaveRequestORM.start_date <= end,
                LeaveRequestORM.end_date >= start,
            )
        )
        return result.scalar_one() > 0

    async def count_by_status(self, status: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(LeaveRequestORM).where(LeaveRequestORM.status == status)
        )
        return result.scalar_one()
