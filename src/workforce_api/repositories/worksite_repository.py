"""Worksite repository."""

from sqlalchemy import func, select

from workforce_api.models.orm.asset import AssetORM
from workforce_api.models.orm.attendance import AttendancePeriodORM
from workforce_api.models.orm.employee import EmployeeEmploymentORM
from workforce_api.models.orm.payroll import PayrollRunORM
from workforce_api.models.orm.transfer import EmployeeSiteTransferORM
from workforce_api.models.orm.user_role import UserRoleORM
from workforce_api.models.orm.worksite import WorksiteORM
from workforce_api.repositories.base import BaseRepository


class WorksiteRepository(BaseRepository[WorksiteORM]):
    """Repository for worksite operations."""

    model = WorksiteORM
    search_columns = ("code", "name", "city")
    references = (
        EmployeeEmploymentORM.worksite_id,
        AttendancePeriodORM.worksite_id,
        PayrollRunORM.worksite_id,
        AssetORM.worksite_id,
        EmployeeSiteTransferORM.from_worksite_id,
        EmployeeSiteTransferORM.to_worksite_id,
        UserRoleORM.worksite_id,
    )

    async def get_by_code(self, code: str) -> WorksiteORM | None:
        result = await self.session.execute(select(WorksiteORM).where(WorksiteORM.code == code))
        return result.scalar_one_or_none()

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(WorksiteORM)
            .where(WorksiteORM.is_active.is_(True), WorksiteORM.status == "ACTIVE")
        )
        return result.scalar_one()
