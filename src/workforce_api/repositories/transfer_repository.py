"""Site transfer repository."""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.transfer import EmployeeSiteTransferORM
from workforce_api.repositories.base import BaseRepository


class TransferRepository(BaseRepository[EmployeeSiteTransferORM]):
    """Repository for employee site transfers."""

    model = EmployeeSiteTransferORM
    search_columns = ("reason",)
    filter_relations = ("employee",)

    def base_query(self) -> Select:
        return select(EmployeeSiteTransferORM).options(
            selectinload(EmployeeSiteTransferORM.employee),
            selectinload(EmployeeSiteTransferORM.from_worksite),
            selectinload(EmployeeSiteTransferORM.to_worksite),
        )

    async def get_full(self, transfer_id: UUID) -> EmployeeSiteTransferORM | None:
        result = await self.session.execute(
            self.base_query()
            .where(EmployeeSiteTransferORM.id == transfer_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_history(self, worksite_id: UUID | None = None) -> list[EmployeeSiteTransferORM]:
        stmt = self.base_query().order_by(EmployeeSiteTransferORM.transfer_date.desc())
        if worksite_id is not None:
            stmt = stmt.where(
                (EmployeeSiteTransferORM.from_worksite_id == worksite_id)
                | (EmployeeSiteTransferORM.to_worksite_id == worksite_id)
            )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self, status: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(EmployeeSiteTransferORM)
            .where(EmployeeSiteTransferORM.status == status)
        )
        return result.scalar_one()
