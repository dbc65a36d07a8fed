"""Progress payment repositories."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.progress_payment import ProgressPaymentItemORM, ProgressPaymentORM
from workforce_api.repositories.base import BaseRepository


class ProgressPaymentRepository(BaseRepository[ProgressPaymentORM]):
    """Repository for progress payment headers."""

    model = ProgressPaymentORM
    search_columns = ("notes",)
    filter_relations = ("worksite",)

    def base_query(self) -> Select:
        return select(ProgressPaymentORM).options(selectinload(ProgressPaymentORM.worksite))

    async def get_with_items(self, progress_payment_id: UUID) -> ProgressPaymentORM | None:
        """Get a progress payment with its items ordered by work date."""
        result = await self.session.execute(
            select(ProgressPaymentORM)
            .options(
                selectinload(ProgressPaymentORM.worksite),
                selectinload(ProgressPaymentORM.items).selectinload(ProgressPaymentItemORM.employee),
            )
            .where(ProgressPaymentORM.id == progress_payment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


class ProgressPaymentItemRepository(BaseRepository[ProgressPaymentItemORM]):
    """Repository for progress payment items."""

    model = ProgressPaymentItemORM

    async def sum_for(self, progress_payment_id: UUID) -> Decimal:
        """Sum of item totals of one progress payment."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(ProgressPaymentItemORM.total_amount), 0)).where(
                ProgressPaymentItemORM.progress_payment_id == progress_payment_id
            )
        )
        return Decimal(str(result.scalar_one()))

    async def get_for_employee(self, employee_id: UUID) -> list[ProgressPaymentItemORM]:
        """Items credited to an employee with their progress payment loaded."""
        result = await self.session.execute(
            select(ProgressPaymentItemORM)
            .options(selectinload(ProgressPaymentItemORM.progress_payment))
            .where(ProgressPaymentItemORM.employee_id == employee_id)
        )
        return list(result.scalars().all())
