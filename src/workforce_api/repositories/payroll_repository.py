"""Payroll repositories."""

from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.models.orm.payroll import PayrollEntryORM, PayrollItemORM, PayrollRunORM
from workforce_api.repositories.base import BaseRepository


class PayrollRunRepository(BaseRepository[PayrollRunORM]):
    """Repository for payroll runs."""

    model = PayrollRunORM
    filter_relations = ("worksite",)

    def base_query(self) -> Select:
        return select(PayrollRunORM).options(selectinload(PayrollRunORM.worksite))

    async def get_with_items(self, run_id: UUID) -> PayrollRunORM | None:
        """Get a run with its items (and their employees) loaded."""
        result = await self.session.execute(
            select(PayrollRunORM)
            .options(
                selectinload(PayrollRunORM.worksite),
                selectinload(PayrollRunORM.items).selectinload(PayrollItemORM.employee),
            )
            .where(PayrollRunORM.id == run_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_active(self, worksite_id: UUID | None, period: str) -> PayrollRunORM | None:
        """Non-cancelled run for the same worksite (or all-sites) and period."""
        stmt = select(PayrollRunORM).where(
            PayrollRunORM.period == period,
            PayrollRunORM.status != "CANCELLED",
        )
        if worksite_id is None:
            stmt = stmt.where(PayrollRunORM.worksite_id.is_(None))
        else:
            stmt = stmt.where(PayrollRunORM.worksite_id == worksite_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def count_by_status(self) -> dict[str, int]:
        result = await self.session.execute(
            select(PayrollRunORM.status, func.count()).group_by(PayrollRunORM.status)
        )
        return {status: count for status, count in result}


class PayrollItemRepository(BaseRepository[PayrollItemORM]):
    """Repository for payroll items."""

    model = PayrollItemORM

    async def get_for_run(self, run_id: UUID) -> list[PayrollItemORM]:
        result = await self.session.execute(
            select(PayrollItemORM)
            .join(EmployeeORM, EmployeeORM.id == PayrollItemORM.employee_id)
            .options(selectinload(PayrollItemORM.employee))
            .where(PayrollItemORM.payroll_run_id == run_id)
            .order_by(EmployeeORM.last_name, EmployeeORM.first_name)
        )
        return list(result.scalars().all())

    async def get_adjustments(self, run_id: UUID) -> dict[UUID, tuple]:
        """Manual adjustments of a run keyed by employee, kept across recomputes."""
        result = await self.session.execute(
            select(
                PayrollItemORM.employee_id,
                PayrollItemORM.manual_adjustment,
                PayrollItemORM.adjustment_note,
            ).where(PayrollItemORM.payroll_run_id == run_id)
        )
        return {row.employee_id: (row.manual_adjustment, row.adjustment_note) for row in result}

    async def get_for_employee(self, employee_id: UUID) -> list[PayrollItemORM]:
        """Items of an employee across non-cancelled runs, run loaded."""
        result = await self.session.execute(
            select(PayrollItemORM)
            .join(PayrollRunORM, PayrollRunORM.id == PayrollItemORM.payroll_run_id)
            .options(selectinload(PayrollItemORM.run))
            .where(PayrollItemORM.employee_id == employee_id, PayrollRunORM.status != "CANCELLED")
            .order_by(PayrollRunORM.period)
        )
        return list(result.scalars().all())

    async def delete_for_run(self, run_id: UUID) -> None:
        await self.session.execute(
            delete(PayrollItemORM).where(PayrollItemORM.payroll_run_id == run_id)
        )
        await self.session.flush()


class PayrollEntryRepository(BaseRepository[PayrollEntryORM]):
    """Repository for one-off earnings and deductions."""

    model = PayrollEntryORM

    async def get_for_run(self, run_id: UUID) -> list[PayrollEntryORM]:
        result = await self.session.execute(
            select(PayrollEntryORM)
            .where(PayrollEntryORM.payroll_run_id == run_id)
            .order_by(PayrollEntryORM.created_at)
        )
        return list(result.scalars().all())
