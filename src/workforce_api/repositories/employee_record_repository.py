"""Repositories for employee history records: salary revisions, patent payments and contacts."""

from uuid import UUID

from sqlalchemy import select

from workforce_api.models.orm.employee import EmployeeContactORM, PatentPaymentORM, SalaryRevisionORM
from workforce_api.repositories.base import BaseRepository


class SalaryRevisionRepository(BaseRepository[SalaryRevisionORM]):
    """Repository for salary revisions."""

    model = SalaryRevisionORM

    async def get_for_employee(self, employee_id: UUID) -> list[SalaryRevisionORM]:
        """Revisions of an employee, newest first."""
        result = await self.session.execute(
            select(SalaryRevisionORM)
            .where(SalaryRevisionORM.employee_id == employee_id)
            .order_by(SalaryRevisionORM.created_at.desc(), SalaryRevisionORM.field)
        )
        return list(result.scalars().all())


class PatentPaymentRepository(BaseRepository[PatentPaymentORM]):
    """Repository for monthly patent payments."""

    model = PatentPaymentORM

    async def get_for_employee(self, employee_id: UUID, year: int | None = None) -> list[PatentPaymentORM]:
        """Payments of an employee ordered by year and month, newest first.

        Args:
            employee_id: Employee UUID
            year: Restrict to one calendar year

        Returns:
            List of payments
        """
        stmt = select(PatentPaymentORM).where(PatentPaymentORM.employee_id == employee_id)
        if year is not None:
            stmt = stmt.where(PatentPaymentORM.year == year)
        result = await self.session.execute(
            stmt.order_by(PatentPaymentORM.year.desc(), PatentPaymentORM.month.desc())
        )
        return list(result.scalars().all())

    async def get_month(self, employee_id: UUID, year: int, month: int) -> PatentPaymentORM | None:
        result = await self.session.execute(
            select(PatentPaymentORM).where(
                PatentPaymentORM.employee_id == employee_id,
                PatentPaymentORM.year == year,
                PatentPaymentORM.month == month,
            )
        )
        return result.scalar_one_or_none()


class EmployeeContactRepository(BaseRepository[EmployeeContactORM]):
    """Repository for employee contacts."""

    model = EmployeeContactORM

    async def get_for_employee(self, employee_id: UUID) -> list[EmployeeContactORM]:
        result = await self.session.execute(
            select(EmployeeContactORM)
            .where(EmployeeContactORM.employee_id == employee_id)
            .order_by(EmployeeContactORM.created_at)
        )
        return list(result.scalars().all())
