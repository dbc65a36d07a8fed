"""Employee repository."""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.employee import (
    EmployeeEmploymentORM,
    EmployeeIdentityORM,
    EmployeeORM,
    EmployeeSalaryProfileORM,
    EmployeeWorkStatusORM,
)
from workforce_api.repositories.base import BaseRepository

SECTION_MODELS = {
    "identity": EmployeeIdentityORM,
    "work_status": EmployeeWorkStatusORM,
    "employment": EmployeeEmploymentORM,
    "salary_profile": EmployeeSalaryProfileORM,
}


def _aggregate_options() -> list:
    return [
        selectinload(EmployeeORM.nationality),
        selectinload(EmployeeORM.profession),
        selectinload(EmployeeORM.department),
        selectinload(EmployeeORM.identity),
        selectinload(EmployeeORM.work_status),
        selectinload(EmployeeORM.employment).selectinload(EmployeeEmploymentORM.worksite),
        selectinload(EmployeeORM.salary_profile),
    ]


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for the employee aggregate."""

    model = EmployeeORM
    search_columns = ("first_name", "last_name", "employee_no", "phone")
    filter_relations = ("employment", "work_status", "salary_profile", "identity")

    def base_query(self) -> Select:
        """Soft-deleted employees are never listed."""
        return (
            select(EmployeeORM)
            .options(*_aggregate_options())
            .where(EmployeeORM.deleted_at.is_(None))
        )

    async def get_aggregate(self, employee_id: UUID, include_deleted: bool = False) -> EmployeeORM | None:
        """Get an employee with every 1:1 section loaded.

        Args:
            employee_id: Employee UUID
            include_deleted: Also return soft-deleted employees

        Returns:
            EmployeeORM or None
        """
        stmt = (
            select(EmployeeORM)
            .options(*_aggregate_options())
            .where(EmployeeORM.id == employee_id)
            .execution_options(populate_existing=True)
        )
        if not include_deleted:
            stmt = stmt.where(EmployeeORM.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_section(self, employee_id: UUID, section: str):
        """Get one 1:1 section row of an employee, or None."""
        model = SECTION_MODELS[section]
        result = await self.session.execute(select(model).where(model.employee_id == employee_id))
        return result.scalar_one_or_none()

    async def upsert_section(self, employee_id: UUID, section: str, values: dict):
        """Create or update one 1:1 section row.

        Args:
            employee_id: Owning employee
            section: One of identity, work_status, employment, salary_profile
            values: Column values to write

        Returns:
            The section row
        """
        row = await self.get_section(employee_id, section)
        if row is None:
            row = SECTION_MODELS[section](employee_id=employee_id, **values)
            self.session.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
        await self.session.flush()
        return row

    async def get_payable(self, worksite_id: UUID | None) -> list[EmployeeORM]:
        """Active, non-deleted employees with a salary profile.

        Args:
            worksite_id: Restrict to employees employed at this worksite; None for all

        Returns:
            Employees ordered by employee number, salary profile loaded
        """
        stmt = (
            select(EmployeeORM)
            .join(EmployeeSalaryProfileORM, EmployeeSalaryProfileORM.employee_id == EmployeeORM.id)
            .options(selectinload(EmployeeORM.salary_profile), selectinload(EmployeeORM.employment))
            .where(EmployeeORM.status == "ACTIVE", EmployeeORM.deleted_at.is_(None))
            .order_by(EmployeeORM.employee_no)
        )
        if worksite_id is not None:
            stmt = stmt.join(
                EmployeeEmploymentORM, EmployeeEmploymentORM.employee_id == EmployeeORM.id
            ).where(EmployeeEmploymentORM.worksite_id == worksite_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().unique().all())

    async def get_for_alerts(self) -> list[EmployeeORM]:
        """Non-deleted, non-terminated employees with their dated sections."""
        result = await self.session.execute(
            select(EmployeeORM)
            .options(
                selectinload(EmployeeORM.identity),
                selectinload(EmployeeORM.work_status),
                selectinload(EmployeeORM.employment),
            )
            .where(EmployeeORM.deleted_at.is_(None), EmployeeORM.status != "TERMINATED")
        )
        return list(result.scalars().all())

    async def count_by_status(self, status: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(EmployeeORM)
            .where(EmployeeORM.status == status, EmployeeORM.deleted_at.is_(None))
        )
        return result.scalar_one()

    async def get_for_export(self, worksite_id: UUID | None = None) -> list[EmployeeORM]:
        stmt = self.base_query().order_by(EmployeeORM.employee_no)
        if worksite_id is not None:
            stmt = stmt.where(EmployeeORM.employment.has(EmployeeEmploymentORM.worksite_id == worksite_id))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def move_to_worksite(self, employee_id: UUID, worksite_id: UUID, on: date) -> EmployeeEmploymentORM:
        """Point an employee's employment at another worksite."""
        row = await self.get_section(employee_id, "employment")
        if row is None:
            row = EmployeeEmploymentORM(employee_id=employee_id, worksite_id=worksite_id, hire_date=on)
            self.session.add(row)
        else:
            row.worksite_id = worksite_id
        await self.session.flush()
        return row
