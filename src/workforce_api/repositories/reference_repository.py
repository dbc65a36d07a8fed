"""Reference data repositories.

Each lookup table gets its own repository class whose ``references`` list
names the foreign-key columns that keep a row from being hard-deleted.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.alert import AlertORM
from workforce_api.models.orm.asset import AssetORM
from workforce_api.models.orm.document import EmployeeDocumentORM
from workforce_api.models.orm.employee import EmployeeEmploymentORM, EmployeeORM
from workforce_api.models.orm.leave import LeaveRequestORM
from workforce_api.models.orm.payroll import PayrollEntryORM
from workforce_api.models.orm.reference import (
    AlertRuleORM,
    AssetCategoryORM,
    DeductionCategoryORM,
    DepartmentORM,
    DocumentRequirementORM,
    DocumentTypeORM,
    EarningCategoryORM,
    LeaveTypeORM,
    NationalityORM,
    PayrollRuleORM,
    PayrollRuleVersionORM,
    ProfessionORM,
    ShiftORM,
)
from workforce_api.repositories.base import BaseRepository, T


class LookupRepository(BaseRepository[T]):
    """Common queries of code/name lookup tables."""

    search_columns = ("code", "name_tr", "name_ru", "name_en")

    async def get_by_code(self, code: str) -> T | None:
        result = await self.session.execute(select(self.model).where(self.model.code == code))
        return result.scalar_one_or_none()

    async def get_active(self) -> list[T]:
        """Active entries in display order."""
        result = await self.session.execute(
            self.base_query()
            .where(self.model.is_active.is_(True))
            .order_by(self.model.sort_order, self.model.code)
        )
        return list(result.scalars().all())


class NationalityRepository(LookupRepository[NationalityORM]):
    model = NationalityORM
    references = (EmployeeORM.nationality_id,)


class ProfessionRepository(LookupRepository[ProfessionORM]):
    model = ProfessionORM
    references = (EmployeeORM.profession_id,)


class DepartmentRepository(LookupRepository[DepartmentORM]):
    model = DepartmentORM
    references = (EmployeeORM.department_id,)


class ShiftRepository(LookupRepository[ShiftORM]):
    model = ShiftORM
    references = (EmployeeEmploymentORM.shift_id,)


class DocumentTypeRepository(LookupRepository[DocumentTypeORM]):
    model = DocumentTypeORM
    references = (EmployeeDocumentORM.document_type_id, DocumentRequirementORM.document_type_id)


class LeaveTypeRepository(LookupRepository[LeaveTypeORM]):
    model = LeaveTypeORM
    references = (LeaveRequestORM.leave_type_id,)


class AssetCategoryRepository(LookupRepository[AssetCategoryORM]):
    model = AssetCategoryORM
    references = (AssetORM.category_id,)


class AlertRuleRepository(LookupRepository[AlertRuleORM]):
    model = AlertRuleORM
    references = (AlertORM.rule_id,)


class _EntryCategoryRepository(LookupRepository[T]):
    """Payroll entries point at categories by code rather than by id."""

    async def count_references(self, id: UUID) -> int:
        instance = await self.get(id)
        if instance is None:
            return 0
        result = await self.session.execute(
            select(func.count())
            .select_from(PayrollEntryORM)
            .where(PayrollEntryORM.category_code == instance.code)
        )
        return result.scalar_one()


class EarningCategoryRepository(_EntryCategoryRepository[EarningCategoryORM]):
    model = EarningCategoryORM


class DeductionCategoryRepository(_EntryCategoryRepository[DeductionCategoryORM]):
    model = DeductionCategoryORM


class PayrollRuleRepository(LookupRepository[PayrollRuleORM]):
    """Payroll rules and their effective-dated versions."""

    model = PayrollRuleORM
    references = (PayrollRuleVersionORM.rule_id,)

    def base_query(self) -> Select:
        return select(PayrollRuleORM).options(selectinload(PayrollRuleORM.versions))

    async def get_with_versions(self, rule_id: UUID) -> PayrollRuleORM | None:
        result = await self.session.execute(
            self.base_query()
            .where(PayrollRuleORM.id == rule_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_effective_versions(self, on: date) -> dict[str, PayrollRuleVersionORM]:
        """Version of every active rule in force on a date.

        Args:
            on: Reference date (usually the first day of a payroll period)

        Returns:
            Dict of rule code to its most recent version effective on that date
        """
        result = await self.session.execute(
            select(PayrollRuleORM.code, PayrollRuleVersionORM)
            .join(PayrollRuleVersionORM, PayrollRuleVersionORM.rule_id == PayrollRuleORM.id)
            .where(
                PayrollRuleORM.is_active.is_(True),
                PayrollRuleVersionORM.effective_from <= on,
                or_(
                    PayrollRuleVersionORM.effective_to.is_(None),
                    PayrollRuleVersionORM.effective_to >= on,
                ),
            )
            .order_by(PayrollRuleVersionORM.effective_from.desc())
        )
        versions: dict[str, PayrollRuleVersionORM] = {}
        for code, version in result:
            versions.setdefault(code, version)
        return versions

    async def add_version(self, rule: PayrollRuleORM, **values) -> PayrollRuleVersionORM:
        version = PayrollRuleVersionORM(rule_id=rule.id, **values)
        self.session.add(version)
        await self.session.flush()
        return version


class DocumentRequirementRepository(BaseRepository[DocumentRequirementORM]):
    """Document types required per work-authorization category."""

    model = DocumentRequirementORM

    async def get_for_status(self, work_status_type: str) -> list[DocumentRequirementORM]:
        result = await self.session.execute(
            select(DocumentRequirementORM)
            .options(selectinload(DocumentRequirementORM.document_type))
            .where(DocumentRequirementORM.work_status_type == work_status_type)
        )
        return list(result.scalars().all())

    async def get_all(self) -> list[DocumentRequirementORM]:
        result = await self.session.execute(
            select(DocumentRequirementORM)
            .options(selectinload(DocumentRequirementORM.document_type))
            .order_by(DocumentRequirementORM.work_status_type)
        )
        return list(result.scalars().all())

    async def replace_for_status(
        self,
        work_status_type: str,
        document_type_ids: list[UUID],
    ) -> None:
        """Replace the requirement set of one work-status type."""
        await self.session.execute(
            delete(DocumentRequirementORM).where(
                DocumentRequirementORM.work_status_type == work_status_type
            )
        )
        for document_type_id in dict.fromkeys(document_type_ids):
            self.session.add(
                DocumentRequirementORM(
                    work_status_type=work_status_type,
                    document_type_id=document_type_id,
                    is_mandatory=True,
                )
            )
        await self.session.flush()
