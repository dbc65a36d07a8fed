"""SQLAlchemy ORM models package."""

from workforce_api.models.orm.base import Base
from workforce_api.models.orm.permission import PermissionORM
from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.role_permission import RolePermissionORM
from workforce_api.models.orm.user import UserORM
from workforce_api.models.orm.user_role import UserRoleORM
from workforce_api.models.orm.worksite import WorksiteORM
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
from workforce_api.models.orm.employee import (
    EmployeeContactORM,
    EmployeeEmploymentORM,
    EmployeeIdentityORM,
    EmployeeORM,
    EmployeeSalaryProfileORM,
    EmployeeWorkStatusORM,
    PatentPaymentORM,
    SalaryRevisionORM,
)
from workforce_api.models.orm.attendance import AttendancePeriodORM, AttendanceRecordORM
from workforce_api.models.orm.payroll import PayrollEntryORM, PayrollItemORM, PayrollRunORM
from workforce_api.models.orm.document import DocumentFileORM, EmployeeDocumentORM
from workforce_api.models.orm.alert import AlertORM
from workforce_api.models.orm.leave import LeaveRequestORM
from workforce_api.models.orm.transfer import EmployeeSiteTransferORM
from workforce_api.models.orm.asset import AssetAssignmentORM, AssetORM
from workforce_api.models.orm.progress_payment import ProgressPaymentItemORM, ProgressPaymentORM
from workforce_api.models.orm.audit_log import AuditLogORM
from workforce_api.models.orm.numbering import NumberingRuleORM

__all__ = [
    "Base",
    "AlertORM",
    "AlertRuleORM",
    "AssetAssignmentORM",
    "AssetCategoryORM",
    "AssetORM",
    "AttendancePeriodORM",
    "AttendanceRecordORM",
    "AuditLogORM",
    "DeductionCategoryORM",
    "DepartmentORM",
    "DocumentFileORM",
    "DocumentRequirementORM",
    "DocumentTypeORM",
    "EarningCategoryORM",
    "EmployeeContactORM",
    "EmployeeDocumentORM",
    "EmployeeEmploymentORM",
    "EmployeeIdentityORM",
    "EmployeeORM",
    "EmployeeSalaryProfileORM",
    "EmployeeSiteTransferORM",
    "EmployeeWorkStatusORM",
    "LeaveRequestORM",
    "LeaveTypeORM",
    "NationalityORM",
    "NumberingRuleORM",
    "PatentPaymentORM",
    "PayrollEntryORM",
    "PayrollItemORM",
    "PayrollRuleORM",
    "PayrollRuleVersionORM",
    "PayrollRunORM",
    "PermissionORM",
    "ProfessionORM",
    "ProgressPaymentItemORM",
    "ProgressPaymentORM",
    "RoleORM",
    "RolePermissionORM",
    "SalaryRevisionORM",
    "ShiftORM",
    "UserORM",
    "UserRoleORM",
    "WorksiteORM",
]
