"""Repository package."""

from workforce_api.repositories.alert_repository import AlertRepository
from workforce_api.repositories.asset_repository import AssetAssignmentRepository, AssetRepository
from workforce_api.repositories.attendance_repository import (
    AttendancePeriodRepository,
    AttendanceRecordRepository,
)
from workforce_api.repositories.audit_repository import AuditRepository
from workforce_api.repositories.base import BaseRepository, RetireOutcome
from workforce_api.repositories.document_repository import (
    DocumentFileRepository,
    EmployeeDocumentRepository,
)
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.leave_repository import LeaveRequestRepository
from workforce_api.repositories.numbering_repository import NumberingRepository
from workforce_api.repositories.payroll_repository import (
    PayrollEntryRepository,
    PayrollItemRepository,
    PayrollRunRepository,
)
from workforce_api.repositories.permission_repository import PermissionRepository
from workforce_api.repositories.role_repository import RoleRepository
from workforce_api.repositories.transfer_repository import TransferRepository
from workforce_api.repositories.user_repository import UserRepository
from workforce_api.repositories.worksite_repository import WorksiteRepository

__all__ = [
    "AlertRepository",
    "AssetAssignmentRepository",
    "AssetRepository",
    "AttendancePeriodRepository",
    "AttendanceRecordRepository",
    "AuditRepository",
    "BaseRepository",
    "DocumentFileRepository",
    "EmployeeDocumentRepository",
    "EmployeeRepository",
    "LeaveRequestRepository",
    "NumberingRepository",
    "PayrollEntryRepository",
    "PayrollItemRepository",
    "PayrollRunRepository",
    "PermissionRepository",
    "RetireOutcome",
    "RoleRepository",
    "TransferRepository",
    "UserRepository",
    "WorksiteRepository",
]
