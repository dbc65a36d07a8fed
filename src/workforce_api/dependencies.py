"""Centralized dependency injection factories for FastAPI.

Routers obtain services through these factories so every service of a
request shares the request's database session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.database import get_db
from workforce_api.services.alert_service import AlertService
from workforce_api.services.asset_service import AssetService
from workforce_api.services.attendance_service import AttendanceService
from workforce_api.services.audit_log_service import AuditLogService
from workforce_api.services.auth_service import AuthService
from workforce_api.services.dashboard_service import DashboardService
from workforce_api.services.document_service import DocumentService
from workforce_api.services.employee_record_service import EmployeeRecordService
from workforce_api.services.employee_service import EmployeeService
from workforce_api.services.export_service import ExportService
from workforce_api.services.leave_service import LeaveService
from workforce_api.services.payroll_service import PayrollService
from workforce_api.services.progress_payment_service import ProgressPaymentService
from workforce_api.services.rbac_service import RbacService
from workforce_api.services.reference_data_service import ReferenceDataService
from workforce_api.services.storage import FileStorage, get_storage
from workforce_api.services.transfer_service import TransferService
from workforce_api.services.worksite_service import WorksiteService
from workforce_api.utils.query import ListQuery, parse_list_query


# =============================================================================
# Request Helpers
# =============================================================================


def get_list_query(request: Request) -> ListQuery:
    """Parse page/limit/sort/order/search and filters from the query string."""
    return parse_list_query(request.query_params)


def get_file_storage() -> FileStorage:
    """Get the configured document storage backend."""
    return get_storage()


# =============================================================================
# Core Service Factories
# =============================================================================


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get AuthService instance."""
    return AuthService(db)


def get_rbac_service(db: AsyncSession = Depends(get_db)) -> RbacService:
    """Get RbacService instance."""
    return RbacService(db)


def get_audit_log_service(db: AsyncSession = Depends(get_db)) -> AuditLogService:
    """Get AuditLogService instance."""
    return AuditLogService(db)


def get_reference_data_service(db: AsyncSession = Depends(get_db)) -> ReferenceDataService:
    """Get ReferenceDataService instance."""
    return ReferenceDataService(db)


def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    """Get DashboardService instance."""
    return DashboardService(db)


# =============================================================================
# Workforce Service Factories
# =============================================================================


def get_worksite_service(db: AsyncSession = Depends(get_db)) -> WorksiteService:
    """Get WorksiteService instance."""
    return WorksiteService(db)


def get_employee_service(db: AsyncSession = Depends(get_db)) -> EmployeeService:
    """Get EmployeeService instance."""
    return EmployeeService(db)


def get_employee_record_service(db: AsyncSession = Depends(get_db)) -> EmployeeRecordService:
    """Get EmployeeRecordService instance."""
    return EmployeeRecordService(db)


def get_attendance_service(db: AsyncSession = Depends(get_db)) -> AttendanceService:
    """Get AttendanceService instance."""
    return AttendanceService(db)


def get_payroll_service(db: AsyncSession = Depends(get_db)) -> PayrollService:
    """Get PayrollService instance."""
    return PayrollService(db)


def get_progress_payment_service(db: AsyncSession = Depends(get_db)) -> ProgressPaymentService:
    """Get ProgressPaymentService instance."""
    return ProgressPaymentService(db)


def get_document_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
) -> DocumentService:
    """Get DocumentService instance."""
    return DocumentService(db, storage)


def get_alert_service(db: AsyncSession = Depends(get_db)) -> AlertService:
    """Get AlertService instance."""
    return AlertService(db)


# =============================================================================
# Operations Service Factories
# =============================================================================


def get_leave_service(db: AsyncSession = Depends(get_db)) -> LeaveService:
    """Get LeaveService instance."""
    return LeaveService(db)


def get_transfer_service(db: AsyncSession = Depends(get_db)) -> TransferService:
    """Get TransferService instance."""
    return TransferService(db)


def get_asset_service(db: AsyncSession = Depends(get_db)) -> AssetService:
    """Get AssetService instance."""
    return AssetService(db)


def get_export_service(db: AsyncSession = Depends(get_db)) -> ExportService:
    """Get ExportService instance."""
    return ExportService(db)
