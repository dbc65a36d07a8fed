"""Services package."""

from workforce_api.services.attendance_service import AttendanceService
from workforce_api.services.auth_service import AuthService
from workforce_api.services.employee_service import EmployeeService
from workforce_api.services.payroll_service import PayrollService
from workforce_api.services.rbac_service import RbacService

__all__ = [
    "AttendanceService",
    "AuthService",
    "EmployeeService",
    "PayrollService",
    "RbacService",
]
