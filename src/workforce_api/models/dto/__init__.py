"""Data Transfer Objects package."""

from workforce_api.models.dto.auth import TokenResponse, UserInfo
from workforce_api.models.dto.common import (
    ApiResponse,
    DeletionResult,
    ErrorResponse,
    PaginatedResponse,
    PaginationMeta,
)
from workforce_api.models.dto.dashboard import DashboardStats
from workforce_api.models.dto.employee import EmployeeDetailResponse, EmployeeResponse
from workforce_api.models.dto.payroll import PayrollRunDetailResponse, PayrollRunResponse

__all__ = [
    "ApiResponse",
    "DashboardStats",
    "DeletionResult",
    "EmployeeDetailResponse",
    "EmployeeResponse",
    "ErrorResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "PayrollRunDetailResponse",
    "PayrollRunResponse",
    "TokenResponse",
    "UserInfo",
]
