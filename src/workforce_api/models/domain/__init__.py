"""Domain models package."""

from workforce_api.models.domain.compliance import AlertSeverity, DocumentStatus
from workforce_api.models.domain.employee import EmployeeStatus, PaymentType, TaxStatus, WorkStatusType
from workforce_api.models.domain.permissions import AllPermissions, GrantedPermissions, PermissionSet
from workforce_api.models.domain.user import CurrentUser, UserStatus
from workforce_api.models.domain.workflow import PayrollRunStatus, PeriodStatus

__all__ = [
    "AlertSeverity",
    "AllPermissions",
    "CurrentUser",
    "DocumentStatus",
    "EmployeeStatus",
    "GrantedPermissions",
    "PaymentType",
    "PayrollRunStatus",
    "PeriodStatus",
    "PermissionSet",
    "TaxStatus",
    "UserStatus",
    "WorkStatusType",
]
