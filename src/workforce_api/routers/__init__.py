"""API routers package."""

from workforce_api.routers import (
    alerts,
    assets,
    attendance,
    audit,
    auth,
    dashboard,
    documents,
    employees,
    leaves,
    payroll,
    progress_payments,
    reference,
    reports,
    transfers,
    users,
    worksites,
)

__all__ = [
    "alerts",
    "assets",
    "attendance",
    "audit",
    "auth",
    "dashboard",
    "documents",
    "employees",
    "leaves",
    "payroll",
    "progress_payments",
    "reference",
    "reports",
    "transfers",
    "users",
    "worksites",
]
