"""Permission catalog and system role definitions."""

MODULES = (
    "employees",
    "worksites",
    "attendance",
    "payroll",
    "progress_payments",
    "assets",
    "documents",
    "leaves",
    "transfers",
    "alerts",
    "reports",
    "settings",
    "users",
)

ACTIONS = ("view", "create", "edit", "delete", "approve", "export")

EXTRA_PERMISSIONS = (
    "salary.view",
    "salary.edit",
    "documents.download",
    "audit.view",
)

PERMISSION_CATALOG: tuple[str, ...] = tuple(
    f"{module}.{action}" for module in MODULES for action in ACTIONS
) + EXTRA_PERMISSIONS


class Permissions:
    """Permission codes checked by the routers."""

    EMPLOYEES_VIEW = "employees.view"
    EMPLOYEES_CREATE = "employees.create"
    EMPLOYEES_EDIT = "employees.edit"
    EMPLOYEES_DELETE = "employees.delete"

    WORKSITES_VIEW = "worksites.view"
    WORKSITES_CREATE = "worksites.create"
    WORKSITES_EDIT = "worksites.edit"
    WORKSITES_DELETE = "worksites.delete"

    ATTENDANCE_VIEW = "attendance.view"
    ATTENDANCE_CREATE = "attendance.create"
    ATTENDANCE_EDIT = "attendance.edit"
    ATTENDANCE_APPROVE = "attendance.approve"

    PAYROLL_VIEW = "payroll.view"
    PAYROLL_CREATE = "payroll.create"
    PAYROLL_EDIT = "payroll.edit"
    PAYROLL_APPROVE = "payroll.approve"

    PROGRESS_PAYMENTS_VIEW = "progress_payments.view"
    PROGRESS_PAYMENTS_CREATE = "progress_payments.create"
    PROGRESS_PAYMENTS_EDIT = "progress_payments.edit"
    PROGRESS_PAYMENTS_DELETE = "progress_payments.delete"
    PROGRESS_PAYMENTS_APPROVE = "progress_payments.approve"

    ASSETS_VIEW = "assets.view"
    ASSETS_CREATE = "assets.create"
    ASSETS_EDIT = "assets.edit"
    ASSETS_DELETE = "assets.delete"

    DOCUMENTS_VIEW = "documents.view"
    DOCUMENTS_CREATE = "documents.create"
    DOCUMENTS_EDIT = "documents.edit"
    DOCUMENTS_DELETE = "documents.delete"
    DOCUMENTS_DOWNLOAD = "documents.download"

    LEAVES_VIEW = "leaves.view"
    LEAVES_CREATE = "leaves.create"
    LEAVES_APPROVE = "leaves.approve"

    TRANSFERS_VIEW = "transfers.view"
    TRANSFERS_CREATE = "transfers.create"
    TRANSFERS_APPROVE = "transfers.approve"

    ALERTS_VIEW = "alerts.view"
    ALERTS_EDIT = "alerts.edit"

    REPORTS_VIEW = "reports.view"
    REPORTS_EXPORT = "reports.export"

    SETTINGS_VIEW = "settings.view"
    SETTINGS_CREATE = "settings.create"
    SETTINGS_EDIT = "settings.edit"
    SETTINGS_DELETE = "settings.delete"

    USERS_VIEW = "users.view"
    USERS_CREATE = "users.create"
    USERS_EDIT = "users.edit"
    USERS_DELETE = "users.delete"

    SALARY_VIEW = "salary.view"
    SALARY_EDIT = "salary.edit"
    AUDIT_VIEW = "audit.view"


def _codes(*modules: str, actions: tuple[str, ...] = ACTIONS) -> tuple[str, ...]:
    return tuple(f"{module}.{action}" for module in modules for action in actions)


# code -> (name, site_scoped, permission codes). SUPER_ADMIN holds no explicit
# grants; it resolves to the wildcard capability.
SYSTEM_ROLES: dict[str, tuple[str, bool, tuple[str, ...]]] = {
    "SUPER_ADMIN": ("Super Administrator", False, ()),
    "ADMIN": ("Administrator", False, PERMISSION_CATALOG),
    "HR": (
        "HR Specialist",
        False,
        _codes("employees", "documents", "leaves", "transfers", "alerts")
        + _codes("worksites", "attendance", "assets", "reports", actions=("view", "export"))
        + ("salary.view", "documents.download"),
    ),
    "ACCOUNTANT": (
        "Accountant",
        False,
        _codes("payroll", "progress_payments")
        + _codes("employees", "worksites", "attendance", "reports", actions=("view", "export"))
        + ("salary.view", "salary.edit"),
    ),
    "SITE_MANAGER": (
        "Site Manager",
        True,
        _codes("attendance", "progress_payments", actions=("view", "create", "edit", "approve"))
        + _codes("employees", "worksites", "assets", "documents", "alerts", actions=("view",))
        + _codes("leaves", "transfers", actions=("view", "create")),
    ),
    "PROJECT_MANAGER": (
        "Project Manager",
        False,
        _codes("worksites", "attendance", "assets", actions=("view", "create", "edit", "approve"))
        + _codes(
            "employees", "payroll", "progress_payments", "reports", "alerts", actions=("view", "export")
        ),
    ),
    "VIEWER": (
        "Viewer",
        False,
        _codes(*MODULES, actions=("view",)),
    ),
}
