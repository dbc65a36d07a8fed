"""Dashboard DTOs."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Headline counters of the dashboard."""

    active_employees: int
    active_worksites: int
    open_attendance_periods: int
    payroll_runs_by_status: dict[str, int]
    open_alerts_by_severity: dict[str, int]
    pending_leaves: int
    pending_transfers: int
