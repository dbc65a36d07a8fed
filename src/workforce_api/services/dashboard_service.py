"""Dashboard service."""

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.models.domain.employee import EmployeeStatus
from workforce_api.models.domain.workflow import LeaveStatus, PeriodStatus, TransferStatus
from workforce_api.models.dto.dashboard import DashboardStats
from workforce_api.repositories.alert_repository import AlertRepository
from workforce_api.repositories.attendance_repository import AttendancePeriodRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.leave_repository import LeaveRequestRepository
from workforce_api.repositories.payroll_repository import PayrollRunRepository
from workforce_api.repositories.transfer_repository import TransferRepository
from workforce_api.repositories.worksite_repository import WorksiteRepository


class DashboardService:
    """Service for dashboard counters."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.period_repo = AttendancePeriodRepository(session)
        self.payroll_repo = PayrollRunRepository(session)
        self.alert_repo = AlertRepository(session)
        self.leave_repo = LeaveRequestRepository(session)
        self.transfer_repo = TransferRepository(session)

    async def get_stats(self) -> DashboardStats:
        """Collect the headline counters.

        Returns:
            DashboardStats
        """
        return DashboardStats(
            active_employees=await self.employee_repo.count_by_status(EmployeeStatus.ACTIVE),
            active_worksites=await self.worksite_repo.count_active(),
            open_attendance_periods=await self.period_repo.count_by_status(PeriodStatus.OPEN),
            payroll_runs_by_status=await self.payroll_repo.count_by_status(),
            open_alerts_by_severity=await self.alert_repo.count_open_by_severity(),
            pending_leaves=await self.leave_repo.count_by_status(LeaveStatus.PENDING),
            pending_transfers=await self.transfer_repo.count_by_status(TransferStatus.PENDING),
        )
