"""Dashboard router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_dashboard_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse
from workforce_api.models.dto.dashboard import DashboardStats
from workforce_api.security.auth import require_permission
from workforce_api.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_dashboard_stats(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.REPORTS_VIEW))],
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> ApiResponse[DashboardStats]:
    """Headline counters. Requires reports.view permission."""
    return ApiResponse(data=await service.get_stats())
