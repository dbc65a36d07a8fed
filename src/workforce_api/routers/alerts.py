"""Compliance alerts router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_alert_service, get_list_query
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, PaginatedResponse
from workforce_api.models.dto.document import AlertGenerationResult, AlertResponse
from workforce_api.security.auth import require_permission
from workforce_api.services.alert_service import AlertService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[AlertResponse])
async def list_alerts(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ALERTS_VIEW))],
    service: Annotated[AlertService, Depends(get_alert_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[AlertResponse]:
    """List alerts. Filters: severity, is_read, is_dismissed, employee_id."""
    return await service.list_alerts(query)


@router.post("/generate", response_model=ApiResponse[AlertGenerationResult])
async def generate_alerts(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ALERTS_EDIT))],
    service: Annotated[AlertService, Depends(get_alert_service)],
) -> ApiResponse[AlertGenerationResult]:
    """Scan tracked dates against the active alert rules now."""
    return ApiResponse(data=await service.generate())


@router.post("/{alert_id}/read", response_model=ApiResponse[AlertResponse])
async def mark_alert_read(
    request: Request,
    alert_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ALERTS_EDIT))],
    service: Annotated[AlertService, Depends(get_alert_service)],
) -> ApiResponse[AlertResponse]:
    return ApiResponse(data=await service.mark_read(alert_id, current_user, http_request=request))


@router.post("/{alert_id}/dismiss", response_model=ApiResponse[AlertResponse])
async def dismiss_alert(
    request: Request,
    alert_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ALERTS_EDIT))],
    service: Annotated[AlertService, Depends(get_alert_service)],
) -> ApiResponse[AlertResponse]:
    return ApiResponse(data=await service.dismiss(alert_id, current_user, http_request=request))


@router.post("/{alert_id}/resolve", response_model=ApiResponse[AlertResponse])
async def resolve_alert(
    request: Request,
    alert_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ALERTS_EDIT))],
    service: Annotated[AlertService, Depends(get_alert_service)],
) -> ApiResponse[AlertResponse]:
    """Close an alert; generation opens a new one if the date is still due."""
    return ApiResponse(data=await service.resolve(alert_id, current_user, http_request=request))
