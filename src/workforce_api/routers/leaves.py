"""Leave requests router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_leave_service, get_list_query
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, PaginatedResponse
from workforce_api.models.dto.operations import LeaveDecision, LeaveRequestCreate, LeaveRequestResponse
from workforce_api.security.auth import require_permission
from workforce_api.services.leave_service import LeaveService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[LeaveRequestResponse])
async def list_leaves(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.LEAVES_VIEW))],
    service: Annotated[LeaveService, Depends(get_leave_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[LeaveRequestResponse]:
    """List leave requests. Filters: employee_id, leave_type_id, status."""
    return await service.list_leaves(query)


@router.get("/{leave_id}", response_model=ApiResponse[LeaveRequestResponse])
async def get_leave(
    leave_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.LEAVES_VIEW))],
    service: Annotated[LeaveService, Depends(get_leave_service)],
) -> ApiResponse[LeaveRequestResponse]:
    return ApiResponse(data=await service.get_leave(leave_id))


@router.post("", response_model=ApiResponse[LeaveRequestResponse], status_code=201)
async def create_leave(
    request: Request,
    body: LeaveRequestCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.LEAVES_CREATE))],
    service: Annotated[LeaveService, Depends(get_leave_service)],
) -> ApiResponse[LeaveRequestResponse]:
    """File a PENDING leave request; overlapping requests are rejected."""
    return ApiResponse(data=await service.create_leave(body, current_user, http_request=request))


@router.post("/{leave_id}/decision", response_model=ApiResponse[LeaveRequestResponse])
async def decide_leave(
    request: Request,
    leave_id: UUID,
    body: LeaveDecision,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.LEAVES_APPROVE))],
    service: Annotated[LeaveService, Depends(get_leave_service)],
) -> ApiResponse[LeaveRequestResponse]:
    """Approve, reject or cancel a leave request."""
    return ApiResponse(data=await service.decide(leave_id, body, current_user, http_request=request))
