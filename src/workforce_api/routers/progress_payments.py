"""Progress payments (hakkediş) router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_list_query, get_progress_payment_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, DeletionResult, PaginatedResponse
from workforce_api.models.dto.progress_payment import (
    ProgressPaymentCreate,
    ProgressPaymentDetailResponse,
    ProgressPaymentItemCreate,
    ProgressPaymentItemResponse,
    ProgressPaymentResponse,
    ProgressPaymentUpdate,
)
from workforce_api.security.auth import require_permission
from workforce_api.services.progress_payment_service import ProgressPaymentService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ProgressPaymentResponse])
async def list_progress_payments(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PROGRESS_PAYMENTS_VIEW))],
    service: Annotated[ProgressPaymentService, Depends(get_progress_payment_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[ProgressPaymentResponse]:
    """List progress payments. Filters: worksite_id, period, status."""
    return await service.list_progress_payments(query)


@router.get("/{progress_payment_id}", response_model=ApiResponse[ProgressPaymentDetailResponse])
async def get_progress_payment(
    progress_payment_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PROGRESS_PAYMENTS_VIEW))],
    service: Annotated[ProgressPaymentService, Depends(get_progress_payment_service)],
) -> ApiResponse[ProgressPaymentDetailResponse]:
    """Progress payment with its items ordered by work date."""
    return ApiResponse(data=await service.get_progress_payment(progress_payment_id))


@router.post("", response_model=ApiResponse[ProgressPaymentDetailResponse], status_code=201)
async def create_progress_payment(
    request: Request,
    body: ProgressPaymentCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PROGRESS_PAYMENTS_CREATE))],
    service: Annotated[ProgressPaymentService, Depends(get_progress_payment_service)],
) -> ApiResponse[ProgressPaymentDetailResponse]:
    result = await service.create_progress_payment(body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.patch("/{progress_payment_id}", response_model=ApiResponse[ProgressPaymentDetailResponse])
async def update_progress_payment(
    request: Request,
    progress_payment_id: UUID,
    body: ProgressPaymentUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PROGRESS_PAYMENTS_EDIT))],
    service: Annotated[ProgressPaymentService, Depends(get_progress_payment_service)],
) -> ApiResponse[ProgressPaymentDetailResponse]:
    """Update period or notes, or move the status (DRAFT, SUBMITTED, APPROVED).

    Approval additionally requires progress_payments.approve.
    """
    result = await service.update_progress_payment(
        progress_payment_id, body, current_user, http_request=request
    )
    return ApiResponse(data=result)


@router.post(
    "/{progress_payment_id}/items",
    response_model=ApiResponse[ProgressPaymentItemResponse],
    status_code=201,
)
async def add_progress_payment_item(
    request: Request,
    progress_payment_id: UUID,
    body: ProgressPaymentItemCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PROGRESS_PAYMENTS_EDIT))],
    service: Annotated[ProgressPaymentService, Depends(get_progress_payment_service)],
) -> ApiResponse[ProgressPaymentItemResponse]:
    """Add a work item to a draft; the progress payment total is recomputed."""
    result = await service.add_item(progress_payment_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.delete("/{progress_payment_id}", response_model=ApiResponse[DeletionResult])
async def delete_progress_payment(
    request: Request,
    progress_payment_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PROGRESS_PAYMENTS_DELETE))],
    service: Annotated[ProgressPaymentService, Depends(get_progress_payment_service)],
) -> ApiResponse[DeletionResult]:
    """Delete a draft progress payment and its items."""
    result = await service.delete_progress_payment(progress_payment_id, current_user, http_request=request)
    return ApiResponse(data=result)
