"""Payroll router: runs, calculation, workflow, items and entries."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_list_query, get_payroll_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, MessageResponse, PaginatedResponse
from workforce_api.models.dto.payroll import (
    ManualAdjustmentRequest,
    PayrollEntryCreate,
    PayrollEntryResponse,
    PayrollItemResponse,
    PayrollRunCreate,
    PayrollRunDetailResponse,
    PayrollRunResponse,
    PayrollRunUpdate,
)
from workforce_api.security.auth import require_permission
from workforce_api.services.payroll_service import PayrollService
from workforce_api.utils.query import ListQuery

router = APIRouter()


# =============================================================================
# Runs
# =============================================================================


@router.get("/runs", response_model=PaginatedResponse[PayrollRunResponse])
async def list_runs(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_VIEW))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[PayrollRunResponse]:
    """List payroll runs. Filters: period, worksite_id, status."""
    return await service.list_runs(query)


@router.get("/runs/{run_id}", response_model=ApiResponse[PayrollRunDetailResponse])
async def get_run(
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_VIEW))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    """Run with its items."""
    return ApiResponse(data=await service.get_run(run_id))


@router.post("/runs", response_model=ApiResponse[PayrollRunDetailResponse], status_code=201)
async def create_run(
    request: Request,
    body: PayrollRunCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_CREATE))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    return ApiResponse(data=await service.create_run(body, current_user, http_request=request))


@router.patch("/runs/{run_id}", response_model=ApiResponse[PayrollRunDetailResponse])
async def update_run(
    request: Request,
    run_id: UUID,
    body: PayrollRunUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_EDIT))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    return ApiResponse(data=await service.update_run(run_id, body, current_user, http_request=request))


@router.post("/runs/{run_id}/calculate", response_model=ApiResponse[PayrollRunDetailResponse])
async def calculate_run(
    request: Request,
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_EDIT))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    """(Re)compute every item of a DRAFT or CALCULATED run."""
    return ApiResponse(data=await service.calculate(run_id, current_user, http_request=request))


@router.post("/runs/{run_id}/approve", response_model=ApiResponse[PayrollRunDetailResponse])
async def approve_run(
    request: Request,
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_APPROVE))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    return ApiResponse(data=await service.approve(run_id, current_user, http_request=request))


@router.post("/runs/{run_id}/pay", response_model=ApiResponse[PayrollRunDetailResponse])
async def pay_run(
    request: Request,
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_APPROVE))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    return ApiResponse(data=await service.mark_paid(run_id, current_user, http_request=request))


@router.post("/runs/{run_id}/lock", response_model=ApiResponse[PayrollRunDetailResponse])
async def lock_run(
    request: Request,
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_APPROVE))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    return ApiResponse(data=await service.lock(run_id, current_user, http_request=request))


@router.post("/runs/{run_id}/cancel", response_model=ApiResponse[PayrollRunDetailResponse])
async def cancel_run(
    request: Request,
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_APPROVE))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    return ApiResponse(data=await service.cancel(run_id, current_user, http_request=request))


@router.post("/runs/{run_id}/reopen", response_model=ApiResponse[PayrollRunDetailResponse])
async def reopen_run(
    request: Request,
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_EDIT))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollRunDetailResponse]:
    """Send a CALCULATED run back to DRAFT."""
    return ApiResponse(data=await service.reopen(run_id, current_user, http_request=request))


# =============================================================================
# Items
# =============================================================================


@router.patch("/runs/{run_id}/items/{item_id}", response_model=ApiResponse[PayrollItemResponse])
async def adjust_item(
    request: Request,
    run_id: UUID,
    item_id: UUID,
    body: ManualAdjustmentRequest,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_EDIT))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollItemResponse]:
    """Apply a manual adjustment to one item and refresh run totals."""
    result = await service.adjust_item(run_id, item_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


# =============================================================================
# Entries
# =============================================================================


@router.get("/runs/{run_id}/entries", response_model=ApiResponse[list[PayrollEntryResponse]])
async def list_entries(
    run_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_VIEW))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[list[PayrollEntryResponse]]:
    return ApiResponse(data=await service.list_entries(run_id))


@router.post("/runs/{run_id}/entries", response_model=ApiResponse[PayrollEntryResponse], status_code=201)
async def add_entry(
    request: Request,
    run_id: UUID,
    body: PayrollEntryCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_EDIT))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollEntryResponse]:
    """Add an earning or deduction; it counts once approved and recalculated."""
    return ApiResponse(data=await service.add_entry(run_id, body, current_user, http_request=request))


@router.post(
    "/runs/{run_id}/entries/{entry_id}/approve",
    response_model=ApiResponse[PayrollEntryResponse],
)
async def approve_entry(
    request: Request,
    run_id: UUID,
    entry_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_APPROVE))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[PayrollEntryResponse]:
    result = await service.approve_entry(run_id, entry_id, current_user, http_request=request)
    return ApiResponse(data=result)


@router.delete("/runs/{run_id}/entries/{entry_id}", response_model=ApiResponse[MessageResponse])
async def delete_entry(
    request: Request,
    run_id: UUID,
    entry_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.PAYROLL_EDIT))],
    service: Annotated[PayrollService, Depends(get_payroll_service)],
) -> ApiResponse[MessageResponse]:
    await service.delete_entry(run_id, entry_id, current_user, http_request=request)
    return ApiResponse(data=MessageResponse(message="Payroll entry deleted"))
