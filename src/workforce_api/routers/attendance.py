"""Attendance router: daily records and monthly period workflow."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_attendance_service, get_list_query
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.attendance import (
    AttendancePeriodResponse,
    AttendanceRecordInput,
    AttendanceRecordResponse,
    BulkAttendanceRequest,
    BulkAttendanceResult,
    PeriodRequest,
)
from workforce_api.models.dto.common import ApiResponse, MessageResponse, PaginatedResponse
from workforce_api.security.auth import require_permission
from workforce_api.services.attendance_service import AttendanceService
from workforce_api.utils.query import ListQuery

router = APIRouter()


# =============================================================================
# Records
# =============================================================================


@router.get("/records", response_model=PaginatedResponse[AttendanceRecordResponse])
async def list_records(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_VIEW))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[AttendanceRecordResponse]:
    """List attendance records.

    Filters: employee_id, worksite_id, status, date_from, date_to.
    """
    return await service.list_records(query)


@router.put("/records", response_model=ApiResponse[AttendanceRecordResponse])
async def upsert_record(
    request: Request,
    body: AttendanceRecordInput,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_CREATE))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[AttendanceRecordResponse]:
    """Create or replace the record of an employee for a day."""
    return ApiResponse(data=await service.upsert_record(body, current_user, http_request=request))


@router.post("/records/bulk", response_model=ApiResponse[BulkAttendanceResult])
async def bulk_upsert_records(
    request: Request,
    body: BulkAttendanceRequest,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_CREATE))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[BulkAttendanceResult]:
    """Write many records at once; rejected rows are reported, not raised."""
    return ApiResponse(data=await service.bulk_upsert(body, current_user, http_request=request))


@router.delete("/records/{record_id}", response_model=ApiResponse[MessageResponse])
async def delete_record(
    request: Request,
    record_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_EDIT))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[MessageResponse]:
    await service.delete_record(record_id, current_user, http_request=request)
    return ApiResponse(data=MessageResponse(message="Attendance record deleted"))


# =============================================================================
# Periods
# =============================================================================


@router.get("/periods", response_model=PaginatedResponse[AttendancePeriodResponse])
async def list_periods(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_VIEW))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[AttendancePeriodResponse]:
    return await service.list_periods(query)


@router.post("/periods", response_model=ApiResponse[AttendancePeriodResponse])
async def get_or_create_period(
    body: PeriodRequest,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_VIEW))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[AttendancePeriodResponse]:
    """Period of a worksite for a month, opened on first use."""
    return ApiResponse(data=await service.get_or_create_period(body, current_user))


@router.get("/periods/{period_id}", response_model=ApiResponse[AttendancePeriodResponse])
async def get_period(
    period_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_VIEW))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[AttendancePeriodResponse]:
    return ApiResponse(data=await service.get_period(period_id))


@router.post("/periods/{period_id}/submit", response_model=ApiResponse[AttendancePeriodResponse])
async def submit_period(
    request: Request,
    period_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_EDIT))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[AttendancePeriodResponse]:
    """Submit an OPEN period for approval."""
    return ApiResponse(data=await service.submit_period(period_id, current_user, http_request=request))


@router.post("/periods/{period_id}/approve", response_model=ApiResponse[AttendancePeriodResponse])
async def approve_period(
    request: Request,
    period_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_APPROVE))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[AttendancePeriodResponse]:
    return ApiResponse(data=await service.approve_period(period_id, current_user, http_request=request))


@router.post("/periods/{period_id}/lock", response_model=ApiResponse[AttendancePeriodResponse])
async def lock_period(
    request: Request,
    period_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ATTENDANCE_APPROVE))],
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> ApiResponse[AttendancePeriodResponse]:
    """Lock an APPROVED period; its records become read-only."""
    return ApiResponse(data=await service.lock_period(period_id, current_user, http_request=request))
