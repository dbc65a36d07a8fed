"""Site transfers router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_list_query, get_transfer_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, PaginatedResponse
from workforce_api.models.dto.operations import TransferCreate, TransferDecision, TransferResponse
from workforce_api.security.auth import require_permission
from workforce_api.services.transfer_service import TransferService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[TransferResponse])
async def list_transfers(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.TRANSFERS_VIEW))],
    service: Annotated[TransferService, Depends(get_transfer_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[TransferResponse]:
    return await service.list_transfers(query)


@router.get("/{transfer_id}", response_model=ApiResponse[TransferResponse])
async def get_transfer(
    transfer_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.TRANSFERS_VIEW))],
    service: Annotated[TransferService, Depends(get_transfer_service)],
) -> ApiResponse[TransferResponse]:
    return ApiResponse(data=await service.get_transfer(transfer_id))


@router.post("", response_model=ApiResponse[TransferResponse], status_code=201)
async def create_transfer(
    request: Request,
    body: TransferCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.TRANSFERS_CREATE))],
    service: Annotated[TransferService, Depends(get_transfer_service)],
) -> ApiResponse[TransferResponse]:
    """Request a move from the employee's current worksite."""
    return ApiResponse(data=await service.create_transfer(body, current_user, http_request=request))


@router.post("/{transfer_id}/decision", response_model=ApiResponse[TransferResponse])
async def decide_transfer(
    request: Request,
    transfer_id: UUID,
    body: TransferDecision,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.TRANSFERS_APPROVE))],
    service: Annotated[TransferService, Depends(get_transfer_service)],
) -> ApiResponse[TransferResponse]:
    """Approve, reject, cancel or complete a transfer.

    Completion moves the employee's employment to the target worksite.
    """
    return ApiResponse(data=await service.decide(transfer_id, body, current_user, http_request=request))
