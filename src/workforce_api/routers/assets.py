"""Assets router with assignment and return."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_asset_service, get_list_query
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, DeletionResult, PaginatedResponse
from workforce_api.models.dto.operations import (
    AssetAssignRequest,
    AssetCreate,
    AssetResponse,
    AssetReturnRequest,
    AssetUpdate,
)
from workforce_api.security.auth import require_permission
from workforce_api.services.asset_service import AssetService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[AssetResponse])
async def list_assets(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_VIEW))],
    service: Annotated[AssetService, Depends(get_asset_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[AssetResponse]:
    """List assets. Filters: status, category_id, worksite_id."""
    return await service.list_assets(query)


@router.get("/{asset_id}", response_model=ApiResponse[AssetResponse])
async def get_asset(
    asset_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_VIEW))],
    service: Annotated[AssetService, Depends(get_asset_service)],
) -> ApiResponse[AssetResponse]:
    return ApiResponse(data=await service.get_asset(asset_id))


@router.post("", response_model=ApiResponse[AssetResponse], status_code=201)
async def create_asset(
    request: Request,
    body: AssetCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_CREATE))],
    service: Annotated[AssetService, Depends(get_asset_service)],
) -> ApiResponse[AssetResponse]:
    return ApiResponse(data=await service.create_asset(body, current_user, http_request=request))


@router.patch("/{asset_id}", response_model=ApiResponse[AssetResponse])
async def update_asset(
    request: Request,
    asset_id: UUID,
    body: AssetUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_EDIT))],
    service: Annotated[AssetService, Depends(get_asset_service)],
) -> ApiResponse[AssetResponse]:
    return ApiResponse(data=await service.update_asset(asset_id, body, current_user, http_request=request))


@router.post("/{asset_id}/assign", response_model=ApiResponse[AssetResponse])
async def assign_asset(
    request: Request,
    asset_id: UUID,
    body: AssetAssignRequest,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_EDIT))],
    service: Annotated[AssetService, Depends(get_asset_service)],
) -> ApiResponse[AssetResponse]:
    """Hand an AVAILABLE asset to an employee."""
    return ApiResponse(data=await service.assign(asset_id, body, current_user, http_request=request))


@router.post("/{asset_id}/return", response_model=ApiResponse[AssetResponse])
async def return_asset(
    request: Request,
    asset_id: UUID,
    body: AssetReturnRequest,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_EDIT))],
    service: Annotated[AssetService, Depends(get_asset_service)],
) -> ApiResponse[AssetResponse]:
    """Close the open assignment; the asset becomes AVAILABLE."""
    return ApiResponse(data=await service.return_asset(asset_id, body, current_user, http_request=request))


@router.delete("/{asset_id}", response_model=ApiResponse[DeletionResult])
async def delete_asset(
    request: Request,
    asset_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.ASSETS_DELETE))],
    service: Annotated[AssetService, Depends(get_asset_service)],
) -> ApiResponse[DeletionResult]:
    """Delete an asset without history, otherwise retire it."""
    return ApiResponse(data=await service.delete_asset(asset_id, current_user, http_request=request))
