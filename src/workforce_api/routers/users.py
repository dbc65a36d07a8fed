"""User and role administration router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_list_query, get_rbac_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, MessageResponse, PaginatedResponse
from workforce_api.models.dto.rbac import (
    PermissionGroup,
    RoleCreate,
    RoleResponse,
    RoleUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from workforce_api.security.auth import require_permission
from workforce_api.security.rate_limit import SENSITIVE_OPERATION_LIMIT, limiter
from workforce_api.services.rbac_service import RbacService
from workforce_api.utils.query import ListQuery

router = APIRouter()


# =============================================================================
# Users
# =============================================================================


@router.get("/users", response_model=PaginatedResponse[UserResponse])
async def list_users(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_VIEW))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[UserResponse]:
    """List users. Requires users.view permission."""
    return await service.list_users(query)


@router.get("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_VIEW))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[UserResponse]:
    return ApiResponse(data=await service.get_user(user_id))


@router.post("/users", response_model=ApiResponse[UserResponse], status_code=201)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def create_user(
    request: Request,
    body: UserCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_CREATE))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[UserResponse]:
    """Create a user with role assignments. Requires users.create permission."""
    return ApiResponse(data=await service.create_user(body, current_user, http_request=request))


@router.patch("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    request: Request,
    user_id: UUID,
    body: UserUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_EDIT))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[UserResponse]:
    """Update a user. Requires users.edit permission."""
    return ApiResponse(data=await service.update_user(user_id, body, current_user, http_request=request))


@router.delete("/users/{user_id}", response_model=ApiResponse[MessageResponse])
async def delete_user(
    request: Request,
    user_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_DELETE))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[MessageResponse]:
    """Soft-delete a user. Requires users.delete permission."""
    await service.delete_user(user_id, current_user, http_request=request)
    return ApiResponse(data=MessageResponse(message="User deleted"))


# =============================================================================
# Roles
# =============================================================================


@router.get("/roles", response_model=ApiResponse[list[RoleResponse]])
async def list_roles(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_VIEW))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[list[RoleResponse]]:
    """List roles with their permission codes."""
    return ApiResponse(data=await service.list_roles())


@router.get("/roles/{role_id}", response_model=ApiResponse[RoleResponse])
async def get_role(
    role_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_VIEW))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[RoleResponse]:
    return ApiResponse(data=await service.get_role(role_id))


@router.post("/roles", response_model=ApiResponse[RoleResponse], status_code=201)
async def create_role(
    request: Request,
    body: RoleCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_CREATE))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[RoleResponse]:
    return ApiResponse(data=await service.create_role(body, current_user, http_request=request))


@router.patch("/roles/{role_id}", response_model=ApiResponse[RoleResponse])
async def update_role(
    request: Request,
    role_id: UUID,
    body: RoleUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_EDIT))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[RoleResponse]:
    return ApiResponse(data=await service.update_role(role_id, body, current_user, http_request=request))


@router.delete("/roles/{role_id}", response_model=ApiResponse[MessageResponse])
async def delete_role(
    request: Request,
    role_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_DELETE))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[MessageResponse]:
    """Delete a custom role; system roles and roles in use are rejected."""
    await service.delete_role(role_id, current_user, http_request=request)
    return ApiResponse(data=MessageResponse(message="Role deleted"))


@router.get("/permissions", response_model=ApiResponse[list[PermissionGroup]])
async def list_permissions(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.USERS_VIEW))],
    service: Annotated[RbacService, Depends(get_rbac_service)],
) -> ApiResponse[list[PermissionGroup]]:
    """Permission catalog grouped by module."""
    return ApiResponse(data=await service.list_permissions())
