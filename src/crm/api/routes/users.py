"""User management endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.crm.api.dependencies import (
    AdminUser,
    CurrentUser,
    Pagination,
    StaffUser,
    UserServiceDep,
    is_staff,
)
from src.crm.models import UserRole
from src.crm.repositories import UserFilters
from src.crm.schemas.common import ApiResponse, ArchiveRequest, MessageResponse
from src.crm.schemas.pagination import PaginatedResponse, PaginationMeta
from src.crm.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=PaginatedResponse[UserRead],
    responses={403: {"description": "Staff role required"}},
)
async def list_users(
    _: StaffUser,
    service: UserServiceDep,
    params: Pagination,
    role: UserRole | None = None,
    is_active: bool | None = None,
    search: Annotated[str | None, Query(max_length=100, description="Name or email")] = None,
) -> PaginatedResponse[UserRead]:
    """List users, newest first."""
    users, total = await service.list_users(
        UserFilters(role=role, is_active=is_active, search=search), params
    )
    return PaginatedResponse(
        data=[UserRead.model_validate(u) for u in users],
        pagination=PaginationMeta.build(params.page, params.limit, total),
    )


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    responses={
        403: {"description": "Not your profile and not staff"},
        404: {"description": "User not found"},
    },
)
async def get_user(
    user_id: UUID, current_user: CurrentUser, service: UserServiceDep
) -> ApiResponse[UserRead]:
    """Get a user. Members may only read their own profile."""
    if not is_staff(current_user) and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this user",
        )

    user = await service.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return ApiResponse(data=UserRead.model_validate(user))


@router.post(
    "",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error or email already registered"},
        403: {"description": "Admin role required"},
    },
)
async def create_user(
    data: UserCreate, _: AdminUser, service: UserServiceDep
) -> ApiResponse[UserRead]:
    """Create a user with any role."""
    try:
        user = await service.create_user(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse(data=UserRead.model_validate(user), message="User created")


@router.put(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    responses={
        400: {"description": "Validation error, duplicate email or last admin"},
        403: {"description": "Not allowed to change this user or these fields"},
        404: {"description": "User not found"},
    },
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> ApiResponse[UserRead]:
    """Update a user. Users edit their own profile; admins edit anyone, including role."""
    user = await service.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        user = await service.update_user(user, data, current_user)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse(data=UserRead.model_validate(user), message="User updated")


@router.patch(
    "/{user_id}/archive",
    response_model=ApiResponse[UserRead],
    responses={
        400: {"description": "Would leave no active admin"},
        404: {"description": "User not found"},
    },
)
async def archive_user(
    user_id: UUID,
    data: ArchiveRequest,
    _: AdminUser,
    service: UserServiceDep,
) -> ApiResponse[UserRead]:
    """Archive or restore a user. Omitting `is_active` toggles."""
    user = await service.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        user = await service.set_active(user, data.is_active)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    message = "User restored" if user.is_active else "User archived"
    return ApiResponse(data=UserRead.model_validate(user), message=message)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Last admin, or user still referenced by other records"},
        404: {"description": "User not found"},
    },
)
async def delete_user(user_id: UUID, _: AdminUser, service: UserServiceDep) -> MessageResponse:
    """Permanently delete a user."""
    user = await service.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        await service.delete_user(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return MessageResponse(message="User deleted")
