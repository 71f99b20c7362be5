"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, status
from starlette.requests import Request

from src.crm.api.dependencies import AuthServiceDep, CurrentUser
from src.crm.core.config import get_settings
from src.crm.core.rate_limit import limiter
from src.crm.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
)
from src.crm.schemas.common import ApiResponse, MessageResponse
from src.crm.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

USER_EXAMPLE = {
    "id": "550e8400-e29b-41d4-a716-446655440000",
    "first_name": "Anna",
    "last_name": "Petrova",
    "email": "anna@example.com",
    "role": "member",
    "phone": None,
    "emergency_contact_name": None,
    "emergency_contact_phone": None,
    "emergency_contact_relationship": None,
    "membership_tier": "basic",
    "notes": None,
    "is_active": True,
    "created_at": "2024-01-15T10:30:00",
    "updated_at": "2024-01-15T10:30:00",
}


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {
            "description": "Member account created",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                        "user": USER_EXAMPLE,
                    }
                }
            },
        },
        400: {"description": "Validation error or email already registered"},
        429: {"description": "Too many registration attempts"},
    },
)
@limiter.limit(lambda: get_settings().register_rate_limit)
async def register(
    request: Request, data: RegisterRequest, service: AuthServiceDep
) -> AuthResponse:
    """Self-register a member account and return an access token."""
    try:
        token, user = await service.register(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        200: {"description": "Successful authentication"},
        400: {"description": "Invalid credentials or deactivated account"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit(lambda: get_settings().login_rate_limit)
async def login(request: Request, data: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    """Authenticate with email and password."""
    try:
        result = await service.authenticate(data.email, data.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )

    token, user = result
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    responses={401: {"description": "Not authenticated"}},
)
async def me(current_user: CurrentUser) -> ApiResponse[UserRead]:
    """Get the current authenticated user."""
    return ApiResponse(data=UserRead.model_validate(current_user))


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={
        400: {"description": "Current password incorrect or new password too weak"},
        401: {"description": "Not authenticated"},
    },
)
async def change_password(
    data: ChangePasswordRequest,
    current_user: CurrentUser,
    service: AuthServiceDep,
) -> MessageResponse:
    """Change the current user's password."""
    try:
        await service.change_password(current_user, data.current_password, data.new_password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return MessageResponse(message="Password changed successfully")
