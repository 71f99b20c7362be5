from pydantic import BaseModel, Field

from src.crm.schemas.common import RequiredText
from src.crm.schemas.user import NormalizedEmail, Password, UserProfileFields, UserRead


class LoginRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(min_length=1, max_length=128)


class RegisterRequest(UserProfileFields):
    """Public self-registration. The account is always created as a member."""

    first_name: RequiredText = Field(max_length=100)
    last_name: RequiredText = Field(max_length=100)
    email: NormalizedEmail
    password: Password


class AuthResponse(BaseModel):
    """Returned by register and login: `{success, token, user}`."""

    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserRead


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: Password
