from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, EmailStr, Field
from zxcvbn import zxcvbn

from src.crm.models.enums import MembershipTier, UserRole
from src.crm.schemas.common import OptionalText, RequiredText

# Minimum zxcvbn score (0-4 scale): 2 = "somewhat guessable", resists online attacks
MIN_PASSWORD_SCORE = 2


def validate_password_strength(value: str) -> str:
    """Reject passwords zxcvbn scores below MIN_PASSWORD_SCORE."""
    result = zxcvbn(value)
    if result["score"] < MIN_PASSWORD_SCORE:
        feedback = result.get("feedback", {})
        warning = feedback.get("warning", "")
        suggestions = feedback.get("suggestions", [])
        if warning:
            raise ValueError(f"Weak password: {warning}")
        if suggestions:
            raise ValueError(f"Weak password: {suggestions[0]}")
        raise ValueError("Password is too weak. Use a longer password with a mix of characters.")
    return value


def normalize_email(value: str) -> str:
    return value.strip().lower()


NormalizedEmail = Annotated[EmailStr, AfterValidator(normalize_email)]
Password = Annotated[
    str, Field(min_length=8, max_length=128), AfterValidator(validate_password_strength)
]


class UserProfileFields(BaseModel):
    phone: OptionalText = Field(default=None, max_length=50)
    emergency_contact_name: OptionalText = Field(default=None, max_length=200)
    emergency_contact_phone: OptionalText = Field(default=None, max_length=50)
    emergency_contact_relationship: OptionalText = Field(default=None, max_length=100)
    membership_tier: MembershipTier = MembershipTier.BASIC
    notes: OptionalText = Field(default=None, max_length=2000)


class UserCreate(UserProfileFields):
    """Staff-side user creation (admin only); any role may be assigned."""

    first_name: RequiredText = Field(max_length=100)
    last_name: RequiredText = Field(max_length=100)
    email: NormalizedEmail
    password: Password
    role: UserRole = UserRole.MEMBER


class UserUpdate(BaseModel):
    """Partial profile update. `role` and `is_active` are honoured for admins only."""

    first_name: RequiredText | None = Field(default=None, max_length=100)
    last_name: RequiredText | None = Field(default=None, max_length=100)
    email: NormalizedEmail | None = None
    phone: OptionalText = Field(default=None, max_length=50)
    emergency_contact_name: OptionalText = Field(default=None, max_length=200)
    emergency_contact_phone: OptionalText = Field(default=None, max_length=50)
    emergency_contact_relationship: OptionalText = Field(default=None, max_length=100)
    membership_tier: MembershipTier | None = None
    notes: OptionalText = Field(default=None, max_length=2000)
    role: UserRole | None = None
    is_active: bool | None = None


class UserRead(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    role: UserRole
    phone: str | None
    emergency_contact_name: str | None
    emergency_contact_phone: str | None
    emergency_contact_relationship: str | None
    membership_tier: MembershipTier
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
