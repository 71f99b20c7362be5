"""User model - staff, members and guests of the facility."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from src.crm.models.base import utc_now
from src.crm.models.enums import MembershipTier, UserRole


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    role: str = Field(default=UserRole.MEMBER.value, max_length=20, index=True)
    phone: str | None = Field(default=None, max_length=50)
    emergency_contact_name: str | None = Field(default=None, max_length=200)
    emergency_contact_phone: str | None = Field(default=None, max_length=50)
    emergency_contact_relationship: str | None = Field(default=None, max_length=100)
    membership_tier: str = Field(default=MembershipTier.BASIC.value, max_length=20)
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
