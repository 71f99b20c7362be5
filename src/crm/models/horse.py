"""Horse model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from src.crm.models.base import utc_now
from src.crm.models.enums import BoardingType, VaccinationStatus


class Horse(SQLModel, table=True):
    __tablename__ = "horses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, index=True)
    breed: str = Field(max_length=100, index=True)
    age: int
    gender: str = Field(max_length=20)
    color: str = Field(max_length=50)
    markings: str | None = Field(default=None, max_length=500)
    owner_id: UUID | None = Field(
        default=None, foreign_key="users.id", index=True, ondelete="SET NULL"
    )
    boarding_type: str = Field(default=BoardingType.FULL.value, max_length=20, index=True)
    stall_number: str | None = Field(default=None, max_length=20, index=True)
    medical_notes: str | None = Field(default=None, max_length=2000)
    dietary_restrictions: str | None = Field(default=None, max_length=1000)
    last_vet_visit: datetime | None = Field(default=None, sa_type=DateTime)
    next_vet_visit: datetime | None = Field(default=None, sa_type=DateTime)
    vaccination_status: str = Field(default=VaccinationStatus.CURRENT.value, max_length=20)
    insurance_info: str | None = Field(default=None, max_length=500)
    registration_number: str | None = Field(default=None, max_length=100)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
