"""Horse schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.crm.models.enums import BoardingType, HorseGender, VaccinationStatus
from src.crm.schemas.common import OptionalText, RequiredText, UserRef, UTCDateTime


class HorseCreate(BaseModel):
    name: RequiredText = Field(max_length=100)
    breed: RequiredText = Field(max_length=100)
    age: int = Field(ge=1, le=50)
    gender: HorseGender
    color: RequiredText = Field(max_length=50)
    markings: OptionalText = Field(default=None, max_length=500)
    owner_id: UUID | None = None
    boarding_type: BoardingType = BoardingType.FULL
    stall_number: OptionalText = Field(default=None, max_length=20)
    medical_notes: OptionalText = Field(default=None, max_length=2000)
    dietary_restrictions: OptionalText = Field(default=None, max_length=1000)
    last_vet_visit: UTCDateTime | None = None
    next_vet_visit: UTCDateTime | None = None
    vaccination_status: VaccinationStatus = VaccinationStatus.CURRENT
    insurance_info: OptionalText = Field(default=None, max_length=500)
    registration_number: OptionalText = Field(default=None, max_length=100)


class HorseUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    name: RequiredText | None = Field(default=None, max_length=100)
    breed: RequiredText | None = Field(default=None, max_length=100)
    age: int | None = Field(default=None, ge=1, le=50)
    gender: HorseGender | None = None
    color: RequiredText | None = Field(default=None, max_length=50)
    markings: OptionalText = Field(default=None, max_length=500)
    owner_id: UUID | None = None
    boarding_type: BoardingType | None = None
    stall_number: OptionalText = Field(default=None, max_length=20)
    medical_notes: OptionalText = Field(default=None, max_length=2000)
    dietary_restrictions: OptionalText = Field(default=None, max_length=1000)
    last_vet_visit: UTCDateTime | None = None
    next_vet_visit: UTCDateTime | None = None
    vaccination_status: VaccinationStatus | None = None
    insurance_info: OptionalText = Field(default=None, max_length=500)
    registration_number: OptionalText = Field(default=None, max_length=100)


class HorseRead(BaseModel):
    id: UUID
    name: str
    breed: str
    age: int
    gender: HorseGender
    color: str
    markings: str | None
    owner_id: UUID | None
    owner: UserRef | None = None
    boarding_type: BoardingType
    stall_number: str | None
    medical_notes: str | None
    dietary_restrictions: str | None
    last_vet_visit: datetime | None
    next_vet_visit: datetime | None
    vaccination_status: VaccinationStatus
    insurance_info: str | None
    registration_number: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
