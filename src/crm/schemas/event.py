"""Event schemas for API request/response."""

from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from src.crm.models.enums import EventStatus, EventType, ParticipantPaymentStatus
from src.crm.schemas.common import OptionalText, RequiredText, UserRef, UTCDateTime


class EventCreate(BaseModel):
    title: RequiredText = Field(max_length=200)
    description: OptionalText = Field(default=None, max_length=2000)
    event_type: EventType
    start_date: UTCDateTime
    end_date: UTCDateTime
    location: OptionalText = Field(default=None, max_length=200)
    max_participants: int | None = Field(default=None, ge=1)
    registration_fee: float = Field(default=0, ge=0)
    status: EventStatus = EventStatus.UPCOMING
    requirements: OptionalText = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(BaseModel):
    """Partial update. Date ordering is re-checked against stored values by the service."""

    title: RequiredText | None = Field(default=None, max_length=200)
    description: OptionalText = Field(default=None, max_length=2000)
    event_type: EventType | None = None
    start_date: UTCDateTime | None = None
    end_date: UTCDateTime | None = None
    location: OptionalText = Field(default=None, max_length=200)
    max_participants: int | None = Field(default=None, ge=1)
    registration_fee: float | None = Field(default=None, ge=0)
    status: EventStatus | None = None
    requirements: OptionalText = Field(default=None, max_length=2000)


class RegistrationRequest(BaseModel):
    """Body for register/unregister. Staff may act for another user via `user_id`."""

    user_id: UUID | None = None


class ParticipantPaymentUpdate(BaseModel):
    payment_status: ParticipantPaymentStatus


class ParticipantRead(BaseModel):
    user_id: UUID
    user: UserRef | None = None
    registered_at: datetime
    payment_status: ParticipantPaymentStatus

    model_config = {"from_attributes": True}


class WaitlistEntryRead(BaseModel):
    user_id: UUID
    user: UserRef | None = None
    added_at: datetime

    model_config = {"from_attributes": True}


class EventRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    event_type: EventType
    start_date: datetime
    end_date: datetime
    location: str | None
    max_participants: int | None
    registration_fee: float
    organizer_id: UUID
    organizer: UserRef | None = None
    status: EventStatus
    requirements: str | None
    is_active: bool
    participants: list[ParticipantRead] = []
    waitlist: list[WaitlistEntryRead] = []
    participant_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RegistrationResult(BaseModel):
    """Outcome of a register/unregister call."""

    success: bool = True
    message: str
    waitlisted: bool = False
    promoted_user_id: UUID | None = None
    data: EventRead
