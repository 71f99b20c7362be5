"""Lesson schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.crm.models.enums import LessonPaymentStatus, LessonStatus, LessonType
from src.crm.schemas.common import HorseRef, OptionalText, RequiredText, UserRef, UTCDateTime

MIN_LESSON_MINUTES = 15
MAX_LESSON_MINUTES = 240


class LessonCreate(BaseModel):
    title: RequiredText = Field(max_length=200)
    description: OptionalText = Field(default=None, max_length=2000)
    instructor_id: UUID
    member_id: UUID
    horse_id: UUID | None = None
    scheduled_date: UTCDateTime
    duration_minutes: int = Field(default=60, ge=MIN_LESSON_MINUTES, le=MAX_LESSON_MINUTES)
    lesson_type: LessonType = LessonType.PRIVATE
    status: LessonStatus = LessonStatus.SCHEDULED
    cost: float = Field(default=0, ge=0)
    payment_status: LessonPaymentStatus = LessonPaymentStatus.PENDING
    notes: OptionalText = Field(default=None, max_length=2000)


class LessonUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    title: RequiredText | None = Field(default=None, max_length=200)
    description: OptionalText = Field(default=None, max_length=2000)
    instructor_id: UUID | None = None
    member_id: UUID | None = None
    horse_id: UUID | None = None
    scheduled_date: UTCDateTime | None = None
    duration_minutes: int | None = Field(
        default=None, ge=MIN_LESSON_MINUTES, le=MAX_LESSON_MINUTES
    )
    lesson_type: LessonType | None = None
    status: LessonStatus | None = None
    cost: float | None = Field(default=None, ge=0)
    payment_status: LessonPaymentStatus | None = None
    notes: OptionalText = Field(default=None, max_length=2000)


class LessonRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    instructor_id: UUID
    instructor: UserRef | None = None
    member_id: UUID
    member: UserRef | None = None
    horse_id: UUID | None
    horse: HorseRef | None = None
    scheduled_date: datetime
    end_time: datetime
    duration_minutes: int
    lesson_type: LessonType
    status: LessonStatus
    cost: float
    payment_status: LessonPaymentStatus
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
