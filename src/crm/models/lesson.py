"""Lesson model - a riding lesson booked between an instructor and a member."""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel

from src.crm.models.base import utc_now
from src.crm.models.enums import LessonPaymentStatus, LessonStatus, LessonType


class Lesson(SQLModel, table=True):
    __tablename__ = "lessons"
    __table_args__ = (Index("ix_lessons_instructor_schedule", "instructor_id", "scheduled_date"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    instructor_id: UUID = Field(foreign_key="users.id", index=True)
    member_id: UUID = Field(foreign_key="users.id", index=True)
    horse_id: UUID | None = Field(
        default=None, foreign_key="horses.id", index=True, ondelete="SET NULL"
    )
    scheduled_date: datetime = Field(index=True, sa_type=DateTime)
    duration_minutes: int = Field(default=60)
    lesson_type: str = Field(default=LessonType.PRIVATE.value, max_length=20)
    status: str = Field(default=LessonStatus.SCHEDULED.value, max_length=20, index=True)
    cost: float = Field(default=0)
    payment_status: str = Field(default=LessonPaymentStatus.PENDING.value, max_length=20)
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    @property
    def end_time(self) -> datetime:
        return self.scheduled_date + timedelta(minutes=self.duration_minutes)
