"""Event models - facility events with capacity-limited registration."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.crm.models.base import utc_now
from src.crm.models.enums import EventStatus, ParticipantPaymentStatus


class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    event_type: str = Field(max_length=20, index=True)
    start_date: datetime = Field(index=True, sa_type=DateTime)
    end_date: datetime = Field(sa_type=DateTime)
    location: str | None = Field(default=None, max_length=200)
    max_participants: int | None = Field(default=None)
    registration_fee: float = Field(default=0)
    organizer_id: UUID = Field(foreign_key="users.id", index=True)
    status: str = Field(default=EventStatus.UPCOMING.value, max_length=20, index=True)
    requirements: str | None = Field(default=None, max_length=2000)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class EventParticipant(SQLModel, table=True):
    """A registered participant. Ordered by registration time."""

    __tablename__ = "event_participants"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_participant"),)

    id: int | None = Field(default=None, primary_key=True)
    event_id: UUID = Field(foreign_key="events.id", index=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    registered_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    payment_status: str = Field(default=ParticipantPaymentStatus.PENDING.value, max_length=20)


class EventWaitlistEntry(SQLModel, table=True):
    """A waitlisted user. FIFO by (added_at, id)."""

    __tablename__ = "event_waitlist"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_waitlist"),)

    id: int | None = Field(default=None, primary_key=True)
    event_id: UUID = Field(foreign_key="events.id", index=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    added_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
