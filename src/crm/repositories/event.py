"""Repositories for Event and its participant/waitlist rows."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import col, select

from src.crm.models import Event, EventParticipant, EventStatus, EventType, EventWaitlistEntry
from src.crm.repositories.base import BaseRepository
from src.crm.schemas.pagination import PageParams

OPEN_STATUSES = (EventStatus.UPCOMING.value, EventStatus.ONGOING.value)


@dataclass
class EventFilters:
    event_type: EventType | None = None
    status: EventStatus | None = None
    is_active: bool | None = None


class EventRepository(BaseRepository[Event]):
    model = Event

    async def list_all(self, filters: EventFilters, params: PageParams) -> tuple[list[Event], int]:
        """List events by start date, soonest first."""
        query = select(Event)
        if filters.event_type is not None:
            query = query.where(Event.event_type == filters.event_type.value)
        if filters.status is not None:
            query = query.where(Event.status == filters.status.value)
        if filters.is_active is not None:
            query = query.where(Event.is_active == filters.is_active)
        return await self.paginate(query, params, [col(Event.start_date).asc()])

    async def count_active(self, now: datetime) -> int:
        """Active events that are upcoming or ongoing and have not ended yet."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Event)
            .where(
                Event.is_active == True,  # noqa: E712
                col(Event.status).in_(OPEN_STATUSES),
                Event.end_date >= now,
            )
        )
        return result.scalar_one()

    async def next_upcoming(self, now: datetime, limit: int = 3) -> list[Event]:
        result = await self.session.execute(
            select(Event)
            .where(
                Event.is_active == True,  # noqa: E712
                Event.status == EventStatus.UPCOMING.value,
                Event.start_date >= now,
            )
            .order_by(col(Event.start_date).asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def latest(self) -> Event | None:
        result = await self.session.execute(
            select(Event).order_by(col(Event.created_at).desc()).limit(1)
        )
        return result.scalar_one_or_none()


class EventParticipantRepository(BaseRepository[EventParticipant]):
    model = EventParticipant

    async def list_for_event(self, event_id: UUID) -> list[EventParticipant]:
        result = await self.session.execute(
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .order_by(col(EventParticipant.registered_at), col(EventParticipant.id))
        )
        return list(result.scalars().all())

    async def get_for_user(self, event_id: UUID, user_id: UUID) -> EventParticipant | None:
        result = await self.session.execute(
            select(EventParticipant).where(
                EventParticipant.event_id == event_id,
                EventParticipant.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_for_events(self, event_ids: Sequence[UUID]) -> dict[UUID, int]:
        if not event_ids:
            return {}
        result = await self.session.execute(
            select(EventParticipant.event_id, func.count())
            .where(col(EventParticipant.event_id).in_(event_ids))
            .group_by(col(EventParticipant.event_id))
        )
        return {event_id: count for event_id, count in result.all()}

    async def delete_for_event(self, event_id: UUID) -> None:
        await self.session.execute(
            delete(EventParticipant).where(col(EventParticipant.event_id) == event_id)
        )


class EventWaitlistRepository(BaseRepository[EventWaitlistEntry]):
    model = EventWaitlistEntry

    async def list_for_event(self, event_id: UUID) -> list[EventWaitlistEntry]:
        """Waitlist in FIFO order."""
        result = await self.session.execute(
            select(EventWaitlistEntry)
            .where(EventWaitlistEntry.event_id == event_id)
            .order_by(col(EventWaitlistEntry.added_at), col(EventWaitlistEntry.id))
        )
        return list(result.scalars().all())

    async def get_for_user(self, event_id: UUID, user_id: UUID) -> EventWaitlistEntry | None:
        result = await self.session.execute(
            select(EventWaitlistEntry).where(
                EventWaitlistEntry.event_id == event_id,
                EventWaitlistEntry.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def delete_for_event(self, event_id: UUID) -> None:
        await self.session.execute(
            delete(EventWaitlistEntry).where(col(EventWaitlistEntry.event_id) == event_id)
        )
