"""Event management and the registration / waitlist state machine.

Per (event, user) the states are: not registered, waitlisted, registered.

* register: registered while seats remain (or the event is uncapped) and
  nobody is queued, otherwise appended to the waitlist.
* unregister: a registered user frees a seat and the head of the waitlist is
  promoted; a waitlisted user just leaves the queue.
* raising or removing `max_participants` promotes waitlisted users in order
  until the event is full again.
* Registering twice, in either state, is rejected.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.models import (
    Event,
    EventParticipant,
    EventWaitlistEntry,
    ParticipantPaymentStatus,
    User,
)
from src.crm.models.base import utc_now
from src.crm.repositories import (
    EventFilters,
    EventParticipantRepository,
    EventRepository,
    EventWaitlistRepository,
    UserRepository,
)
from src.crm.repositories.event import OPEN_STATUSES
from src.crm.schemas.common import UserRef, model_values
from src.crm.schemas.event import (
    EventCreate,
    EventRead,
    EventUpdate,
    ParticipantRead,
    WaitlistEntryRead,
)
from src.crm.schemas.pagination import PageParams

logger = get_logger(__name__)

REQUIRED_FIELDS = ("title", "event_type", "start_date", "end_date", "registration_fee", "status")


def initial_payment_status(registration_fee: float) -> ParticipantPaymentStatus:
    """Free events need no payment; paid events start pending."""
    if registration_fee <= 0:
        return ParticipantPaymentStatus.PAID
    return ParticipantPaymentStatus.PENDING


def has_open_seat(participant_count: int, max_participants: int | None) -> bool:
    return max_participants is None or participant_count < max_participants


@dataclass
class RegistrationOutcome:
    waitlisted: bool


@dataclass
class UnregistrationOutcome:
    was_waitlisted: bool
    promoted_user_id: UUID | None = None


class EventService:
    def __init__(
        self,
        event_repo: EventRepository,
        participant_repo: EventParticipantRepository,
        waitlist_repo: EventWaitlistRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.event_repo = event_repo
        self.participant_repo = participant_repo
        self.waitlist_repo = waitlist_repo
        self.user_repo = user_repo
        self.session = session

    async def get_by_id(self, event_id: UUID) -> Event | None:
        return await self.event_repo.get_by_id(event_id)

    async def list_events(
        self, filters: EventFilters, params: PageParams
    ) -> tuple[list[EventRead], int]:
        events, total = await self.event_repo.list_all(filters, params)
        counts = await self.participant_repo.count_for_events([e.id for e in events])
        organizers = await self.user_repo.get_many_by_ids(e.organizer_id for e in events)
        reads = [
            EventRead.model_validate(event).model_copy(
                update={
                    "organizer": _user_ref(organizers, event.organizer_id),
                    "participant_count": counts.get(event.id, 0),
                }
            )
            for event in events
        ]
        return reads, total

    async def to_read(self, event: Event) -> EventRead:
        """Shape one event with organizer, participants and waitlist expanded (in order)."""
        participants = await self.participant_repo.list_for_event(event.id)
        waitlist = await self.waitlist_repo.list_for_event(event.id)
        users = await self.user_repo.get_many_by_ids(
            [event.organizer_id]
            + [p.user_id for p in participants]
            + [w.user_id for w in waitlist]
        )
        return EventRead.model_validate(event).model_copy(
            update={
                "organizer": _user_ref(users, event.organizer_id),
                "participants": [
                    ParticipantRead.model_validate(p).model_copy(
                        update={"user": _user_ref(users, p.user_id)}
                    )
                    for p in participants
                ],
                "waitlist": [
                    WaitlistEntryRead.model_validate(w).model_copy(
                        update={"user": _user_ref(users, w.user_id)}
                    )
                    for w in waitlist
                ],
                "participant_count": len(participants),
            }
        )

    async def create_event(self, data: EventCreate, organizer: User) -> Event:
        event = Event(**model_values(data), organizer_id=organizer.id)
        self.event_repo.add(event)
        await self._commit(event)
        logger.info("Event created", event_id=str(event.id), organizer_id=str(organizer.id))
        return event

    async def update_event(self, event: Event, data: EventUpdate) -> Event:
        update_data = model_values(data, exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValueError(f"{field} cannot be null")

        start = update_data.get("start_date", event.start_date)
        end = update_data.get("end_date", event.end_date)
        if end < start:
            raise ValueError("end_date must not be before start_date")

        if update_data.get("max_participants") is not None:
            registered = len(await self.participant_repo.list_for_event(event.id))
            if update_data["max_participants"] < registered:
                raise ValueError(
                    f"max_participants cannot be lower than the {registered} registered participants"
                )

        for field, value in update_data.items():
            setattr(event, field, value)
        event.updated_at = utc_now()
        promoted: list[UUID] = []
        if "max_participants" in update_data:
            try:
                promoted = await self._fill_from_waitlist(event)
            except Exception:
                await self.session.rollback()
                raise
        await self._commit(event)
        logger.info(
            "Event updated",
            event_id=str(event.id),
            fields=sorted(update_data),
            promoted_user_ids=[str(user_id) for user_id in promoted],
        )
        return event

    async def set_active(self, event: Event, is_active: bool | None) -> Event:
        event.is_active = (not event.is_active) if is_active is None else is_active
        event.updated_at = utc_now()
        await self._commit(event)
        logger.info("Event archive state changed", event_id=str(event.id), is_active=event.is_active)
        return event

    async def delete_event(self, event: Event) -> None:
        try:
            await self.participant_repo.delete_for_event(event.id)
            await self.waitlist_repo.delete_for_event(event.id)
            await self.event_repo.delete(event)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Event deleted", event_id=str(event.id))

    async def register(self, event: Event, user_id: UUID) -> RegistrationOutcome:
        """Register a user, or waitlist them when the event is full.

        Raises:
            ValueError: Event closed, user unknown, or user already registered
                or waitlisted.
        """
        if not event.is_active or event.status not in OPEN_STATUSES:
            raise ValueError("Event is not open for registration")

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise ValueError(f"User {user_id} not found")

        if await self.participant_repo.get_for_user(event.id, user_id) is not None:
            raise ValueError("User is already registered for this event")
        if await self.waitlist_repo.get_for_user(event.id, user_id) is not None:
            raise ValueError("User is already on the waitlist for this event")

        participants = await self.participant_repo.list_for_event(event.id)
        queued = await self.waitlist_repo.list_for_event(event.id)
        waitlisted = bool(queued) or not has_open_seat(len(participants), event.max_participants)
        if waitlisted:
            self.waitlist_repo.add(EventWaitlistEntry(event_id=event.id, user_id=user_id))
        else:
            self.participant_repo.add(
                EventParticipant(
                    event_id=event.id,
                    user_id=user_id,
                    payment_status=initial_payment_status(event.registration_fee).value,
                )
            )

        try:
            await self.session.commit()
        except IntegrityError as e:
            # Concurrent duplicate registration hit the unique constraint
            await self.session.rollback()
            raise ValueError("User is already registered for this event") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User waitlisted for event" if waitlisted else "User registered for event",
            event_id=str(event.id),
            user_id=str(user_id),
        )
        return RegistrationOutcome(waitlisted=waitlisted)

    async def unregister(self, event: Event, user_id: UUID) -> UnregistrationOutcome:
        """Remove a registration and promote the head of the waitlist into the freed seat.

        The seat count is read and the promotion written without a lock, so
        concurrent unregistrations can race.

        Raises:
            ValueError: The user is neither registered nor waitlisted.
        """
        participant = await self.participant_repo.get_for_user(event.id, user_id)
        if participant is None:
            entry = await self.waitlist_repo.get_for_user(event.id, user_id)
            if entry is None:
                raise ValueError("User is not registered for this event")
            await self.waitlist_repo.delete(entry)
            await self._commit_plain()
            logger.info("User left event waitlist", event_id=str(event.id), user_id=str(user_id))
            return UnregistrationOutcome(was_waitlisted=True)

        try:
            await self.participant_repo.delete(participant)
            await self.session.flush()
            promoted = await self._fill_from_waitlist(event)
        except Exception:
            await self.session.rollback()
            raise
        promoted_user_id = promoted[0] if promoted else None

        await self._commit_plain()
        logger.info(
            "User unregistered from event",
            event_id=str(event.id),
            user_id=str(user_id),
            promoted_user_id=str(promoted_user_id) if promoted_user_id else None,
        )
        return UnregistrationOutcome(was_waitlisted=False, promoted_user_id=promoted_user_id)

    async def set_participant_payment(
        self, event: Event, user_id: UUID, payment_status: ParticipantPaymentStatus
    ) -> EventParticipant | None:
        """Update a participant's payment status. Returns None if not a participant."""
        participant = await self.participant_repo.get_for_user(event.id, user_id)
        if participant is None:
            return None
        participant.payment_status = payment_status.value
        await self._commit_plain()
        logger.info(
            "Participant payment updated",
            event_id=str(event.id),
            user_id=str(user_id),
            payment_status=payment_status.value,
        )
        return participant

    async def _fill_from_waitlist(self, event: Event) -> list[UUID]:
        """Promote waitlist heads into free seats, oldest first (no commit).

        Returns:
            The promoted user ids in promotion order.
        """
        participant_count = len(await self.participant_repo.list_for_event(event.id))
        promoted: list[UUID] = []
        for entry in await self.waitlist_repo.list_for_event(event.id):
            if not has_open_seat(participant_count, event.max_participants):
                break
            await self.waitlist_repo.delete(entry)
            self.participant_repo.add(
                EventParticipant(
                    event_id=event.id,
                    user_id=entry.user_id,
                    payment_status=initial_payment_status(event.registration_fee).value,
                )
            )
            participant_count += 1
            promoted.append(entry.user_id)
        if promoted:
            await self.session.flush()
        return promoted

    async def _commit(self, event: Event) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(event)
        except Exception:
            await self.session.rollback()
            raise

    async def _commit_plain(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise


def _user_ref(users: dict[UUID, User], user_id: UUID) -> UserRef | None:
    return UserRef.model_validate(users[user_id]) if user_id in users else None
