"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.crm.api.dependencies.db import DBSession
from src.crm.repositories import (
    EquipmentRepository,
    EventParticipantRepository,
    EventRepository,
    EventWaitlistRepository,
    HorseRepository,
    LessonRepository,
    PaymentRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_horse_repository(session: DBSession) -> HorseRepository:
    return HorseRepository(session)


def get_lesson_repository(session: DBSession) -> LessonRepository:
    return LessonRepository(session)


def get_event_repository(session: DBSession) -> EventRepository:
    return EventRepository(session)


def get_event_participant_repository(session: DBSession) -> EventParticipantRepository:
    return EventParticipantRepository(session)


def get_event_waitlist_repository(session: DBSession) -> EventWaitlistRepository:
    return EventWaitlistRepository(session)


def get_equipment_repository(session: DBSession) -> EquipmentRepository:
    return EquipmentRepository(session)


def get_payment_repository(session: DBSession) -> PaymentRepository:
    return PaymentRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
HorseRepo = Annotated[HorseRepository, Depends(get_horse_repository)]
LessonRepo = Annotated[LessonRepository, Depends(get_lesson_repository)]
EventRepo = Annotated[EventRepository, Depends(get_event_repository)]
EventParticipantRepo = Annotated[
    EventParticipantRepository, Depends(get_event_participant_repository)
]
EventWaitlistRepo = Annotated[EventWaitlistRepository, Depends(get_event_waitlist_repository)]
EquipmentRepo = Annotated[EquipmentRepository, Depends(get_equipment_repository)]
PaymentRepo = Annotated[PaymentRepository, Depends(get_payment_repository)]
