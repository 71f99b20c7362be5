"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.crm.api.dependencies.db import DBSession
from src.crm.api.dependencies.repositories import (
    EquipmentRepo,
    EventParticipantRepo,
    EventRepo,
    EventWaitlistRepo,
    HorseRepo,
    LessonRepo,
    PaymentRepo,
    UserRepo,
)
from src.crm.services import (
    AuthService,
    EquipmentService,
    EventService,
    HorseService,
    LessonService,
    PaymentService,
    StatsService,
    UserService,
)


def get_user_service(user_repo: UserRepo, session: DBSession) -> UserService:
    """Get user service."""
    return UserService(user_repo, session)


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    """Get auth service."""
    return AuthService(user_repo, session)


def get_horse_service(
    horse_repo: HorseRepo, user_repo: UserRepo, session: DBSession
) -> HorseService:
    """Get horse service."""
    return HorseService(horse_repo, user_repo, session)


def get_lesson_service(
    lesson_repo: LessonRepo,
    user_repo: UserRepo,
    horse_repo: HorseRepo,
    session: DBSession,
) -> LessonService:
    """Get lesson service with user and horse lookups for validation and expansion."""
    return LessonService(lesson_repo, user_repo, horse_repo, session)


def get_event_service(
    event_repo: EventRepo,
    participant_repo: EventParticipantRepo,
    waitlist_repo: EventWaitlistRepo,
    user_repo: UserRepo,
    session: DBSession,
) -> EventService:
    """Get event service."""
    return EventService(event_repo, participant_repo, waitlist_repo, user_repo, session)


def get_equipment_service(
    equipment_repo: EquipmentRepo, horse_repo: HorseRepo, session: DBSession
) -> EquipmentService:
    """Get equipment service."""
    return EquipmentService(equipment_repo, horse_repo, session)


def get_payment_service(
    payment_repo: PaymentRepo, user_repo: UserRepo, session: DBSession
) -> PaymentService:
    """Get payment service."""
    return PaymentService(payment_repo, user_repo, session)


def get_stats_service(
    user_repo: UserRepo,
    horse_repo: HorseRepo,
    lesson_repo: LessonRepo,
    event_repo: EventRepo,
    participant_repo: EventParticipantRepo,
    payment_repo: PaymentRepo,
    session: DBSession,
) -> StatsService:
    """Get stats service."""
    return StatsService(
        user_repo, horse_repo, lesson_repo, event_repo, participant_repo, payment_repo, session
    )


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
HorseServiceDep = Annotated[HorseService, Depends(get_horse_service)]
LessonServiceDep = Annotated[LessonService, Depends(get_lesson_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
EquipmentServiceDep = Annotated[EquipmentService, Depends(get_equipment_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
StatsServiceDep = Annotated[StatsService, Depends(get_stats_service)]
