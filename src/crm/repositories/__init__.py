"""Repository layer - data access abstraction."""

from src.crm.repositories.base import BaseRepository
from src.crm.repositories.equipment import EquipmentFilters, EquipmentRepository
from src.crm.repositories.event import (
    EventFilters,
    EventParticipantRepository,
    EventRepository,
    EventWaitlistRepository,
)
from src.crm.repositories.horse import HorseFilters, HorseRepository
from src.crm.repositories.lesson import LessonFilters, LessonRepository
from src.crm.repositories.payment import PaymentFilters, PaymentRepository
from src.crm.repositories.user import UserFilters, UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Entities
    "EquipmentRepository",
    "EventParticipantRepository",
    "EventRepository",
    "EventWaitlistRepository",
    "HorseRepository",
    "LessonRepository",
    "PaymentRepository",
    "UserRepository",
    # Filters
    "EquipmentFilters",
    "EventFilters",
    "HorseFilters",
    "LessonFilters",
    "PaymentFilters",
    "UserFilters",
]
