"""Model exports.

Import from here: `from src.crm.models import User, Horse`
"""

from src.crm.models.enums import (
    BoardingType,
    EquipmentCategory,
    EquipmentCondition,
    EventStatus,
    EventType,
    HorseGender,
    LessonPaymentStatus,
    LessonStatus,
    LessonType,
    MembershipTier,
    ParticipantPaymentStatus,
    PaymentMethod,
    PaymentReferenceType,
    PaymentStatus,
    PaymentType,
    STAFF_ROLES,
    UserRole,
    VaccinationStatus,
)
from src.crm.models.equipment import Equipment
from src.crm.models.event import Event, EventParticipant, EventWaitlistEntry
from src.crm.models.horse import Horse
from src.crm.models.lesson import Lesson
from src.crm.models.payment import Payment
from src.crm.models.user import User

__all__ = [
    # Enums
    "BoardingType",
    "EquipmentCategory",
    "EquipmentCondition",
    "EventStatus",
    "EventType",
    "HorseGender",
    "LessonPaymentStatus",
    "LessonStatus",
    "LessonType",
    "MembershipTier",
    "ParticipantPaymentStatus",
    "PaymentMethod",
    "PaymentReferenceType",
    "PaymentStatus",
    "PaymentType",
    "UserRole",
    "VaccinationStatus",
    "STAFF_ROLES",
    # Tables
    "Equipment",
    "Event",
    "EventParticipant",
    "EventWaitlistEntry",
    "Horse",
    "Lesson",
    "Payment",
    "User",
]
