"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user at the facility."""

    ADMIN = "admin"
    TRAINER = "trainer"
    MEMBER = "member"
    GUEST = "guest"


class MembershipTier(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    ELITE = "elite"


class HorseGender(str, Enum):
    MARE = "mare"
    STALLION = "stallion"
    GELDING = "gelding"


class BoardingType(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    PASTURE = "pasture"


class VaccinationStatus(str, Enum):
    CURRENT = "current"
    DUE = "due"
    OVERDUE = "overdue"


class LessonType(str, Enum):
    PRIVATE = "private"
    GROUP = "group"
    TRAINING = "training"


class LessonStatus(str, Enum):
    """Lesson lifecycle. Cancelled lessons never block the schedule."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class LessonPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class EventType(str, Enum):
    COMPETITION = "competition"
    CLINIC = "clinic"
    SOCIAL = "social"
    MAINTENANCE = "maintenance"
    SHOW = "show"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ParticipantPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class EquipmentCategory(str, Enum):
    SADDLE = "saddle"
    BRIDLE = "bridle"
    HALTER = "halter"
    BLANKET = "blanket"
    BOOT = "boot"
    GROOMING = "grooming"
    OTHER = "other"


class EquipmentCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PaymentType(str, Enum):
    LESSON = "lesson"
    BOARDING = "boarding"
    EVENT = "event"
    MEMBERSHIP = "membership"
    EQUIPMENT = "equipment"
    OTHER = "other"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    CHECK = "check"


class PaymentStatus(str, Enum):
    """Payment status. `overdue` is derived lazily from pending + past due date."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class PaymentReferenceType(str, Enum):
    """Kind of record a payment is for."""

    LESSON = "lesson"
    EVENT = "event"
    EQUIPMENT = "equipment"


STAFF_ROLES = (UserRole.ADMIN.value, UserRole.TRAINER.value)
