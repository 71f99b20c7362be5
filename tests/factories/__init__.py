"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, HorseFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.horse import EquipmentFactory, HorseFactory
from tests.factories.payment import PaymentFactory
from tests.factories.schedule import EventFactory, LessonFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    # Stable
    "HorseFactory",
    "EquipmentFactory",
    # Schedule
    "LessonFactory",
    "EventFactory",
    # Payments
    "PaymentFactory",
]
