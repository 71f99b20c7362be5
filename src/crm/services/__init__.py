from src.crm.services.auth_service import AuthService
from src.crm.services.equipment_service import EquipmentService
from src.crm.services.event_service import EventService
from src.crm.services.horse_service import HorseService
from src.crm.services.lesson_service import LessonService
from src.crm.services.payment_service import PaymentService
from src.crm.services.stats_service import StatsService
from src.crm.services.user_service import UserService

__all__ = [
    "AuthService",
    "EquipmentService",
    "EventService",
    "HorseService",
    "LessonService",
    "PaymentService",
    "StatsService",
    "UserService",
]
