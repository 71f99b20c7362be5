"""FastAPI dependency injection definitions.

Re-exports all dependencies so routes import from one place.
"""

# Auth
from src.crm.api.dependencies.auth import (
    AdminUser,
    CurrentUser,
    StaffUser,
    get_current_user,
    is_staff,
    require_roles,
)

# Database
from src.crm.api.dependencies.db import DBSession, get_database, get_db_session

# Pagination
from src.crm.api.dependencies.pagination import Pagination, get_page_params

# Repositories
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

# Services
from src.crm.api.dependencies.services import (
    AuthServiceDep,
    EquipmentServiceDep,
    EventServiceDep,
    HorseServiceDep,
    LessonServiceDep,
    PaymentServiceDep,
    StatsServiceDep,
    UserServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_database",
    "get_db_session",
    # Pagination
    "Pagination",
    "get_page_params",
    # Auth
    "AdminUser",
    "CurrentUser",
    "StaffUser",
    "get_current_user",
    "is_staff",
    "require_roles",
    # Repositories
    "EquipmentRepo",
    "EventParticipantRepo",
    "EventRepo",
    "EventWaitlistRepo",
    "HorseRepo",
    "LessonRepo",
    "PaymentRepo",
    "UserRepo",
    # Services
    "AuthServiceDep",
    "EquipmentServiceDep",
    "EventServiceDep",
    "HorseServiceDep",
    "LessonServiceDep",
    "PaymentServiceDep",
    "StatsServiceDep",
    "UserServiceDep",
]
