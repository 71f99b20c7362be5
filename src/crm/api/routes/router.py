from fastapi import APIRouter

from src.crm.api.routes import auth, equipment, events, horses, lessons, payments, stats, users

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(horses.router)
api_router.include_router(lessons.router)
api_router.include_router(events.router)
api_router.include_router(equipment.router)
api_router.include_router(payments.router)
api_router.include_router(stats.router)
