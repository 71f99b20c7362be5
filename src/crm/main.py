from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.crm.api.middlewares import setup_middlewares
from src.crm.api.routes.router import api_router
from src.crm.core.config import get_settings
from src.crm.core.db import Database
from src.crm.core.exceptions import setup_exception_handlers
from src.crm.core.health import setup_health_endpoint, setup_metrics
from src.crm.core.logging import get_logger, setup_logging
from src.crm.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    app.state.db.initialize()

    yield

    logger.info("Closing connections...")
    if app.state.owns_db:
        await app.state.db.dispose()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and password changes"},
    {"name": "users", "description": "User accounts and roles"},
    {"name": "horses", "description": "Horse records"},
    {"name": "lessons", "description": "Lesson booking with instructor conflict checks"},
    {"name": "events", "description": "Events, registration and waitlist"},
    {"name": "equipment", "description": "Tack and stable inventory"},
    {"name": "payments", "description": "Invoices, payment status and revenue"},
    {"name": "stats", "description": "Dashboard reporting"},
    {"name": "health", "description": "Liveness"},
]


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application.

    Args:
        database: Connection manager to use. When omitted the app creates its
            own from settings and disposes it on shutdown.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="REST API for running a riding facility: horses, lessons, events, "
        "equipment, payments and members",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    app.state.owns_db = database is None
    app.state.db = database if database is not None else Database()

    setup_exception_handlers(app)

    app.state.limiter = limiter

    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
