"""Database engine construction."""

import ssl
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.crm.core.config import Settings, get_settings


def _get_connect_args(settings: Settings) -> dict[str, Any]:
    """Connection arguments including SSL configuration (asyncpg only)."""
    connect_args: dict[str, Any] = {}

    ssl_mode = settings.database_ssl_mode
    if ssl_mode != "disable":
        ssl_context = ssl.create_default_context()
        if ssl_mode in ("prefer", "require"):
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        elif ssl_mode in ("verify-ca", "verify-full"):
            ssl_context.check_hostname = ssl_mode == "verify-full"
            ssl_context.verify_mode = ssl.CERT_REQUIRED
        connect_args["ssl"] = ssl_context

    return connect_args


def create_engine_from_settings(settings: Settings | None = None) -> AsyncEngine:
    """Create an async engine for the configured database URL.

    Pool sizing and SSL only apply to PostgreSQL; SQLite URLs (used by the
    test suite and local experiments) get the driver defaults.
    """
    settings = settings or get_settings()
    url = make_url(settings.database_url)

    if url.get_backend_name() == "sqlite":
        return create_async_engine(settings.database_url)

    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=_get_connect_args(settings),
    )
