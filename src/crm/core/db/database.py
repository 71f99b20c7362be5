"""Database connection manager."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.crm.core.db.engine import create_engine_from_settings
from src.crm.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """Owns the engine and session factory for one application instance.

    Created by the app factory, initialized in the lifespan startup hook and
    disposed on shutdown. Request handlers reach it through
    `request.app.state.db` via the `DBSession` dependency instead of a
    module-level engine.

    Args:
        engine: Optional pre-built engine (tests inject one). When omitted,
            an engine is built from settings on `initialize()`.
    """

    def __init__(self, engine: AsyncEngine | None = None):
        self._engine = engine
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        if engine is not None:
            self._session_factory = self._make_session_factory(engine)

    @staticmethod
    def _make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not initialized")
        return self._engine

    def initialize(self) -> None:
        """Build the engine if needed. Safe to call more than once."""
        if self._engine is None:
            self._engine = create_engine_from_settings()
            logger.info("Database engine created", backend=self._engine.url.get_backend_name())
        if self._session_factory is None:
            self._session_factory = self._make_session_factory(self._engine)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session; uncommitted work is rolled back on exit."""
        if self._session_factory is None:
            raise RuntimeError("Database is not initialized")
        async with self._session_factory() as session:
            yield session

    async def ping(self) -> bool:
        """Run `SELECT 1`. Raises on connection failure."""
        async with self.session() as session:
            await session.execute(text("SELECT 1"))
        return True
