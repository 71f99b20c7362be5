"""Database session dependency."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.db import Database


def get_database(request: Request) -> Database:
    """Return the connection manager owned by the running application."""
    return request.app.state.db  # type: ignore[no-any-return]


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Get a request-scoped database session."""
    async with get_database(request).session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
