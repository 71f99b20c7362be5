"""Base repository with common CRUD operations."""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.crm.schemas.pagination import PageParams

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def get_many_by_ids(self, ids: Iterable[UUID | None]) -> dict[UUID, ModelType]:
        """Fetch records for reference expansion, keyed by id. None ids are skipped."""
        wanted = {id for id in ids if id is not None}
        if not wanted:
            return {}
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(wanted))  # type: ignore[attr-defined]
        )
        return {item.id: item for item in result.scalars().all()}  # type: ignore[attr-defined]

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no commit)."""
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,  # SelectOfScalar - SQLModel/SQLAlchemy query without ordering
        params: PageParams,
        order_by: Iterable[Any],
    ) -> tuple[list[ModelType], int]:
        """Execute offset pagination on a filtered query.

        Args:
            query: The filtered base query
            params: Page number (1-based) and page size
            order_by: Ordering clauses applied to the page query

        Returns:
            Tuple of (items on this page, total matching rows)
        """
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        page_query = query.order_by(*order_by).offset(params.offset).limit(params.limit)
        result = await self.session.execute(page_query)
        return list(result.scalars().all()), total
