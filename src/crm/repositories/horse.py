"""Repository for Horse entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.crm.models import BoardingType, Horse
from src.crm.repositories.base import BaseRepository
from src.crm.schemas.pagination import PageParams


@dataclass
class HorseFilters:
    breed: str | None = None
    boarding_type: BoardingType | None = None
    owner_id: UUID | None = None
    is_active: bool | None = None


class HorseRepository(BaseRepository[Horse]):
    model = Horse

    async def list_all(self, filters: HorseFilters, params: PageParams) -> tuple[list[Horse], int]:
        """List horses by name. Breed matches case-insensitively as a substring."""
        query = select(Horse)
        if filters.breed:
            query = query.where(col(Horse.breed).ilike(f"%{filters.breed}%"))
        if filters.boarding_type is not None:
            query = query.where(Horse.boarding_type == filters.boarding_type.value)
        if filters.owner_id is not None:
            query = query.where(Horse.owner_id == filters.owner_id)
        if filters.is_active is not None:
            query = query.where(Horse.is_active == filters.is_active)
        return await self.paginate(query, params, [col(Horse.name).asc()])

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Horse).where(Horse.is_active == True)  # noqa: E712
        )
        return result.scalar_one()

    async def count_created_since(self, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Horse).where(Horse.created_at >= since)
        )
        return result.scalar_one()
