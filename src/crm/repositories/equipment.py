"""Repository for Equipment entity."""

from dataclasses import dataclass
from uuid import UUID

from sqlmodel import col, select

from src.crm.models import Equipment, EquipmentCategory, EquipmentCondition
from src.crm.repositories.base import BaseRepository
from src.crm.schemas.pagination import PageParams


@dataclass
class EquipmentFilters:
    category: EquipmentCategory | None = None
    condition: EquipmentCondition | None = None
    assigned_horse_id: UUID | None = None
    include_archived: bool = False


class EquipmentRepository(BaseRepository[Equipment]):
    model = Equipment

    async def list_all(
        self, filters: EquipmentFilters, params: PageParams
    ) -> tuple[list[Equipment], int]:
        """List equipment by name. Archived items are hidden unless requested."""
        query = select(Equipment)
        if not filters.include_archived:
            query = query.where(Equipment.is_active == True)  # noqa: E712
        if filters.category is not None:
            query = query.where(Equipment.category == filters.category.value)
        if filters.condition is not None:
            query = query.where(Equipment.condition == filters.condition.value)
        if filters.assigned_horse_id is not None:
            query = query.where(Equipment.assigned_horse_id == filters.assigned_horse_id)
        return await self.paginate(query, params, [col(Equipment.name).asc()])
