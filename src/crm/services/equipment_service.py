"""Equipment inventory service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.models import Equipment
from src.crm.models.base import utc_now
from src.crm.repositories import EquipmentFilters, EquipmentRepository, HorseRepository
from src.crm.schemas.common import HorseRef, model_values
from src.crm.schemas.equipment import EquipmentCreate, EquipmentRead, EquipmentUpdate
from src.crm.schemas.pagination import PageParams

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "category", "condition")


class EquipmentService:
    def __init__(
        self,
        equipment_repo: EquipmentRepository,
        horse_repo: HorseRepository,
        session: AsyncSession,
    ):
        self.equipment_repo = equipment_repo
        self.horse_repo = horse_repo
        self.session = session

    async def get_by_id(self, equipment_id: UUID, include_archived: bool = False) -> Equipment | None:
        """Get an item; archived items read as missing unless `include_archived`."""
        item = await self.equipment_repo.get_by_id(equipment_id)
        if item is None or (not item.is_active and not include_archived):
            return None
        return item

    async def list_equipment(
        self, filters: EquipmentFilters, params: PageParams
    ) -> tuple[list[EquipmentRead], int]:
        items, total = await self.equipment_repo.list_all(filters, params)
        return await self.to_read(items), total

    async def to_read(self, items: list[Equipment]) -> list[EquipmentRead]:
        horses = await self.horse_repo.get_many_by_ids(i.assigned_horse_id for i in items)
        return [
            EquipmentRead.model_validate(item).model_copy(
                update={
                    "assigned_horse": HorseRef.model_validate(horses[item.assigned_horse_id])
                    if item.assigned_horse_id in horses
                    else None
                }
            )
            for item in items
        ]

    async def create_equipment(self, data: EquipmentCreate) -> Equipment:
        await self._ensure_horse_exists(data.assigned_horse_id)
        item = Equipment(**model_values(data))
        self.equipment_repo.add(item)
        await self._commit(item)
        logger.info("Equipment created", equipment_id=str(item.id), category=item.category)
        return item

    async def update_equipment(self, item: Equipment, data: EquipmentUpdate) -> Equipment:
        update_data = model_values(data, exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValueError(f"{field} cannot be null")
        await self._ensure_horse_exists(update_data.get("assigned_horse_id"))

        for field, value in update_data.items():
            setattr(item, field, value)
        item.updated_at = utc_now()
        await self._commit(item)
        logger.info("Equipment updated", equipment_id=str(item.id), fields=sorted(update_data))
        return item

    async def set_active(self, item: Equipment, is_active: bool | None) -> Equipment:
        item.is_active = (not item.is_active) if is_active is None else is_active
        item.updated_at = utc_now()
        await self._commit(item)
        logger.info(
            "Equipment archive state changed", equipment_id=str(item.id), is_active=item.is_active
        )
        return item

    async def delete_equipment(self, item: Equipment) -> None:
        try:
            await self.equipment_repo.delete(item)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Equipment deleted", equipment_id=str(item.id))

    async def _ensure_horse_exists(self, horse_id: UUID | None) -> None:
        if horse_id is not None and await self.horse_repo.get_by_id(horse_id) is None:
            raise ValueError(f"Horse {horse_id} not found")

    async def _commit(self, item: Equipment) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(item)
        except Exception:
            await self.session.rollback()
            raise
