"""Horse management service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.models import Horse
from src.crm.models.base import utc_now
from src.crm.repositories import HorseFilters, HorseRepository, UserRepository
from src.crm.schemas.common import UserRef, model_values
from src.crm.schemas.horse import HorseCreate, HorseRead, HorseUpdate
from src.crm.schemas.pagination import PageParams

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "breed", "age", "gender", "color", "boarding_type", "vaccination_status")


class HorseService:
    def __init__(
        self,
        horse_repo: HorseRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.horse_repo = horse_repo
        self.user_repo = user_repo
        self.session = session

    async def get_by_id(self, horse_id: UUID) -> Horse | None:
        return await self.horse_repo.get_by_id(horse_id)

    async def list_horses(
        self, filters: HorseFilters, params: PageParams
    ) -> tuple[list[HorseRead], int]:
        horses, total = await self.horse_repo.list_all(filters, params)
        return await self.to_read(horses), total

    async def to_read(self, horses: list[Horse]) -> list[HorseRead]:
        """Shape horses for output with the owner expanded."""
        owners = await self.user_repo.get_many_by_ids(h.owner_id for h in horses)
        return [
            HorseRead.model_validate(horse).model_copy(
                update={
                    "owner": UserRef.model_validate(owners[horse.owner_id])
                    if horse.owner_id in owners
                    else None
                }
            )
            for horse in horses
        ]

    async def create_horse(self, data: HorseCreate) -> Horse:
        await self._ensure_owner_exists(data.owner_id)
        horse = Horse(**model_values(data))
        self.horse_repo.add(horse)
        await self._commit(horse)
        logger.info("Horse created", horse_id=str(horse.id), name=horse.name)
        return horse

    async def update_horse(self, horse: Horse, data: HorseUpdate) -> Horse:
        update_data = model_values(data, exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValueError(f"{field} cannot be null")
        if update_data.get("owner_id") is not None:
            await self._ensure_owner_exists(update_data["owner_id"])

        for field, value in update_data.items():
            setattr(horse, field, value)
        horse.updated_at = utc_now()
        await self._commit(horse)
        logger.info("Horse updated", horse_id=str(horse.id), fields=sorted(update_data))
        return horse

    async def set_active(self, horse: Horse, is_active: bool | None) -> Horse:
        horse.is_active = (not horse.is_active) if is_active is None else is_active
        horse.updated_at = utc_now()
        await self._commit(horse)
        logger.info("Horse archive state changed", horse_id=str(horse.id), is_active=horse.is_active)
        return horse

    async def delete_horse(self, horse: Horse) -> None:
        try:
            await self.horse_repo.delete(horse)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Horse deleted", horse_id=str(horse.id))

    async def _ensure_owner_exists(self, owner_id: UUID | None) -> None:
        if owner_id is not None and await self.user_repo.get_by_id(owner_id) is None:
            raise ValueError(f"Owner {owner_id} not found")

    async def _commit(self, horse: Horse) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(horse)
        except Exception:
            await self.session.rollback()
            raise
