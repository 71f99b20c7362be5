"""Equipment model - tack and stable inventory."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from src.crm.models.base import utc_now
from src.crm.models.enums import EquipmentCondition


class Equipment(SQLModel, table=True):
    __tablename__ = "equipment"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200, index=True)
    category: str = Field(max_length=20, index=True)
    brand: str | None = Field(default=None, max_length=100)
    model: str | None = Field(default=None, max_length=100)
    size: str | None = Field(default=None, max_length=50)
    condition: str = Field(default=EquipmentCondition.GOOD.value, max_length=20, index=True)
    purchase_date: datetime | None = Field(default=None, sa_type=DateTime)
    cost: float | None = Field(default=None)
    current_value: float | None = Field(default=None)
    assigned_horse_id: UUID | None = Field(
        default=None, foreign_key="horses.id", index=True, ondelete="SET NULL"
    )
    last_maintenance: datetime | None = Field(default=None, sa_type=DateTime)
    next_maintenance: datetime | None = Field(default=None, sa_type=DateTime)
    maintenance_notes: str | None = Field(default=None, max_length=2000)
    location: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
