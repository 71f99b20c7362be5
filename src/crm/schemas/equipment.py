"""Equipment schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.crm.models.enums import EquipmentCategory, EquipmentCondition
from src.crm.schemas.common import HorseRef, OptionalText, RequiredText, UTCDateTime


class EquipmentCreate(BaseModel):
    name: RequiredText = Field(max_length=200)
    category: EquipmentCategory
    brand: OptionalText = Field(default=None, max_length=100)
    model: OptionalText = Field(default=None, max_length=100)
    size: OptionalText = Field(default=None, max_length=50)
    condition: EquipmentCondition = EquipmentCondition.GOOD
    purchase_date: UTCDateTime | None = None
    cost: float | None = Field(default=None, ge=0)
    current_value: float | None = Field(default=None, ge=0)
    assigned_horse_id: UUID | None = None
    last_maintenance: UTCDateTime | None = None
    next_maintenance: UTCDateTime | None = None
    maintenance_notes: OptionalText = Field(default=None, max_length=2000)
    location: OptionalText = Field(default=None, max_length=200)
    notes: OptionalText = Field(default=None, max_length=2000)


class EquipmentUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    name: RequiredText | None = Field(default=None, max_length=200)
    category: EquipmentCategory | None = None
    brand: OptionalText = Field(default=None, max_length=100)
    model: OptionalText = Field(default=None, max_length=100)
    size: OptionalText = Field(default=None, max_length=50)
    condition: EquipmentCondition | None = None
    purchase_date: UTCDateTime | None = None
    cost: float | None = Field(default=None, ge=0)
    current_value: float | None = Field(default=None, ge=0)
    assigned_horse_id: UUID | None = None
    last_maintenance: UTCDateTime | None = None
    next_maintenance: UTCDateTime | None = None
    maintenance_notes: OptionalText = Field(default=None, max_length=2000)
    location: OptionalText = Field(default=None, max_length=200)
    notes: OptionalText = Field(default=None, max_length=2000)


class EquipmentRead(BaseModel):
    id: UUID
    name: str
    category: EquipmentCategory
    brand: str | None
    model: str | None
    size: str | None
    condition: EquipmentCondition
    purchase_date: datetime | None
    cost: float | None
    current_value: float | None
    assigned_horse_id: UUID | None
    assigned_horse: HorseRef | None = None
    last_maintenance: datetime | None
    next_maintenance: datetime | None
    maintenance_notes: str | None
    location: str | None
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
