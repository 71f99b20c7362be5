"""Response envelopes and shared field types."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Generic, TypeVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from src.crm.models.base import to_naive_utc

T = TypeVar("T")

# Incoming timestamps may carry an offset ("2024-06-01T10:00:00Z"); they are
# stored as naive UTC.
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


def strip_or_none(value: str | None) -> str | None:
    """Trim whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty or whitespace only")
    return value


OptionalText = Annotated[str | None, AfterValidator(strip_or_none)]
RequiredText = Annotated[str, AfterValidator(strip_required)]


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: `{success, data, message?}`."""

    success: bool = True
    data: T
    message: str | None = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ArchiveRequest(BaseModel):
    """Archive or restore a record. Omitting `is_active` toggles the current value."""

    is_active: bool | None = None


class UserRef(BaseModel):
    """Expanded user reference embedded in other resources."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    role: str

    model_config = {"from_attributes": True}


class HorseRef(BaseModel):
    """Expanded horse reference embedded in other resources."""

    id: UUID
    name: str
    breed: str
    age: int | None = Field(default=None)

    model_config = {"from_attributes": True}


def model_values(data: BaseModel, exclude_unset: bool = False) -> dict[str, Any]:
    """Dump a schema to plain column values (enums become their string values)."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.model_dump(exclude_unset=exclude_unset).items()
    }
