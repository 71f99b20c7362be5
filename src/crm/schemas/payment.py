"""Payment schemas for API request/response."""

from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from src.crm.models.enums import PaymentMethod, PaymentReferenceType, PaymentStatus, PaymentType
from src.crm.schemas.common import OptionalText, UserRef, UTCDateTime


class PaymentCreate(BaseModel):
    member_id: UUID
    amount: float = Field(ge=0)
    payment_type: PaymentType
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    due_date: UTCDateTime
    paid_date: UTCDateTime | None = None
    invoice_number: OptionalText = Field(default=None, max_length=64)
    description: OptionalText = Field(default=None, max_length=1000)
    reference_type: PaymentReferenceType | None = None
    reference_id: UUID | None = None

    @model_validator(mode="after")
    def validate_reference(self) -> Self:
        if (self.reference_type is None) != (self.reference_id is None):
            raise ValueError("reference_type and reference_id must be given together")
        return self


class PaymentUpdate(BaseModel):
    """Partial update; status changes go through the /status endpoint."""

    amount: float | None = Field(default=None, ge=0)
    payment_type: PaymentType | None = None
    payment_method: PaymentMethod | None = None
    due_date: UTCDateTime | None = None
    description: OptionalText = Field(default=None, max_length=1000)
    reference_type: PaymentReferenceType | None = None
    reference_id: UUID | None = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    paid_date: UTCDateTime | None = None


class PaymentRead(BaseModel):
    id: UUID
    member_id: UUID
    member: UserRef | None = None
    amount: float
    payment_type: PaymentType
    payment_method: PaymentMethod
    status: PaymentStatus
    due_date: datetime
    paid_date: datetime | None
    invoice_number: str
    description: str | None
    reference_type: PaymentReferenceType | None
    reference_id: UUID | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StatusTotals(BaseModel):
    count: int = 0
    amount: float = 0


class PaymentSummary(BaseModel):
    by_status: dict[PaymentStatus, StatusTotals]
    total_paid: float
    total_pending: float
    total_overdue: float
    monthly_revenue: float
    previous_month_revenue: float
