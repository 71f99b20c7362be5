"""Payment model - invoices owed by members."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from src.crm.models.base import utc_now
from src.crm.models.enums import PaymentStatus


class Payment(SQLModel, table=True):
    __tablename__ = "payments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    member_id: UUID = Field(foreign_key="users.id", index=True)
    amount: float
    payment_type: str = Field(max_length=20, index=True)
    payment_method: str = Field(max_length=20)
    status: str = Field(default=PaymentStatus.PENDING.value, max_length=20, index=True)
    due_date: datetime = Field(index=True, sa_type=DateTime)
    paid_date: datetime | None = Field(default=None, index=True, sa_type=DateTime)
    invoice_number: str = Field(max_length=64, unique=True, index=True)
    description: str | None = Field(default=None, max_length=1000)
    reference_type: str | None = Field(default=None, max_length=20)
    reference_id: UUID | None = Field(default=None)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
