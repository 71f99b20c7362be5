"""Payment factory for test data generation."""

from datetime import timedelta

from polyfactory import Use

from src.crm.models import Payment, PaymentMethod, PaymentStatus, PaymentType
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class PaymentFactory(BaseFactory):
    """Factory for generating Payment test data."""

    __model__ = Payment

    id = Use(generate_uuid)
    member_id = None  # Required FK - must be set explicitly
    amount = 120.0
    payment_type = PaymentType.LESSON.value
    payment_method = PaymentMethod.CARD.value
    status = PaymentStatus.PENDING.value
    due_date = Use(lambda: utc_now() + timedelta(days=30))
    paid_date = None
    invoice_number = Use(lambda: f"INV-TEST-{generate_uuid().hex[-10:]}")
    description = None
    reference_type = None
    reference_id = None
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def paid(cls, **kwargs):
        """Create a settled payment."""
        return cls.build(
            status=PaymentStatus.PAID.value,
            paid_date=kwargs.pop("paid_date", utc_now()),
            **kwargs,
        )

    @classmethod
    def past_due(cls, **kwargs):
        """Create a pending payment whose due date has already passed."""
        return cls.build(due_date=utc_now() - timedelta(days=3), **kwargs)
