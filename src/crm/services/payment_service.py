"""Payment service: invoices, status transitions and revenue summaries.

There is no background job marking payments overdue. Instead every read
path calls `refresh_overdue()` first, which rewrites pending payments whose
due date has passed in one UPDATE, and every write derives the status of the
row it touches with `derive_payment_status()`.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.models import STAFF_ROLES, Payment, PaymentStatus, User
from src.crm.models.base import utc_now
from src.crm.repositories import PaymentFilters, PaymentRepository, UserRepository
from src.crm.schemas.common import UserRef, model_values
from src.crm.schemas.pagination import PageParams
from src.crm.schemas.payment import (
    PaymentCreate,
    PaymentRead,
    PaymentStatusUpdate,
    PaymentSummary,
    PaymentUpdate,
    StatusTotals,
)
from src.crm.services.periods import month_bounds, previous_month_bounds

logger = get_logger(__name__)

REQUIRED_FIELDS = ("amount", "payment_type", "payment_method", "due_date")


def derive_payment_status(status: str, due_date: datetime, now: datetime) -> str:
    """A pending payment past its due date is overdue; every other status stands."""
    if status == PaymentStatus.PENDING.value and due_date < now:
        return PaymentStatus.OVERDUE.value
    return status


def generate_invoice_number(now: datetime, existing_count: int) -> str:
    """`INV-<epoch milliseconds>-<existing_count + 1>`; `now` is naive UTC."""
    epoch_ms = int(now.replace(tzinfo=UTC).timestamp() * 1000)
    return f"INV-{epoch_ms}-{existing_count + 1}"


class PaymentService:
    def __init__(
        self,
        payment_repo: PaymentRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.payment_repo = payment_repo
        self.user_repo = user_repo
        self.session = session

    async def refresh_overdue(self) -> None:
        """Persist the pending → overdue transition for every payment past due."""
        try:
            changed = await self.payment_repo.mark_overdue(utc_now())
            if changed:
                await self.session.commit()
                logger.info("Payments marked overdue", count=changed)
        except Exception:
            await self.session.rollback()
            raise

    async def get_by_id(self, payment_id: UUID) -> Payment | None:
        await self.refresh_overdue()
        return await self.payment_repo.get_by_id(payment_id)

    async def get_visible(self, payment_id: UUID, actor: User) -> Payment | None:
        """Get a payment, enforcing that members only read their own."""
        payment = await self.get_by_id(payment_id)
        if payment is None:
            return None
        if actor.role not in STAFF_ROLES and payment.member_id != actor.id:
            raise PermissionError("Not authorized to view this payment")
        return payment

    async def list_payments(
        self, filters: PaymentFilters, params: PageParams, actor: User
    ) -> tuple[list[PaymentRead], int]:
        await self.refresh_overdue()
        if actor.role not in STAFF_ROLES:
            filters.member_id = actor.id
        payments, total = await self.payment_repo.list_all(filters, params)
        return await self.to_read(payments), total

    async def to_read(self, payments: list[Payment]) -> list[PaymentRead]:
        members = await self.user_repo.get_many_by_ids(p.member_id for p in payments)
        return [
            PaymentRead.model_validate(payment).model_copy(
                update={
                    "member": UserRef.model_validate(members[payment.member_id])
                    if payment.member_id in members
                    else None
                }
            )
            for payment in payments
        ]

    async def create_payment(self, data: PaymentCreate) -> Payment:
        """Record a payment, generating an invoice number when none is given.

        Raises:
            ValueError: Unknown member or duplicate invoice number.
        """
        member = await self.user_repo.get_by_id(data.member_id)
        if member is None:
            raise ValueError(f"Member {data.member_id} not found")

        now = utc_now()
        values = model_values(data)
        if values["status"] == PaymentStatus.PAID.value:
            values["paid_date"] = values["paid_date"] or now
        else:
            values["paid_date"] = None
        values["status"] = derive_payment_status(values["status"], values["due_date"], now)
        if not values["invoice_number"]:
            values["invoice_number"] = generate_invoice_number(
                now, await self.payment_repo.count_all()
            )

        payment = Payment(**values)
        self.payment_repo.add(payment)
        await self._commit(payment)
        logger.info(
            "Payment created",
            payment_id=str(payment.id),
            invoice_number=payment.invoice_number,
            status=payment.status,
        )
        return payment

    async def update_payment(self, payment: Payment, data: PaymentUpdate) -> Payment:
        update_data = model_values(data, exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValueError(f"{field} cannot be null")

        ref_type = update_data.get("reference_type", payment.reference_type)
        ref_id = update_data.get("reference_id", payment.reference_id)
        if (ref_type is None) != (ref_id is None):
            raise ValueError("reference_type and reference_id must be given together")

        now = utc_now()
        for field, value in update_data.items():
            setattr(payment, field, value)
        if payment.status == PaymentStatus.OVERDUE.value and payment.due_date >= now:
            # Due date moved into the future
            payment.status = PaymentStatus.PENDING.value
        payment.status = derive_payment_status(payment.status, payment.due_date, now)
        payment.updated_at = now
        await self._commit(payment)
        logger.info("Payment updated", payment_id=str(payment.id), fields=sorted(update_data))
        return payment

    async def update_status(self, payment: Payment, data: PaymentStatusUpdate) -> Payment:
        """Move a payment to a new status.

        Paying stamps `paid_date` (the given one or now); any other status
        clears it. Setting `pending` on a past-due payment yields `overdue`.
        """
        now = utc_now()
        previous = payment.status
        if data.status == PaymentStatus.PAID:
            payment.paid_date = data.paid_date or now
        else:
            payment.paid_date = None
        payment.status = derive_payment_status(data.status.value, payment.due_date, now)
        payment.updated_at = now
        await self._commit(payment)
        logger.info(
            "Payment status changed",
            payment_id=str(payment.id),
            from_status=previous,
            to_status=payment.status,
        )
        return payment

    async def set_active(self, payment: Payment, is_active: bool | None) -> Payment:
        payment.is_active = (not payment.is_active) if is_active is None else is_active
        payment.updated_at = utc_now()
        await self._commit(payment)
        logger.info(
            "Payment archive state changed", payment_id=str(payment.id), is_active=payment.is_active
        )
        return payment

    async def delete_payment(self, payment: Payment) -> None:
        try:
            await self.payment_repo.delete(payment)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Payment deleted", payment_id=str(payment.id))

    async def summary(self) -> PaymentSummary:
        """Totals per status plus this and last month's revenue."""
        await self.refresh_overdue()
        now = utc_now()
        totals = await self.payment_repo.totals_by_status()
        by_status = {
            status: StatusTotals(
                count=totals.get(status.value, (0, 0.0))[0],
                amount=totals.get(status.value, (0, 0.0))[1],
            )
            for status in PaymentStatus
        }
        return PaymentSummary(
            by_status=by_status,
            total_paid=by_status[PaymentStatus.PAID].amount,
            total_pending=by_status[PaymentStatus.PENDING].amount,
            total_overdue=by_status[PaymentStatus.OVERDUE].amount,
            monthly_revenue=await self.payment_repo.sum_paid_between(*month_bounds(now)),
            previous_month_revenue=await self.payment_repo.sum_paid_between(
                *previous_month_bounds(now)
            ),
        )

    async def _commit(self, payment: Payment) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(payment)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError("Invoice number already exists") from e
        except Exception:
            await self.session.rollback()
            raise
