"""Repository for Payment entity, including revenue aggregates."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import col, select

from src.crm.models import Payment, PaymentStatus, PaymentType
from src.crm.repositories.base import BaseRepository
from src.crm.schemas.pagination import PageParams


@dataclass
class PaymentFilters:
    status: PaymentStatus | None = None
    payment_type: PaymentType | None = None
    member_id: UUID | None = None


class PaymentRepository(BaseRepository[Payment]):
    model = Payment

    async def list_all(
        self, filters: PaymentFilters, params: PageParams
    ) -> tuple[list[Payment], int]:
        """List payments newest first."""
        query = select(Payment)
        if filters.status is not None:
            query = query.where(Payment.status == filters.status.value)
        if filters.payment_type is not None:
            query = query.where(Payment.payment_type == filters.payment_type.value)
        if filters.member_id is not None:
            query = query.where(Payment.member_id == filters.member_id)
        return await self.paginate(query, params, [col(Payment.created_at).desc()])

    async def mark_overdue(self, now: datetime) -> int:
        """Rewrite pending payments whose due date has passed to overdue (no commit).

        Payment instances already loaded in the session are updated in place.

        Returns:
            Number of rows changed.
        """
        result = await self.session.execute(
            update(Payment)
            .where(
                col(Payment.status) == PaymentStatus.PENDING.value,
                col(Payment.due_date) < now,
            )
            .values(status=PaymentStatus.OVERDUE.value, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Payment))
        return result.scalar_one()

    async def sum_paid_between(self, start: datetime, end: datetime) -> float:
        """Sum of paid amounts with paid_date in [start, end)."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Payment.amount), 0.0)).where(
                Payment.status == PaymentStatus.PAID.value,
                col(Payment.paid_date) >= start,
                col(Payment.paid_date) < end,
            )
        )
        return float(result.scalar_one())

    async def sum_paid(self) -> float:
        result = await self.session.execute(
            select(func.coalesce(func.sum(Payment.amount), 0.0)).where(
                Payment.status == PaymentStatus.PAID.value
            )
        )
        return float(result.scalar_one())

    async def totals_by_status(self) -> dict[str, tuple[int, float]]:
        """Map status -> (count, summed amount) over all payments."""
        result = await self.session.execute(
            select(
                Payment.status,
                func.count(),
                func.coalesce(func.sum(Payment.amount), 0.0),
            ).group_by(col(Payment.status))
        )
        return {status: (count, float(amount)) for status, count, amount in result.all()}

    async def pending_not_due(self, now: datetime) -> tuple[int, float]:
        """Count and amount of pending payments that are not yet due."""
        result = await self.session.execute(
            select(func.count(), func.coalesce(func.sum(Payment.amount), 0.0)).where(
                Payment.status == PaymentStatus.PENDING.value,
                Payment.due_date >= now,
            )
        )
        count, amount = result.one()
        return count, float(amount)

    async def latest_paid(self) -> Payment | None:
        result = await self.session.execute(
            select(Payment)
            .where(Payment.status == PaymentStatus.PAID.value)
            .order_by(col(Payment.paid_date).desc(), col(Payment.updated_at).desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
