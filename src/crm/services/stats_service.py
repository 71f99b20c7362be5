"""Dashboard and overview figures."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.models import UserRole
from src.crm.models.base import utc_now
from src.crm.repositories import (
    EventParticipantRepository,
    EventRepository,
    HorseRepository,
    LessonRepository,
    PaymentRepository,
    UserRepository,
)
from src.crm.schemas.stats import (
    ActivityItem,
    DashboardStats,
    OverviewStats,
    UpcomingEventSummary,
)
from src.crm.services.periods import growth_percent, month_bounds, previous_month_bounds, week_start

logger = get_logger(__name__)

UPCOMING_LESSON_WINDOW = timedelta(days=7)
UPCOMING_EVENT_LIMIT = 3
RECENT_ACTIVITY_LIMIT = 4


def participants_label(count: int, max_participants: int | None) -> str:
    return f"{count}/{max_participants if max_participants is not None else '∞'}"


class StatsService:
    def __init__(
        self,
        user_repo: UserRepository,
        horse_repo: HorseRepository,
        lesson_repo: LessonRepository,
        event_repo: EventRepository,
        participant_repo: EventParticipantRepository,
        payment_repo: PaymentRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.horse_repo = horse_repo
        self.lesson_repo = lesson_repo
        self.event_repo = event_repo
        self.participant_repo = participant_repo
        self.payment_repo = payment_repo
        self.session = session

    async def dashboard(self) -> DashboardStats:
        now = utc_now()
        await self._refresh_overdue()

        month_start, month_end = month_bounds(now)
        monthly_revenue = await self.payment_repo.sum_paid_between(month_start, month_end)
        previous_revenue = await self.payment_repo.sum_paid_between(*previous_month_bounds(now))
        pending_count, pending_amount = await self.payment_repo.pending_not_due(now)

        return DashboardStats(
            total_horses=await self.horse_repo.count_active(),
            total_members=await self.user_repo.count_active_members(),
            upcoming_lessons=await self.lesson_repo.count_upcoming(
                now, now + UPCOMING_LESSON_WINDOW
            ),
            active_events=await self.event_repo.count_active(now),
            pending_payments=pending_count,
            pending_payments_amount=pending_amount,
            monthly_revenue=monthly_revenue,
            revenue_growth_percent=growth_percent(monthly_revenue, previous_revenue),
            new_horses_this_month=await self.horse_repo.count_created_since(month_start),
            new_lessons_this_week=await self.lesson_repo.count_created_since(week_start(now)),
            new_members_this_month=await self.user_repo.count_created_since(
                month_start, role=UserRole.MEMBER
            ),
            upcoming_events=await self._upcoming_events(now),
            recent_activity=await self._recent_activity(),
        )

    async def overview(self) -> OverviewStats:
        now = utc_now()
        await self._refresh_overdue()
        return OverviewStats(
            new_users_last_30_days=await self.user_repo.count_created_since(
                now - timedelta(days=30)
            ),
            upcoming_lessons=await self.lesson_repo.count_upcoming(now),
            total_revenue=await self.payment_repo.sum_paid(),
        )

    async def _upcoming_events(self, now) -> list[UpcomingEventSummary]:
        events = await self.event_repo.next_upcoming(now, limit=UPCOMING_EVENT_LIMIT)
        counts = await self.participant_repo.count_for_events([e.id for e in events])
        return [
            UpcomingEventSummary(
                title=event.title,
                date=event.start_date,
                participants=participants_label(counts.get(event.id, 0), event.max_participants),
            )
            for event in events
        ]

    async def _recent_activity(self) -> list[ActivityItem]:
        activity: list[ActivityItem] = []

        lesson = await self.lesson_repo.latest()
        if lesson is not None:
            activity.append(
                ActivityItem(
                    type="lesson",
                    message=f"New lesson scheduled: {lesson.title}",
                    timestamp=lesson.created_at,
                )
            )

        payment = await self.payment_repo.latest_paid()
        if payment is not None:
            member = await self.user_repo.get_by_id(payment.member_id)
            payer = member.full_name if member else "unknown member"
            activity.append(
                ActivityItem(
                    type="payment",
                    message=f"Payment of {payment.amount:.2f} received from {payer}",
                    timestamp=payment.paid_date or payment.updated_at,
                )
            )

        event = await self.event_repo.latest()
        if event is not None:
            activity.append(
                ActivityItem(
                    type="event",
                    message=f"Event created: {event.title}",
                    timestamp=event.created_at,
                )
            )

        activity.sort(key=lambda item: item.timestamp, reverse=True)
        return activity[:RECENT_ACTIVITY_LIMIT]

    async def _refresh_overdue(self) -> None:
        try:
            if await self.payment_repo.mark_overdue(utc_now()):
                await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
