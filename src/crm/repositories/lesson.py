"""Repository for Lesson entity."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.crm.models import Lesson, LessonStatus, LessonType
from src.crm.repositories.base import BaseRepository
from src.crm.schemas.lesson import MAX_LESSON_MINUTES
from src.crm.schemas.pagination import PageParams


@dataclass
class LessonFilters:
    status: LessonStatus | None = None
    lesson_type: LessonType | None = None
    instructor_id: UUID | None = None
    member_id: UUID | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    is_active: bool | None = None


class LessonRepository(BaseRepository[Lesson]):
    model = Lesson

    async def list_all(
        self, filters: LessonFilters, params: PageParams
    ) -> tuple[list[Lesson], int]:
        """List lessons, most recently scheduled first."""
        query = select(Lesson)
        if filters.status is not None:
            query = query.where(Lesson.status == filters.status.value)
        if filters.lesson_type is not None:
            query = query.where(Lesson.lesson_type == filters.lesson_type.value)
        if filters.instructor_id is not None:
            query = query.where(Lesson.instructor_id == filters.instructor_id)
        if filters.member_id is not None:
            query = query.where(Lesson.member_id == filters.member_id)
        if filters.date_from is not None:
            query = query.where(Lesson.scheduled_date >= filters.date_from)
        if filters.date_to is not None:
            query = query.where(Lesson.scheduled_date < filters.date_to)
        if filters.is_active is not None:
            query = query.where(Lesson.is_active == filters.is_active)
        return await self.paginate(query, params, [col(Lesson.scheduled_date).desc()])

    async def find_blocking_lessons(
        self,
        instructor_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> list[Lesson]:
        """Active, non-cancelled lessons of an instructor that could overlap [start, end).

        Lessons last at most MAX_LESSON_MINUTES, so only lessons starting in
        [start - MAX_LESSON_MINUTES, end) are candidates. The exact overlap test
        is left to the caller.
        """
        query = select(Lesson).where(
            Lesson.instructor_id == instructor_id,
            Lesson.is_active == True,  # noqa: E712
            Lesson.status != LessonStatus.CANCELLED.value,
            Lesson.scheduled_date < end,
            Lesson.scheduled_date >= start - timedelta(minutes=MAX_LESSON_MINUTES),
        )
        if exclude_id is not None:
            query = query.where(Lesson.id != exclude_id)
        result = await self.session.execute(query.order_by(col(Lesson.scheduled_date)))
        return list(result.scalars().all())

    async def count_upcoming(self, start: datetime, end: datetime | None = None) -> int:
        """Count active scheduled lessons starting in [start, end), or from start on."""
        query = (
            select(func.count())
            .select_from(Lesson)
            .where(
                Lesson.is_active == True,  # noqa: E712
                Lesson.status == LessonStatus.SCHEDULED.value,
                Lesson.scheduled_date >= start,
            )
        )
        if end is not None:
            query = query.where(Lesson.scheduled_date < end)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_created_since(self, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Lesson).where(Lesson.created_at >= since)
        )
        return result.scalar_one()

    async def latest(self) -> Lesson | None:
        result = await self.session.execute(
            select(Lesson).order_by(col(Lesson.created_at).desc()).limit(1)
        )
        return result.scalar_one_or_none()
