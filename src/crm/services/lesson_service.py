"""Lesson booking service with the instructor conflict check."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.core.logging import get_logger
from src.crm.models import STAFF_ROLES, Lesson, LessonStatus, User, UserRole
from src.crm.models.base import utc_now
from src.crm.repositories import HorseRepository, LessonFilters, LessonRepository, UserRepository
from src.crm.schemas.common import HorseRef, UserRef, model_values
from src.crm.schemas.lesson import LessonCreate, LessonRead, LessonUpdate
from src.crm.schemas.pagination import PageParams
from src.crm.services.scheduling import conflict_message, find_conflict, lesson_interval

logger = get_logger(__name__)

INSTRUCTOR_ROLES = STAFF_ROLES
REQUIRED_FIELDS = (
    "title",
    "instructor_id",
    "member_id",
    "scheduled_date",
    "duration_minutes",
    "lesson_type",
    "status",
    "cost",
    "payment_status",
)


def scope_filters(filters: LessonFilters, actor: User) -> LessonFilters:
    """Restrict a lesson listing to what the acting user may see.

    Members (and guests) only see lessons they take; trainers only see
    lessons they teach; admins see everything.
    """
    if actor.role == UserRole.TRAINER.value:
        filters.instructor_id = actor.id
    elif actor.role != UserRole.ADMIN.value:
        filters.member_id = actor.id
    return filters


class LessonService:
    def __init__(
        self,
        lesson_repo: LessonRepository,
        user_repo: UserRepository,
        horse_repo: HorseRepository,
        session: AsyncSession,
    ):
        self.lesson_repo = lesson_repo
        self.user_repo = user_repo
        self.horse_repo = horse_repo
        self.session = session

    async def get_by_id(self, lesson_id: UUID) -> Lesson | None:
        return await self.lesson_repo.get_by_id(lesson_id)

    async def get_visible(self, lesson_id: UUID, actor: User) -> Lesson | None:
        """Get a lesson, enforcing that members only read their own lessons."""
        lesson = await self.lesson_repo.get_by_id(lesson_id)
        if lesson is None:
            return None
        if actor.role not in INSTRUCTOR_ROLES and lesson.member_id != actor.id:
            raise PermissionError("Not authorized to view this lesson")
        return lesson

    async def list_lessons(
        self, filters: LessonFilters, params: PageParams, actor: User
    ) -> tuple[list[LessonRead], int]:
        lessons, total = await self.lesson_repo.list_all(scope_filters(filters, actor), params)
        return await self.to_read(lessons), total

    async def to_read(self, lessons: list[Lesson]) -> list[LessonRead]:
        """Shape lessons for output with instructor, member and horse expanded."""
        users = await self.user_repo.get_many_by_ids(
            [lesson.instructor_id for lesson in lessons] + [lesson.member_id for lesson in lessons]
        )
        horses = await self.horse_repo.get_many_by_ids(lesson.horse_id for lesson in lessons)

        def user_ref(user_id: UUID) -> UserRef | None:
            return UserRef.model_validate(users[user_id]) if user_id in users else None

        return [
            LessonRead.model_validate(lesson).model_copy(
                update={
                    "instructor": user_ref(lesson.instructor_id),
                    "member": user_ref(lesson.member_id),
                    "horse": HorseRef.model_validate(horses[lesson.horse_id])
                    if lesson.horse_id in horses
                    else None,
                }
            )
            for lesson in lessons
        ]

    async def create_lesson(self, data: LessonCreate) -> Lesson:
        """Book a lesson.

        Raises:
            ValueError: Unknown or unsuitable instructor/member/horse, or the
                instructor already has an overlapping lesson.
        """
        values = model_values(data)
        await self._validate_references(values)
        lesson = Lesson(**values)
        await self._ensure_no_conflict(lesson)

        self.lesson_repo.add(lesson)
        await self._commit(lesson)
        logger.info(
            "Lesson created",
            lesson_id=str(lesson.id),
            instructor_id=str(lesson.instructor_id),
            scheduled_date=lesson.scheduled_date.isoformat(),
        )
        return lesson

    async def update_lesson(self, lesson: Lesson, data: LessonUpdate) -> Lesson:
        """Apply a partial update and re-check the schedule with the merged values."""
        update_data = model_values(data, exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValueError(f"{field} cannot be null")
        await self._validate_references(update_data)

        try:
            for field, value in update_data.items():
                setattr(lesson, field, value)
            await self._ensure_no_conflict(lesson)
        except Exception:
            # Discard the in-memory changes applied above
            await self.session.rollback()
            raise

        lesson.updated_at = utc_now()
        await self._commit(lesson)
        logger.info("Lesson updated", lesson_id=str(lesson.id), fields=sorted(update_data))
        return lesson

    async def set_active(self, lesson: Lesson, is_active: bool | None) -> Lesson:
        """Archive or restore; restoring re-checks the schedule."""
        target = (not lesson.is_active) if is_active is None else is_active
        if target and not lesson.is_active:
            lesson.is_active = True
            try:
                await self._ensure_no_conflict(lesson)
            except Exception:
                await self.session.rollback()
                raise
        lesson.is_active = target
        lesson.updated_at = utc_now()
        await self._commit(lesson)
        logger.info("Lesson archive state changed", lesson_id=str(lesson.id), is_active=target)
        return lesson

    async def delete_lesson(self, lesson: Lesson) -> None:
        try:
            await self.lesson_repo.delete(lesson)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Lesson deleted", lesson_id=str(lesson.id))

    async def _ensure_no_conflict(self, lesson: Lesson) -> None:
        """Reject the lesson if its instructor is already booked in the same interval.

        Inactive and cancelled lessons neither block nor get blocked. The read
        and the later write are not locked together, so two concurrent bookings
        of the same slot can both succeed.
        """
        if not lesson.is_active or lesson.status == LessonStatus.CANCELLED.value:
            return
        start, end = lesson_interval(lesson.scheduled_date, lesson.duration_minutes)
        candidates = await self.lesson_repo.find_blocking_lessons(
            lesson.instructor_id, start, end, exclude_id=lesson.id
        )
        clash = find_conflict(start, lesson.duration_minutes, candidates)
        if clash is not None:
            logger.info(
                "Lesson rejected: scheduling conflict",
                instructor_id=str(lesson.instructor_id),
                conflicting_lesson_id=str(clash.id),
            )
            raise ValueError(conflict_message(clash))

    async def _validate_references(self, values: dict) -> None:
        instructor_id = values.get("instructor_id")
        if instructor_id is not None:
            instructor = await self.user_repo.get_by_id(instructor_id)
            if instructor is None or not instructor.is_active:
                raise ValueError(f"Instructor {instructor_id} not found")
            if instructor.role not in INSTRUCTOR_ROLES:
                raise ValueError("Instructor must be a trainer or admin")

        member_id = values.get("member_id")
        if member_id is not None:
            member = await self.user_repo.get_by_id(member_id)
            if member is None or not member.is_active:
                raise ValueError(f"Member {member_id} not found")

        horse_id = values.get("horse_id")
        if horse_id is not None:
            horse = await self.horse_repo.get_by_id(horse_id)
            if horse is None or not horse.is_active:
                raise ValueError(f"Horse {horse_id} not found")

    async def _commit(self, lesson: Lesson) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(lesson)
        except Exception:
            await self.session.rollback()
            raise