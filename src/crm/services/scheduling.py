"""Instructor schedule conflict detection.

Lessons occupy the half-open interval [start, start + duration). Two lessons
conflict only when their intervals intersect, so a lesson ending at 11:00
does not conflict with one starting at 11:00.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from src.crm.models import Lesson


def lesson_interval(start: datetime, duration_minutes: int) -> tuple[datetime, datetime]:
    return start, start + timedelta(minutes=duration_minutes)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open interval intersection test."""
    return a_start < b_end and b_start < a_end


def find_conflict(
    start: datetime, duration_minutes: int, existing: Iterable[Lesson]
) -> Lesson | None:
    """Return the first existing lesson whose interval intersects the candidate's."""
    cand_start, cand_end = lesson_interval(start, duration_minutes)
    for lesson in existing:
        other_start, other_end = lesson_interval(lesson.scheduled_date, lesson.duration_minutes)
        if intervals_overlap(cand_start, cand_end, other_start, other_end):
            return lesson
    return None


def conflict_message(lesson: Lesson) -> str:
    start, end = lesson_interval(lesson.scheduled_date, lesson.duration_minutes)
    return (
        "Scheduling conflict: instructor already has "
        f"'{lesson.title}' from {start.isoformat()} to {end.isoformat()}"
    )
