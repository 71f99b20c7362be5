"""Lesson endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.crm.api.dependencies import CurrentUser, LessonServiceDep, Pagination, StaffUser
from src.crm.models import LessonStatus, LessonType
from src.crm.models.base import to_naive_utc
from src.crm.repositories import LessonFilters
from src.crm.schemas.common import ApiResponse, ArchiveRequest, MessageResponse
from src.crm.schemas.lesson import LessonCreate, LessonRead, LessonUpdate
from src.crm.schemas.pagination import PaginatedResponse, PaginationMeta

router = APIRouter(prefix="/lessons", tags=["lessons"])

LESSON_NOT_FOUND = "Lesson not found"


@router.get("", response_model=PaginatedResponse[LessonRead])
async def list_lessons(
    current_user: CurrentUser,
    service: LessonServiceDep,
    params: Pagination,
    lesson_status: Annotated[LessonStatus | None, Query(alias="status")] = None,
    lesson_type: LessonType | None = None,
    instructor_id: UUID | None = None,
    member_id: UUID | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    is_active: bool | None = None,
) -> PaginatedResponse[LessonRead]:
    """List lessons, most recently scheduled first.

    Members only see lessons they take and trainers only see lessons they teach.
    """
    filters = LessonFilters(
        status=lesson_status,
        lesson_type=lesson_type,
        instructor_id=instructor_id,
        member_id=member_id,
        date_from=to_naive_utc(date_from),
        date_to=to_naive_utc(date_to),
        is_active=is_active,
    )
    lessons, total = await service.list_lessons(filters, params, current_user)
    return PaginatedResponse(
        data=lessons, pagination=PaginationMeta.build(params.page, params.limit, total)
    )


@router.get(
    "/{lesson_id}",
    response_model=ApiResponse[LessonRead],
    responses={
        403: {"description": "Members may only read their own lessons"},
        404: {"description": LESSON_NOT_FOUND},
    },
)
async def get_lesson(
    lesson_id: UUID, current_user: CurrentUser, service: LessonServiceDep
) -> ApiResponse[LessonRead]:
    try:
        lesson = await service.get_visible(lesson_id, current_user)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=LESSON_NOT_FOUND)
    [read] = await service.to_read([lesson])
    return ApiResponse(data=read)


@router.post(
    "",
    response_model=ApiResponse[LessonRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error, unknown reference or scheduling conflict",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "Scheduling conflict: instructor already has "
                        "'Jumping basics' from 2024-06-01T10:00:00 to 2024-06-01T11:00:00",
                        "request_id": "2f1c6a52-6a8e-4f1d-9f53-0f0e0c1b7a11",
                    }
                }
            },
        },
        403: {"description": "Staff role required"},
    },
)
async def create_lesson(
    data: LessonCreate, _: StaffUser, service: LessonServiceDep
) -> ApiResponse[LessonRead]:
    """Book a lesson. Rejected when the instructor is already booked in that interval."""
    try:
        lesson = await service.create_lesson(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([lesson])
    return ApiResponse(data=read, message="Lesson created")


@router.put(
    "/{lesson_id}",
    response_model=ApiResponse[LessonRead],
    responses={
        400: {"description": "Validation error, unknown reference or scheduling conflict"},
        404: {"description": LESSON_NOT_FOUND},
    },
)
async def update_lesson(
    lesson_id: UUID, data: LessonUpdate, _: StaffUser, service: LessonServiceDep
) -> ApiResponse[LessonRead]:
    """Partially update a lesson; the schedule is re-checked with the merged values."""
    lesson = await service.get_by_id(lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=LESSON_NOT_FOUND)

    try:
        lesson = await service.update_lesson(lesson, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([lesson])
    return ApiResponse(data=read, message="Lesson updated")


@router.patch(
    "/{lesson_id}/archive",
    response_model=ApiResponse[LessonRead],
    responses={
        400: {"description": "Restoring would create a scheduling conflict"},
        404: {"description": LESSON_NOT_FOUND},
    },
)
async def archive_lesson(
    lesson_id: UUID, data: ArchiveRequest, _: StaffUser, service: LessonServiceDep
) -> ApiResponse[LessonRead]:
    """Archive or restore a lesson. Omitting `is_active` toggles."""
    lesson = await service.get_by_id(lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=LESSON_NOT_FOUND)

    try:
        lesson = await service.set_active(lesson, data.is_active)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([lesson])
    message = "Lesson restored" if lesson.is_active else "Lesson archived"
    return ApiResponse(data=read, message=message)


@router.delete(
    "/{lesson_id}",
    response_model=MessageResponse,
    responses={404: {"description": LESSON_NOT_FOUND}},
)
async def delete_lesson(
    lesson_id: UUID, _: StaffUser, service: LessonServiceDep
) -> MessageResponse:
    lesson = await service.get_by_id(lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=LESSON_NOT_FOUND)

    await service.delete_lesson(lesson)
    return MessageResponse(message="Lesson deleted")
