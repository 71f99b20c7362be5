"""Event endpoints, including registration and the waitlist."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.crm.api.dependencies import (
    CurrentUser,
    EventServiceDep,
    Pagination,
    StaffUser,
    is_staff,
)
from src.crm.models import EventStatus, EventType, User
from src.crm.repositories import EventFilters
from src.crm.schemas.common import ApiResponse, ArchiveRequest, MessageResponse
from src.crm.schemas.event import (
    EventCreate,
    EventRead,
    EventUpdate,
    ParticipantPaymentUpdate,
    RegistrationRequest,
    RegistrationResult,
)
from src.crm.schemas.pagination import PaginatedResponse, PaginationMeta

router = APIRouter(prefix="/events", tags=["events"])

EVENT_NOT_FOUND = "Event not found"


def _target_user_id(data: RegistrationRequest | None, current_user: User) -> UUID:
    """Resolve who a register/unregister call is for; only staff may act for others."""
    if data is None or data.user_id is None or data.user_id == current_user.id:
        return current_user.id
    if not is_staff(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only staff can register other users",
        )
    return data.user_id


@router.get("", response_model=PaginatedResponse[EventRead])
async def list_events(
    _: CurrentUser,
    service: EventServiceDep,
    params: Pagination,
    event_type: EventType | None = None,
    event_status: Annotated[EventStatus | None, Query(alias="status")] = None,
    is_active: bool | None = None,
) -> PaginatedResponse[EventRead]:
    """List events by start date, soonest first, with participant counts."""
    events, total = await service.list_events(
        EventFilters(event_type=event_type, status=event_status, is_active=is_active), params
    )
    return PaginatedResponse(
        data=events, pagination=PaginationMeta.build(params.page, params.limit, total)
    )


@router.get(
    "/{event_id}",
    response_model=ApiResponse[EventRead],
    responses={404: {"description": EVENT_NOT_FOUND}},
)
async def get_event(
    event_id: UUID, _: CurrentUser, service: EventServiceDep
) -> ApiResponse[EventRead]:
    """Get an event with its participants and waitlist in order."""
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)
    return ApiResponse(data=await service.to_read(event))


@router.post(
    "",
    response_model=ApiResponse[EventRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error"},
        403: {"description": "Staff role required"},
    },
)
async def create_event(
    data: EventCreate, current_user: StaffUser, service: EventServiceDep
) -> ApiResponse[EventRead]:
    """Create an event organized by the current user."""
    event = await service.create_event(data, current_user)
    return ApiResponse(data=await service.to_read(event), message="Event created")


@router.put(
    "/{event_id}",
    response_model=ApiResponse[EventRead],
    responses={
        400: {"description": "Invalid dates or capacity below current registrations"},
        404: {"description": EVENT_NOT_FOUND},
    },
)
async def update_event(
    event_id: UUID, data: EventUpdate, _: StaffUser, service: EventServiceDep
) -> ApiResponse[EventRead]:
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)

    try:
        event = await service.update_event(event, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse(data=await service.to_read(event), message="Event updated")


@router.patch(
    "/{event_id}/archive",
    response_model=ApiResponse[EventRead],
    responses={404: {"description": EVENT_NOT_FOUND}},
)
async def archive_event(
    event_id: UUID, data: ArchiveRequest, _: StaffUser, service: EventServiceDep
) -> ApiResponse[EventRead]:
    """Archive or restore an event. Omitting `is_active` toggles."""
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)

    event = await service.set_active(event, data.is_active)
    message = "Event restored" if event.is_active else "Event archived"
    return ApiResponse(data=await service.to_read(event), message=message)


@router.delete(
    "/{event_id}",
    response_model=MessageResponse,
    responses={404: {"description": EVENT_NOT_FOUND}},
)
async def delete_event(event_id: UUID, _: StaffUser, service: EventServiceDep) -> MessageResponse:
    """Delete an event together with its participants and waitlist."""
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)

    await service.delete_event(event)
    return MessageResponse(message="Event deleted")


@router.post(
    "/{event_id}/register",
    response_model=RegistrationResult,
    responses={
        200: {
            "description": "Registered, or placed on the waitlist when the event is full",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Event is full; added to the waitlist",
                        "waitlisted": True,
                        "promoted_user_id": None,
                        "data": {"id": "550e8400-e29b-41d4-a716-446655440000"},
                    }
                }
            },
        },
        400: {"description": "Event closed, or already registered or waitlisted"},
        403: {"description": "Only staff can register other users"},
        404: {"description": EVENT_NOT_FOUND},
    },
)
async def register_for_event(
    event_id: UUID,
    current_user: CurrentUser,
    service: EventServiceDep,
    data: RegistrationRequest | None = None,
) -> RegistrationResult:
    """Register for an event; full events put the user on the waitlist instead."""
    user_id = _target_user_id(data, current_user)
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)

    try:
        outcome = await service.register(event, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return RegistrationResult(
        message="Event is full; added to the waitlist"
        if outcome.waitlisted
        else "Registered for event",
        waitlisted=outcome.waitlisted,
        data=await service.to_read(event),
    )


@router.post(
    "/{event_id}/unregister",
    response_model=RegistrationResult,
    responses={
        400: {"description": "User is neither registered nor waitlisted"},
        403: {"description": "Only staff can unregister other users"},
        404: {"description": EVENT_NOT_FOUND},
    },
)
async def unregister_from_event(
    event_id: UUID,
    current_user: CurrentUser,
    service: EventServiceDep,
    data: RegistrationRequest | None = None,
) -> RegistrationResult:
    """Leave an event. A freed seat goes to the head of the waitlist."""
    user_id = _target_user_id(data, current_user)
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)

    try:
        outcome = await service.unregister(event, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    if outcome.was_waitlisted:
        message = "Removed from the waitlist"
    elif outcome.promoted_user_id is not None:
        message = "Unregistered; next user on the waitlist was promoted"
    else:
        message = "Unregistered from event"
    return RegistrationResult(
        message=message,
        promoted_user_id=outcome.promoted_user_id,
        data=await service.to_read(event),
    )


@router.patch(
    "/{event_id}/payment/{user_id}",
    response_model=ApiResponse[EventRead],
    responses={404: {"description": "Event not found or user is not a participant"}},
)
async def update_participant_payment(
    event_id: UUID,
    user_id: UUID,
    data: ParticipantPaymentUpdate,
    _: StaffUser,
    service: EventServiceDep,
) -> ApiResponse[EventRead]:
    """Set a participant's payment status."""
    event = await service.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)

    participant = await service.set_participant_payment(event, user_id, data.payment_status)
    if participant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User is not registered for this event",
        )
    return ApiResponse(data=await service.to_read(event), message="Payment status updated")
