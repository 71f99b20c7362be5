"""Horse endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.crm.api.dependencies import CurrentUser, HorseServiceDep, Pagination, StaffUser
from src.crm.models import BoardingType
from src.crm.repositories import HorseFilters
from src.crm.schemas.common import ApiResponse, ArchiveRequest, MessageResponse
from src.crm.schemas.horse import HorseCreate, HorseRead, HorseUpdate
from src.crm.schemas.pagination import PaginatedResponse, PaginationMeta

router = APIRouter(prefix="/horses", tags=["horses"])

HORSE_NOT_FOUND = "Horse not found"


@router.get("", response_model=PaginatedResponse[HorseRead])
async def list_horses(
    _: CurrentUser,
    service: HorseServiceDep,
    params: Pagination,
    breed: Annotated[
        str | None, Query(max_length=100, description="Case-insensitive substring")
    ] = None,
    boarding_type: BoardingType | None = None,
    owner_id: UUID | None = None,
    is_active: bool | None = None,
) -> PaginatedResponse[HorseRead]:
    """List horses by name."""
    horses, total = await service.list_horses(
        HorseFilters(
            breed=breed, boarding_type=boarding_type, owner_id=owner_id, is_active=is_active
        ),
        params,
    )
    return PaginatedResponse(
        data=horses, pagination=PaginationMeta.build(params.page, params.limit, total)
    )


@router.get(
    "/{horse_id}",
    response_model=ApiResponse[HorseRead],
    responses={404: {"description": HORSE_NOT_FOUND}},
)
async def get_horse(
    horse_id: UUID, _: CurrentUser, service: HorseServiceDep
) -> ApiResponse[HorseRead]:
    horse = await service.get_by_id(horse_id)
    if horse is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HORSE_NOT_FOUND)
    [read] = await service.to_read([horse])
    return ApiResponse(data=read)


@router.post(
    "",
    response_model=ApiResponse[HorseRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error or unknown owner"},
        403: {"description": "Staff role required"},
    },
)
async def create_horse(
    data: HorseCreate, _: StaffUser, service: HorseServiceDep
) -> ApiResponse[HorseRead]:
    try:
        horse = await service.create_horse(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([horse])
    return ApiResponse(data=read, message="Horse created")


@router.put(
    "/{horse_id}",
    response_model=ApiResponse[HorseRead],
    responses={
        400: {"description": "Validation error or unknown owner"},
        404: {"description": HORSE_NOT_FOUND},
    },
)
async def update_horse(
    horse_id: UUID, data: HorseUpdate, _: StaffUser, service: HorseServiceDep
) -> ApiResponse[HorseRead]:
    """Partially update a horse; only fields present in the body change."""
    horse = await service.get_by_id(horse_id)
    if horse is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HORSE_NOT_FOUND)

    try:
        horse = await service.update_horse(horse, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([horse])
    return ApiResponse(data=read, message="Horse updated")


@router.patch(
    "/{horse_id}/archive",
    response_model=ApiResponse[HorseRead],
    responses={404: {"description": HORSE_NOT_FOUND}},
)
async def archive_horse(
    horse_id: UUID, data: ArchiveRequest, _: StaffUser, service: HorseServiceDep
) -> ApiResponse[HorseRead]:
    """Archive or restore a horse. Omitting `is_active` toggles."""
    horse = await service.get_by_id(horse_id)
    if horse is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HORSE_NOT_FOUND)

    horse = await service.set_active(horse, data.is_active)
    [read] = await service.to_read([horse])
    return ApiResponse(data=read, message="Horse restored" if horse.is_active else "Horse archived")


@router.delete(
    "/{horse_id}",
    response_model=MessageResponse,
    responses={404: {"description": HORSE_NOT_FOUND}},
)
async def delete_horse(horse_id: UUID, _: StaffUser, service: HorseServiceDep) -> MessageResponse:
    horse = await service.get_by_id(horse_id)
    if horse is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HORSE_NOT_FOUND)

    await service.delete_horse(horse)
    return MessageResponse(message="Horse deleted")
