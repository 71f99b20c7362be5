"""Equipment inventory endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.crm.api.dependencies import (
    CurrentUser,
    EquipmentServiceDep,
    Pagination,
    StaffUser,
    is_staff,
)
from src.crm.models import EquipmentCategory, EquipmentCondition
from src.crm.repositories import EquipmentFilters
from src.crm.schemas.common import ApiResponse, ArchiveRequest, MessageResponse
from src.crm.schemas.equipment import EquipmentCreate, EquipmentRead, EquipmentUpdate
from src.crm.schemas.pagination import PaginatedResponse, PaginationMeta

router = APIRouter(prefix="/equipment", tags=["equipment"])

EQUIPMENT_NOT_FOUND = "Equipment not found"


@router.get("", response_model=PaginatedResponse[EquipmentRead])
async def list_equipment(
    current_user: CurrentUser,
    service: EquipmentServiceDep,
    params: Pagination,
    category: EquipmentCategory | None = None,
    condition: EquipmentCondition | None = None,
    assigned_horse_id: UUID | None = None,
    include_archived: bool = False,
) -> PaginatedResponse[EquipmentRead]:
    """List equipment by name. Archived items are listed only for staff who ask for them."""
    filters = EquipmentFilters(
        category=category,
        condition=condition,
        assigned_horse_id=assigned_horse_id,
        include_archived=include_archived and is_staff(current_user),
    )
    items, total = await service.list_equipment(filters, params)
    return PaginatedResponse(
        data=items, pagination=PaginationMeta.build(params.page, params.limit, total)
    )


@router.get(
    "/{equipment_id}",
    response_model=ApiResponse[EquipmentRead],
    responses={404: {"description": "Equipment not found or archived"}},
)
async def get_equipment(
    equipment_id: UUID,
    current_user: CurrentUser,
    service: EquipmentServiceDep,
    include_archived: bool = False,
) -> ApiResponse[EquipmentRead]:
    item = await service.get_by_id(
        equipment_id, include_archived=include_archived and is_staff(current_user)
    )
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EQUIPMENT_NOT_FOUND)
    [read] = await service.to_read([item])
    return ApiResponse(data=read)


@router.post(
    "",
    response_model=ApiResponse[EquipmentRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error or unknown horse"},
        403: {"description": "Staff role required"},
    },
)
async def create_equipment(
    data: EquipmentCreate, _: StaffUser, service: EquipmentServiceDep
) -> ApiResponse[EquipmentRead]:
    try:
        item = await service.create_equipment(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([item])
    return ApiResponse(data=read, message="Equipment created")


@router.put(
    "/{equipment_id}",
    response_model=ApiResponse[EquipmentRead],
    responses={
        400: {"description": "Validation error or unknown horse"},
        404: {"description": EQUIPMENT_NOT_FOUND},
    },
)
async def update_equipment(
    equipment_id: UUID, data: EquipmentUpdate, _: StaffUser, service: EquipmentServiceDep
) -> ApiResponse[EquipmentRead]:
    item = await service.get_by_id(equipment_id, include_archived=True)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EQUIPMENT_NOT_FOUND)

    try:
        item = await service.update_equipment(item, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([item])
    return ApiResponse(data=read, message="Equipment updated")


@router.patch(
    "/{equipment_id}/archive",
    response_model=ApiResponse[EquipmentRead],
    responses={404: {"description": EQUIPMENT_NOT_FOUND}},
)
async def archive_equipment(
    equipment_id: UUID, data: ArchiveRequest, _: StaffUser, service: EquipmentServiceDep
) -> ApiResponse[EquipmentRead]:
    """Archive or restore an item. Omitting `is_active` toggles."""
    item = await service.get_by_id(equipment_id, include_archived=True)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EQUIPMENT_NOT_FOUND)

    item = await service.set_active(item, data.is_active)
    [read] = await service.to_read([item])
    message = "Equipment restored" if item.is_active else "Equipment archived"
    return ApiResponse(data=read, message=message)


@router.delete(
    "/{equipment_id}",
    response_model=MessageResponse,
    responses={404: {"description": EQUIPMENT_NOT_FOUND}},
)
async def delete_equipment(
    equipment_id: UUID, _: StaffUser, service: EquipmentServiceDep
) -> MessageResponse:
    item = await service.get_by_id(equipment_id, include_archived=True)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EQUIPMENT_NOT_FOUND)

    await service.delete_equipment(item)
    return MessageResponse(message="Equipment deleted")
