"""Payment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.crm.api.dependencies import (
    AdminUser,
    CurrentUser,
    Pagination,
    PaymentServiceDep,
    StaffUser,
)
from src.crm.models import PaymentStatus, PaymentType
from src.crm.repositories import PaymentFilters
from src.crm.schemas.common import ApiResponse, ArchiveRequest, MessageResponse
from src.crm.schemas.pagination import PaginatedResponse, PaginationMeta
from src.crm.schemas.payment import (
    PaymentCreate,
    PaymentRead,
    PaymentStatusUpdate,
    PaymentSummary,
    PaymentUpdate,
)

router = APIRouter(prefix="/payments", tags=["payments"])

PAYMENT_NOT_FOUND = "Payment not found"


@router.get(
    "/stats/summary",
    response_model=ApiResponse[PaymentSummary],
    responses={403: {"description": "Staff role required"}},
)
async def payment_summary(_: StaffUser, service: PaymentServiceDep) -> ApiResponse[PaymentSummary]:
    """Totals per status with this and last month's revenue."""
    return ApiResponse(data=await service.summary())


@router.get("", response_model=PaginatedResponse[PaymentRead])
async def list_payments(
    current_user: CurrentUser,
    service: PaymentServiceDep,
    params: Pagination,
    payment_status: Annotated[PaymentStatus | None, Query(alias="status")] = None,
    payment_type: PaymentType | None = None,
    member_id: UUID | None = None,
) -> PaginatedResponse[PaymentRead]:
    """List payments, newest first. Members only see their own."""
    filters = PaymentFilters(status=payment_status, payment_type=payment_type, member_id=member_id)
    payments, total = await service.list_payments(filters, params, current_user)
    return PaginatedResponse(
        data=payments, pagination=PaginationMeta.build(params.page, params.limit, total)
    )


@router.get(
    "/{payment_id}",
    response_model=ApiResponse[PaymentRead],
    responses={
        403: {"description": "Members may only read their own payments"},
        404: {"description": PAYMENT_NOT_FOUND},
    },
)
async def get_payment(
    payment_id: UUID, current_user: CurrentUser, service: PaymentServiceDep
) -> ApiResponse[PaymentRead]:
    try:
        payment = await service.get_visible(payment_id, current_user)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PAYMENT_NOT_FOUND)
    [read] = await service.to_read([payment])
    return ApiResponse(data=read)


@router.post(
    "",
    response_model=ApiResponse[PaymentRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error, unknown member or duplicate invoice number"},
        403: {"description": "Staff role required"},
    },
)
async def create_payment(
    data: PaymentCreate, _: StaffUser, service: PaymentServiceDep
) -> ApiResponse[PaymentRead]:
    """Record a payment. An invoice number is generated when none is given."""
    try:
        payment = await service.create_payment(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([payment])
    return ApiResponse(data=read, message="Payment created")


@router.put(
    "/{payment_id}",
    response_model=ApiResponse[PaymentRead],
    responses={
        400: {"description": "Validation error"},
        404: {"description": PAYMENT_NOT_FOUND},
    },
)
async def update_payment(
    payment_id: UUID, data: PaymentUpdate, _: StaffUser, service: PaymentServiceDep
) -> ApiResponse[PaymentRead]:
    payment = await service.get_by_id(payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PAYMENT_NOT_FOUND)

    try:
        payment = await service.update_payment(payment, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    [read] = await service.to_read([payment])
    return ApiResponse(data=read, message="Payment updated")


@router.patch(
    "/{payment_id}/status",
    response_model=ApiResponse[PaymentRead],
    responses={404: {"description": PAYMENT_NOT_FOUND}},
)
async def update_payment_status(
    payment_id: UUID, data: PaymentStatusUpdate, _: StaffUser, service: PaymentServiceDep
) -> ApiResponse[PaymentRead]:
    """Change a payment's status. Paying stamps `paid_date`; other statuses clear it."""
    payment = await service.get_by_id(payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PAYMENT_NOT_FOUND)

    payment = await service.update_status(payment, data)
    [read] = await service.to_read([payment])
    return ApiResponse(data=read, message="Payment status updated")


@router.patch(
    "/{payment_id}/archive",
    response_model=ApiResponse[PaymentRead],
    responses={404: {"description": PAYMENT_NOT_FOUND}},
)
async def archive_payment(
    payment_id: UUID, data: ArchiveRequest, _: StaffUser, service: PaymentServiceDep
) -> ApiResponse[PaymentRead]:
    """Archive or restore a payment. Omitting `is_active` toggles."""
    payment = await service.get_by_id(payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PAYMENT_NOT_FOUND)

    payment = await service.set_active(payment, data.is_active)
    [read] = await service.to_read([payment])
    message = "Payment restored" if payment.is_active else "Payment archived"
    return ApiResponse(data=read, message=message)


@router.delete(
    "/{payment_id}",
    response_model=MessageResponse,
    responses={
        403: {"description": "Admin role required"},
        404: {"description": PAYMENT_NOT_FOUND},
    },
)
async def delete_payment(
    payment_id: UUID, _: AdminUser, service: PaymentServiceDep
) -> MessageResponse:
    payment = await service.get_by_id(payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PAYMENT_NOT_FOUND)

    await service.delete_payment(payment)
    return MessageResponse(message="Payment deleted")
