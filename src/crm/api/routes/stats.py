"""Reporting endpoints."""

from fastapi import APIRouter

from src.crm.api.dependencies import CurrentUser, StatsServiceDep
from src.crm.schemas.common import ApiResponse
from src.crm.schemas.stats import DashboardStats, OverviewStats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get(
    "/dashboard",
    response_model=ApiResponse[DashboardStats],
    responses={401: {"description": "Not authenticated"}},
)
async def dashboard(_: CurrentUser, service: StatsServiceDep) -> ApiResponse[DashboardStats]:
    """Facility counters, revenue for the current month, upcoming events and recent activity."""
    return ApiResponse(data=await service.dashboard())


@router.get(
    "/overview",
    response_model=ApiResponse[OverviewStats],
    responses={401: {"description": "Not authenticated"}},
)
async def overview(_: CurrentUser, service: StatsServiceDep) -> ApiResponse[OverviewStats]:
    """New users in the last 30 days, upcoming lessons and all-time revenue."""
    return ApiResponse(data=await service.overview())
