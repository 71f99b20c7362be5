"""Reporting schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class UpcomingEventSummary(BaseModel):
    title: str
    date: datetime
    participants: str  # "3/10", or "3/∞" when uncapped


class ActivityItem(BaseModel):
    type: Literal["lesson", "payment", "event"]
    message: str
    timestamp: datetime


class DashboardStats(BaseModel):
    total_horses: int
    total_members: int
    upcoming_lessons: int
    active_events: int
    pending_payments: int
    pending_payments_amount: float
    monthly_revenue: float
    revenue_growth_percent: float
    new_horses_this_month: int
    new_lessons_this_week: int
    new_members_this_month: int
    upcoming_events: list[UpcomingEventSummary]
    recent_activity: list[ActivityItem]


class OverviewStats(BaseModel):
    new_users_last_30_days: int
    upcoming_lessons: int
    total_revenue: float
