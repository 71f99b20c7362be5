"""Calendar periods used by revenue and dashboard figures (naive UTC)."""

from datetime import datetime, timedelta


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """[first day of the month 00:00, first day of the next month 00:00)."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def previous_month_bounds(now: datetime) -> tuple[datetime, datetime]:
    current_start, _ = month_bounds(now)
    return month_bounds(current_start - timedelta(days=1))[0], current_start


def week_start(now: datetime) -> datetime:
    """Most recent Sunday 00:00."""
    days_since_sunday = (now.weekday() + 1) % 7
    return (now - timedelta(days=days_since_sunday)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )


def growth_percent(current: float, previous: float) -> float:
    """Percentage change, one decimal.

    100 when there was nothing before and something now, 0 when both are 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)
