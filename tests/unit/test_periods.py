"""Tests for calendar period helpers used by revenue figures."""

from datetime import datetime

import pytest

from src.crm.services.periods import (
    growth_percent,
    month_bounds,
    previous_month_bounds,
    week_start,
)

pytestmark = pytest.mark.unit


class TestMonthBounds:
    def test_mid_month(self):
        assert month_bounds(datetime(2030, 4, 17, 15, 30)) == (
            datetime(2030, 4, 1),
            datetime(2030, 5, 1),
        )

    def test_december_rolls_into_next_year(self):
        assert month_bounds(datetime(2030, 12, 31, 23, 59)) == (
            datetime(2030, 12, 1),
            datetime(2031, 1, 1),
        )

    def test_previous_month_across_year_boundary(self):
        assert previous_month_bounds(datetime(2031, 1, 10)) == (
            datetime(2030, 12, 1),
            datetime(2031, 1, 1),
        )

    def test_previous_month_of_march_in_leap_year(self):
        assert previous_month_bounds(datetime(2028, 3, 31)) == (
            datetime(2028, 2, 1),
            datetime(2028, 3, 1),
        )


class TestWeekStart:
    def test_midweek_goes_back_to_sunday(self):
        # 2030-06-05 is a Wednesday
        assert week_start(datetime(2030, 6, 5, 18, 45)) == datetime(2030, 6, 2)

    def test_sunday_is_its_own_week_start(self):
        assert week_start(datetime(2030, 6, 2, 8, 0)) == datetime(2030, 6, 2)

    def test_saturday_is_end_of_week(self):
        assert week_start(datetime(2030, 6, 8, 23, 0)) == datetime(2030, 6, 2)


class TestGrowthPercent:
    @pytest.mark.parametrize(
        ("current", "previous", "expected"),
        [
            (150.0, 100.0, 50.0),
            (50.0, 100.0, -50.0),
            (100.0, 300.0, -66.7),
            (120.0, 0.0, 100.0),
            (0.0, 0.0, 0.0),
            (0.0, 80.0, -100.0),
        ],
    )
    def test_growth(self, current: float, previous: float, expected: float):
        assert growth_percent(current, previous) == expected
