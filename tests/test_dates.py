"""
Unit tests for dates module.
"""

from datetime import date
import pytest

from curvekit.conventions import BusinessDayConvention
from curvekit.dates import DateUtils, add_months
from curvekit.errors import ValidationError


class TestDateUtils:
    """Tests for DateUtils class."""

    def test_parse_tenor(self):
        assert DateUtils.parse_tenor("3M") == (3, 'M')
        assert DateUtils.parse_tenor("10Y") == (10, 'Y')
        assert DateUtils.parse_tenor("2W") == (2, 'W')
        assert DateUtils.parse_tenor("1D") == (1, 'D')

    def test_parse_tenor_lowercase(self):
        assert DateUtils.parse_tenor("5y") == (5, 'Y')

    def test_parse_tenor_invalid(self):
        with pytest.raises(ValidationError):
            DateUtils.parse_tenor("invalid")
        with pytest.raises(ValueError):
            DateUtils.parse_tenor("3X")

    def test_add_tenor_months(self):
        assert DateUtils.add_tenor(date(2024, 1, 15), "3M") == date(2024, 4, 15)

    def test_add_tenor_clips_month_end(self):
        assert DateUtils.add_tenor(date(2024, 1, 31), "1M") == date(2024, 2, 29)

    def test_add_tenor_years_and_weeks(self):
        assert DateUtils.add_tenor(date(2024, 1, 15), "2Y") == date(2026, 1, 15)
        assert DateUtils.add_tenor(date(2024, 1, 15), "1W") == date(2024, 1, 22)

    def test_add_business_days_skips_weekend(self):
        assert DateUtils.add_business_days(date(2024, 1, 19), 1) == date(2024, 1, 22)

    def test_tenor_to_years(self):
        assert DateUtils.tenor_to_years("6M") == pytest.approx(0.5)
        assert DateUtils.tenor_to_years("5Y") == 5.0


class TestSchedule:
    """Tests for payment schedule generation."""

    def test_quarterly_schedule(self):
        schedule = DateUtils.generate_schedule(date(2024, 1, 17), date(2025, 1, 17), 4)
        assert schedule == [
            date(2024, 4, 17),
            date(2024, 7, 17),
            date(2024, 10, 17),
            date(2025, 1, 17),
        ]

    def test_short_front_stub(self):
        schedule = DateUtils.generate_schedule(date(2024, 3, 1), date(2025, 1, 15), 2)
        assert schedule[0] == date(2024, 7, 15)
        assert schedule[-1] == date(2025, 1, 15)

    def test_schedule_is_adjusted(self):
        # 2024-06-30 is a Sunday
        schedule = DateUtils.generate_schedule(
            date(2023, 12, 31), date(2024, 6, 30), 2, BusinessDayConvention.MODIFIED_FOLLOWING
        )
        assert schedule == [date(2024, 6, 28)]

    def test_invalid_frequency(self):
        with pytest.raises(ValidationError):
            DateUtils.generate_schedule(date(2024, 1, 1), date(2025, 1, 1), 5)

    def test_add_months_negative(self):
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
