"""
Unit tests for conventions module.
"""

from datetime import date
import pytest

from curvekit.conventions import (
    DayCount,
    BusinessDayConvention,
    BuySell,
    Conventions,
    adjust_business_day,
    is_business_day,
    year_fraction,
)
from curvekit.errors import ValidationError


class TestDayCount:
    """Tests for day count conventions."""

    def test_act_360(self):
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)  # 91 days
        assert year_fraction(start, end, DayCount.ACT_360) == pytest.approx(91 / 360)

    def test_act_365(self):
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)
        assert year_fraction(start, end, DayCount.ACT_365) == pytest.approx(91 / 365)

    def test_act_act_spans_year_end(self):
        """ACT/ACT splits the period at the year boundary."""
        start = date(2024, 12, 1)
        end = date(2025, 2, 1)
        expected = 31 / 366 + 31 / 365
        assert year_fraction(start, end, DayCount.ACT_ACT) == pytest.approx(expected)

    def test_thirty_360(self):
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)
        assert year_fraction(start, end, DayCount.THIRTY_360) == pytest.approx(90 / 360)

    def test_year_fraction_same_date(self):
        d = date(2024, 1, 15)
        assert year_fraction(d, d, DayCount.ACT_360) == 0.0

    def test_from_string(self):
        assert DayCount.from_string("act/360") == DayCount.ACT_360
        assert DayCount.from_string("ACT 365") == DayCount.ACT_365
        assert DayCount.from_string("30/360") == DayCount.THIRTY_360

    def test_from_string_unknown(self):
        with pytest.raises(ValidationError):
            DayCount.from_string("BUS/252")


class TestBusinessDays:
    """Tests for business day adjustment."""

    def test_weekend_is_not_business_day(self):
        assert not is_business_day(date(2024, 3, 30))  # Saturday
        assert is_business_day(date(2024, 3, 29))

    def test_holiday(self):
        assert not is_business_day(date(2024, 7, 4), holidays={date(2024, 7, 4)})

    def test_following(self):
        adjusted = adjust_business_day(date(2024, 3, 30), BusinessDayConvention.FOLLOWING)
        assert adjusted == date(2024, 4, 1)

    def test_modified_following_stays_in_month(self):
        adjusted = adjust_business_day(date(2024, 3, 30), BusinessDayConvention.MODIFIED_FOLLOWING)
        assert adjusted == date(2024, 3, 29)

    def test_preceding(self):
        adjusted = adjust_business_day(date(2024, 1, 13), BusinessDayConvention.PRECEDING)
        assert adjusted == date(2024, 1, 12)

    def test_unadjusted(self):
        d = date(2024, 1, 13)
        assert adjust_business_day(d, BusinessDayConvention.UNADJUSTED) == d


class TestConventions:
    """Tests for convention presets."""

    def test_usd_ois_preset(self):
        conv = Conventions.usd_ois()
        assert conv.day_count == DayCount.ACT_360
        assert conv.business_day == BusinessDayConvention.MODIFIED_FOLLOWING
        assert conv.spot_days == 2

    def test_xccy_preset_is_quarterly(self):
        assert Conventions.xccy_basis().payment_frequency == 4

    def test_buy_sell_sign(self):
        assert BuySell.BUY.sign == 1
        assert BuySell.SELL.sign == -1
