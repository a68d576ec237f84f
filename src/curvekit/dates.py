"""
Date utilities for curve instruments.

Provides:
- Tenor parsing and date arithmetic
- Spot-date and business-day shifts
- Payment schedule generation for swap templates
"""

from datetime import date, timedelta
from typing import List, Optional, Tuple
import calendar
import re

from .conventions import (
    BusinessDayConvention,
    adjust_business_day,
    is_business_day,
)
from .errors import ValidationError


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "1D", "3M", "2Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValidationError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(str(tenor).upper().strip())
        if not match:
            raise ValidationError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def add_business_days(start: date, days: int, holidays: Optional[set] = None) -> date:
        """Move forward by a number of business days."""
        result = start
        added = 0
        while added < days:
            result += timedelta(days=1)
            if is_business_day(result, holidays):
                added += 1
        return result

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date.

        Day tenors count business days; week, month and year tenors are
        calendar periods (end of month clipped), unadjusted.
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return DateUtils.add_business_days(start, amount, holidays)

        if unit == 'W':
            return start + timedelta(weeks=amount)

        months = amount if unit == 'M' else 12 * amount
        return add_months(start, months)

    @staticmethod
    def tenor_to_years(tenor: str) -> float:
        """Convert tenor to approximate year fraction."""
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return amount / 365.0
        elif unit == 'W':
            return amount * 7 / 365.0
        elif unit == 'M':
            return amount / 12.0
        return float(amount)

    @staticmethod
    def generate_schedule(
        start: date,
        end: date,
        frequency: int,
        convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> List[date]:
        """
        Generate a payment schedule between start and end dates.

        Dates are rolled backward from the end date, giving a short front
        stub when the period does not divide the term.

        Args:
            start: Schedule start (accrual start)
            end: Schedule end (maturity)
            frequency: Payments per year (1=annual, 2=semi, 4=quarterly, 12=monthly)
            convention: Business day adjustment
            holidays: Holiday calendar

        Returns:
            List of payment dates (adjusted for business days)
        """
        if frequency <= 0 or 12 % frequency != 0:
            raise ValidationError(f"Frequency must divide 12, got {frequency}")

        months_per_period = 12 // frequency

        unadjusted = [end]
        periods = 1
        while True:
            prev_date = add_months(end, -months_per_period * periods)
            if prev_date <= start:
                break
            unadjusted.insert(0, prev_date)
            periods += 1

        return [adjust_business_day(d, convention, holidays) for d in unadjusted]


def add_months(start: date, months: int) -> date:
    """Add calendar months, clipping the day to the end of the target month."""
    year = start.year + (start.month + months - 1) // 12
    month = (start.month + months - 1) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


__all__ = [
    "DateUtils",
    "add_months",
]
