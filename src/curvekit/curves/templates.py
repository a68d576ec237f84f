"""
Instrument templates used by curve nodes.

A template holds the conventions of a market instrument except the
quote. ``to_trade`` turns it into a concrete trade for a valuation date,
direction, notional and quoted rate:

- TermDepositTemplate: money market deposit
- FraTemplate: forward rate agreement ("3x6")
- FixedOvernightSwapTemplate: OIS, fixed vs compounded overnight
- XCcyIborIborSwapTemplate: cross-currency basis swap, sized by an FX rate

Trades are plain immutable records; pricing them is out of scope here.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Tuple, Union

from ..conventions import BuySell, Conventions, adjust_business_day, year_fraction
from ..dates import DateUtils
from ..errors import ValidationError, require_not_none


@dataclass(frozen=True)
class TermDeposit:
    """Simple interest deposit: pays notional * (1 + rate * tau) at end_date."""
    buy_sell: BuySell
    start_date: date
    end_date: date
    notional: float
    rate: float
    conventions: Conventions

    @property
    def year_fraction(self) -> float:
        return year_fraction(self.start_date, self.end_date, self.conventions.day_count)


@dataclass(frozen=True)
class Fra:
    """Forward rate agreement over [start_date, end_date]."""
    buy_sell: BuySell
    start_date: date
    end_date: date
    notional: float
    fixed_rate: float
    conventions: Conventions

    @property
    def year_fraction(self) -> float:
        return year_fraction(self.start_date, self.end_date, self.conventions.day_count)


@dataclass(frozen=True)
class FixedOvernightSwap:
    """Fixed leg against compounded overnight leg, same payment dates."""
    buy_sell: BuySell
    start_date: date
    end_date: date
    notional: float
    fixed_rate: float
    payment_dates: Tuple[date, ...]
    conventions: Conventions

    def accrual_fractions(self) -> Tuple[float, ...]:
        """Year fractions of each fixed period."""
        starts = (self.start_date,) + self.payment_dates[:-1]
        return tuple(
            year_fraction(s, e, self.conventions.day_count)
            for s, e in zip(starts, self.payment_dates)
        )


@dataclass(frozen=True)
class XCcyIborIborSwap:
    """
    Cross-currency floating/floating swap with notional exchange.

    The spread is paid on the base-currency leg; the counter notional is
    the base notional converted at the near FX rate.
    """
    buy_sell: BuySell
    start_date: date
    end_date: date
    base_currency: str
    counter_currency: str
    base_notional: float
    counter_notional: float
    spread: float
    payment_dates: Tuple[date, ...]
    conventions: Conventions


Product = Union[TermDeposit, Fra, FixedOvernightSwap, XCcyIborIborSwap]


@dataclass(frozen=True)
class Trade:
    """A product with the date it was traded."""
    trade_date: date
    product: Product


def _check_tenor(tenor: str, name: str = "tenor") -> None:
    require_not_none(tenor, name)
    DateUtils.parse_tenor(tenor)


def _spot_date(valuation_date: date, conventions: Conventions) -> date:
    spot = DateUtils.add_business_days(valuation_date, conventions.spot_days)
    return adjust_business_day(spot, conventions.business_day)


def _end_date(start: date, tenor: str, conventions: Conventions) -> date:
    return adjust_business_day(DateUtils.add_tenor(start, tenor), conventions.business_day)


@dataclass(frozen=True)
class TermDepositTemplate:
    """
    Template for a term deposit starting at spot.

    Attributes:
        tenor: Deposit term, e.g. "3M"
        conventions: Day count, business day rule and spot lag
    """
    tenor: str
    conventions: Conventions = field(default_factory=Conventions.usd_deposit)

    def __post_init__(self):
        _check_tenor(self.tenor)
        require_not_none(self.conventions, "conventions")

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, rate: float) -> Trade:
        start = _spot_date(valuation_date, self.conventions)
        end = _end_date(start, self.tenor, self.conventions)
        product = TermDeposit(buy_sell, start, end, notional, rate, self.conventions)
        return Trade(valuation_date, product)


@dataclass(frozen=True)
class FraTemplate:
    """
    Template for a FRA, e.g. 3x6: period_to_start="3M", period_to_end="6M".

    The node tenor of a FRA is its period to end.
    """
    period_to_start: str
    period_to_end: str
    conventions: Conventions = field(default_factory=Conventions.usd_deposit)

    def __post_init__(self):
        _check_tenor(self.period_to_start, "period_to_start")
        _check_tenor(self.period_to_end, "period_to_end")
        require_not_none(self.conventions, "conventions")
        if DateUtils.tenor_to_years(self.period_to_end) <= DateUtils.tenor_to_years(self.period_to_start):
            raise ValidationError(
                f"FRA period to end {self.period_to_end} must be after period to start {self.period_to_start}"
            )

    @property
    def tenor(self) -> str:
        return self.period_to_end

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, fixed_rate: float) -> Trade:
        spot = _spot_date(valuation_date, self.conventions)
        start = _end_date(spot, self.period_to_start, self.conventions)
        end = _end_date(spot, self.period_to_end, self.conventions)
        product = Fra(buy_sell, start, end, notional, fixed_rate, self.conventions)
        return Trade(valuation_date, product)


@dataclass(frozen=True)
class FixedOvernightSwapTemplate:
    """Template for a spot-starting OIS of the given tenor."""
    tenor: str
    conventions: Conventions = field(default_factory=Conventions.usd_ois)

    def __post_init__(self):
        _check_tenor(self.tenor)
        require_not_none(self.conventions, "conventions")

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, fixed_rate: float) -> Trade:
        start = _spot_date(valuation_date, self.conventions)
        end = DateUtils.add_tenor(start, self.tenor)
        payments = DateUtils.generate_schedule(
            start, end, self.conventions.payment_frequency, self.conventions.business_day
        )
        product = FixedOvernightSwap(
            buy_sell, start, payments[-1], notional, fixed_rate, tuple(payments), self.conventions
        )
        return Trade(valuation_date, product)


@dataclass(frozen=True)
class XCcyIborIborSwapTemplate:
    """
    Template for a cross-currency basis swap.

    Attributes:
        tenor: Swap term, e.g. "5Y"
        base_currency: Currency of the leg paying the spread
        counter_currency: Currency of the other leg
        conventions: Defaults to quarterly payments
    """
    tenor: str
    base_currency: str
    counter_currency: str
    conventions: Conventions = field(default_factory=Conventions.xccy_basis)

    def __post_init__(self):
        _check_tenor(self.tenor)
        require_not_none(self.base_currency, "base_currency")
        require_not_none(self.counter_currency, "counter_currency")
        require_not_none(self.conventions, "conventions")
        if self.base_currency == self.counter_currency:
            raise ValidationError("Cross-currency swap needs two distinct currencies")

    def to_trade(
        self,
        valuation_date: date,
        buy_sell: BuySell,
        notional: float,
        fx_rate: float,
        spread: float,
    ) -> Trade:
        start = _spot_date(valuation_date, self.conventions)
        end = DateUtils.add_tenor(start, self.tenor)
        payments = DateUtils.generate_schedule(
            start, end, self.conventions.payment_frequency, self.conventions.business_day
        )
        product = XCcyIborIborSwap(
            buy_sell=buy_sell,
            start_date=start,
            end_date=payments[-1],
            base_currency=self.base_currency,
            counter_currency=self.counter_currency,
            base_notional=notional,
            counter_notional=notional * fx_rate,
            spread=spread,
            payment_dates=tuple(payments),
            conventions=self.conventions,
        )
        return Trade(valuation_date, product)


__all__ = [
    "TermDeposit",
    "Fra",
    "FixedOvernightSwap",
    "XCcyIborIborSwap",
    "Trade",
    "TermDepositTemplate",
    "FraTemplate",
    "FixedOvernightSwapTemplate",
    "XCcyIborIborSwapTemplate",
]
