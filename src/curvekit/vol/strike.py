"""
Strike representations for volatility smiles.

A strike is a single float tagged with how it is measured:

- SimpleStrike: absolute strike K
- MoneynessStrike: K / F
- LogMoneynessStrike: ln(K / F)
- DeltaStrike: Black forward call delta N(d1), in [0, 1]

convert_strike moves between the representations given the forward
(and, for delta, a Black volatility and an expiry).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
import math

from scipy.stats import norm

from ..errors import ValidationError, require_not_negative


class StrikeType(Enum):
    """How a strike value is measured."""
    STRIKE = "Strike"
    MONEYNESS = "Moneyness"
    LOG_MONEYNESS = "LogMoneyness"
    DELTA = "Delta"


class Strike(ABC):
    """A strike value tagged with its StrikeType."""

    value: float

    @property
    @abstractmethod
    def type(self) -> StrikeType:
        """The type tag, fixed per variant."""

    def with_value(self, value: float) -> "Strike":
        """Same variant with a different value."""
        return replace(self, value=value)

    @property
    def label(self) -> str:
        return f"{self.type.value}={self.value:g}"


@dataclass(frozen=True)
class SimpleStrike(Strike):
    """Absolute strike."""
    value: float

    @property
    def type(self) -> StrikeType:
        return StrikeType.STRIKE


def _forward_ratio(strike: float, forward: float) -> float:
    require_not_negative(strike, "strike")
    require_not_negative(forward, "forward")
    if forward == 0:
        raise ValidationError("forward must be positive to express a strike relative to it")
    return strike / forward


@dataclass(frozen=True)
class MoneynessStrike(Strike):
    """Strike as a ratio to the forward, K / F."""
    value: float

    @property
    def type(self) -> StrikeType:
        return StrikeType.MONEYNESS

    @classmethod
    def of_strike_and_forward(cls, strike: float, forward: float) -> "MoneynessStrike":
        return cls(_forward_ratio(strike, forward))


@dataclass(frozen=True)
class LogMoneynessStrike(Strike):
    """
    Strike as log-moneyness, ln(K / F).

    A zero strike gives -inf.
    """
    value: float

    @property
    def type(self) -> StrikeType:
        return StrikeType.LOG_MONEYNESS

    @classmethod
    def of_strike_and_forward(cls, strike: float, forward: float) -> "LogMoneynessStrike":
        ratio = _forward_ratio(strike, forward)
        return cls(math.log(ratio) if ratio > 0 else -math.inf)


@dataclass(frozen=True)
class DeltaStrike(Strike):
    """Strike as undiscounted Black call delta, in [0, 1]."""
    value: float

    def __post_init__(self):
        if not 0.0 <= self.value <= 1.0:
            raise ValidationError(f"Delta strike must be in [0, 1], got {self.value}")

    @property
    def type(self) -> StrikeType:
        return StrikeType.DELTA


_VARIANTS = {
    StrikeType.STRIKE: SimpleStrike,
    StrikeType.MONEYNESS: MoneynessStrike,
    StrikeType.LOG_MONEYNESS: LogMoneynessStrike,
    StrikeType.DELTA: DeltaStrike,
}


def strike_of(strike_type: StrikeType, value: float) -> Strike:
    """Create the variant for a strike type."""
    return _VARIANTS[strike_type](value)


def _delta_inputs(volatility: Optional[float], expiry: Optional[float]) -> float:
    if volatility is None or expiry is None:
        raise ValidationError("Delta strike conversion needs a volatility and an expiry")
    if not volatility > 0 or not expiry > 0:
        raise ValidationError(
            f"Delta strike conversion needs positive volatility and expiry, got {volatility}, {expiry}"
        )
    return volatility * math.sqrt(expiry)


def absolute_strike(
    strike: Strike,
    forward: float,
    volatility: Optional[float] = None,
    expiry: Optional[float] = None,
) -> float:
    """Absolute strike K for any strike representation."""
    if strike.type == StrikeType.STRIKE:
        return strike.value
    if strike.type == StrikeType.MONEYNESS:
        return strike.value * forward
    if strike.type == StrikeType.LOG_MONEYNESS:
        return forward * math.exp(strike.value)
    # N(d1) = delta  =>  ln(F/K) = N^-1(delta) s - s^2/2 with s = vol sqrt(T)
    std_dev = _delta_inputs(volatility, expiry)
    return forward * math.exp(-float(norm.ppf(strike.value)) * std_dev + 0.5 * std_dev**2)


def convert_strike(
    strike: Strike,
    target_type: StrikeType,
    forward: float,
    volatility: Optional[float] = None,
    expiry: Optional[float] = None,
) -> Strike:
    """
    Express a strike in another representation.

    Args:
        strike: Strike to convert
        target_type: Representation wanted
        forward: Forward of the underlying
        volatility: Black volatility, only needed when either side is DELTA
        expiry: Time to expiry in years, only needed when either side is DELTA

    Returns:
        Strike of the target variant
    """
    if strike.type == target_type:
        return strike
    k = absolute_strike(strike, forward, volatility, expiry)
    if target_type == StrikeType.STRIKE:
        return SimpleStrike(k)
    if target_type == StrikeType.MONEYNESS:
        return MoneynessStrike.of_strike_and_forward(k, forward)
    if target_type == StrikeType.LOG_MONEYNESS:
        return LogMoneynessStrike.of_strike_and_forward(k, forward)

    std_dev = _delta_inputs(volatility, expiry)
    log_moneyness = LogMoneynessStrike.of_strike_and_forward(k, forward).value
    d1 = (-log_moneyness + 0.5 * std_dev**2) / std_dev
    return DeltaStrike(float(norm.cdf(d1)))


__all__ = [
    "StrikeType",
    "Strike",
    "SimpleStrike",
    "MoneynessStrike",
    "LogMoneynessStrike",
    "DeltaStrike",
    "strike_of",
    "absolute_strike",
    "convert_strike",
]
