"""
Bucketed SABR volatility surface.

One SABR parameter set per expiry bucket. sigma_atm, rho and nu of every
bucket are surface parameters; beta and shift are fixed. Volatilities of
neighbouring buckets are combined linearly in total variance, as in
ExpiryStrikeVolatilities.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Sequence, Tuple
import math

from ..conventions import DayCount
from ..errors import ValidationError, require_not_none
from ..perturbation import ParameterMetadata
from .sabr import SabrModel, SabrParams
from .volatilities import Expiry, Volatilities, check_expiries, variance_weights


SABR_PARAMETER_NAMES = ("sigma_atm", "rho", "nu")


@dataclass(frozen=True)
class SabrVolatilities(Volatilities):
    """
    SABR Black volatilities bucketed by expiry.

    Parameter order is bucket by bucket: sigma_atm, rho, nu of the first
    expiry, then of the second, and so on.

    Attributes:
        name: Surface name
        valuation_date: Date the expiry times are measured from
        expiries: Strictly increasing bucket expiries in years
        sigma_atm: ATM Black volatility per bucket
        rho: Correlation per bucket
        nu: Vol of vol per bucket
        beta: Fixed CEV exponent
        shift: Fixed shift for negative rates
    """
    name: str
    valuation_date: date
    expiries: Tuple[float, ...]
    sigma_atm: Tuple[float, ...]
    rho: Tuple[float, ...]
    nu: Tuple[float, ...]
    beta: float = 0.5
    shift: float = 0.0
    day_count: DayCount = DayCount.ACT_365
    _buckets: Tuple[SabrParams, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        require_not_none(self.name, "name")
        require_not_none(self.valuation_date, "valuation_date")
        object.__setattr__(self, "expiries", check_expiries(self.expiries))
        for attr in SABR_PARAMETER_NAMES:
            values = tuple(float(v) for v in require_not_none(getattr(self, attr), attr))
            if len(values) != len(self.expiries):
                raise ValidationError(
                    f"Expected {len(self.expiries)} {attr} values, got {len(values)}"
                )
            object.__setattr__(self, attr, values)
        buckets = tuple(
            SabrParams(sigma_atm=s, beta=self.beta, rho=r, nu=n, shift=self.shift)
            for s, r, n in zip(self.sigma_atm, self.rho, self.nu)
        )
        object.__setattr__(self, "_buckets", buckets)

    @classmethod
    def of_buckets(
        cls,
        name: str,
        valuation_date: date,
        expiries: Sequence[float],
        buckets: Sequence[SabrParams],
    ) -> "SabrVolatilities":
        """Build from SabrParams sharing one beta and shift."""
        if not buckets:
            raise ValidationError("At least one SABR bucket is required")
        if len({(b.beta, b.shift) for b in buckets}) != 1:
            raise ValidationError("All SABR buckets must share beta and shift")
        return cls(
            name,
            valuation_date,
            tuple(expiries),
            tuple(b.sigma_atm for b in buckets),
            tuple(b.rho for b in buckets),
            tuple(b.nu for b in buckets),
            beta=buckets[0].beta,
            shift=buckets[0].shift,
        )

    @property
    def buckets(self) -> Tuple[SabrParams, ...]:
        return self._buckets

    @property
    def parameters(self) -> Tuple[float, ...]:
        return tuple(
            value
            for s, r, n in zip(self.sigma_atm, self.rho, self.nu)
            for value in (s, r, n)
        )

    @property
    def parameter_metadata(self) -> Tuple[ParameterMetadata, ...]:
        return tuple(
            ParameterMetadata(label=f"{t:g}Y/{param}")
            for t in self.expiries
            for param in SABR_PARAMETER_NAMES
        )

    def _with_parameters(self, values: Sequence[float]) -> "SabrVolatilities":
        if len(values) != self.parameter_count:
            raise ValidationError(
                f"Expected {self.parameter_count} values, got {len(values)}"
            )
        return SabrVolatilities(
            self.name,
            self.valuation_date,
            self.expiries,
            tuple(values[0::3]),
            tuple(values[1::3]),
            tuple(values[2::3]),
            self.beta,
            self.shift,
            self.day_count,
        )

    def bucket_volatility(self, index: int, strike: float, forward: float) -> float:
        """Black volatility of one bucket at its own expiry."""
        return SabrModel().implied_vol_black(forward, strike, self.expiries[index], self._buckets[index])

    def volatility(self, expiry: Expiry, strike: float, forward: float) -> float:
        t = self.relative_time(expiry)
        weights = variance_weights(self.expiries, t)
        if len(weights) == 1:
            return self.bucket_volatility(weights[0][0], strike, forward)
        variance = sum(c * self.bucket_volatility(i, strike, forward) ** 2 for i, c in weights)
        return math.sqrt(variance)


__all__ = ["SabrVolatilities", "SABR_PARAMETER_NAMES"]
