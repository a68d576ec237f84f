"""
Volatility surface built from one smile curve per expiry.

Each smile is an InterpolatedNodalCurve of Black volatility against a
strike measure (absolute strike, moneyness or log-moneyness). Between
expiries the surface interpolates linearly in total variance; outside the
expiry range the nearest smile is used as is.

The surface parameters are the smile node values, smile by smile, so
bumping a parameter bumps one smile node.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Sequence, Tuple
import logging
import math

import numpy as np

from ..conventions import DayCount, ValueType
from ..errors import ValidationError, require_not_none
from ..perturbation import ParameterMetadata
from ..curves.curve import InterpolatedNodalCurve
from .strike import SimpleStrike, StrikeType, convert_strike
from .volatilities import Expiry, Volatilities, check_expiries, variance_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpiryStrikeVolatilities(Volatilities):
    """
    Black volatilities from smiles at fixed expiries.

    Attributes:
        name: Surface name
        valuation_date: Date the expiry times are measured from
        expiries: Strictly increasing expiry times in years
        smiles: One smile curve per expiry
        strike_type: Measure on the x-axis of the smiles (not DELTA)
        day_count: Converts expiry dates into times
    """
    name: str
    valuation_date: date
    expiries: Tuple[float, ...]
    smiles: Tuple[InterpolatedNodalCurve, ...]
    strike_type: StrikeType = StrikeType.STRIKE
    day_count: DayCount = DayCount.ACT_365
    _parameters: Tuple[float, ...] = field(init=False, repr=False, compare=False)
    _metadata: Tuple[ParameterMetadata, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        require_not_none(self.name, "name")
        require_not_none(self.valuation_date, "valuation_date")
        require_not_none(self.smiles, "smiles")
        object.__setattr__(self, "expiries", check_expiries(self.expiries))
        object.__setattr__(self, "smiles", tuple(self.smiles))
        if len(self.smiles) != len(self.expiries):
            raise ValidationError(
                f"Expected {len(self.expiries)} smiles, got {len(self.smiles)}"
            )
        if self.strike_type == StrikeType.DELTA:
            raise ValidationError("Delta smiles are not supported, use strike or moneyness")

        params: List[float] = []
        metadata: List[ParameterMetadata] = []
        for t, smile in zip(self.expiries, self.smiles):
            params.extend(smile.bundle.values)
            metadata.extend(
                ParameterMetadata(label=f"{t:g}Y/{m.label}") for m in smile.parameter_metadata
            )
        object.__setattr__(self, "_parameters", tuple(params))
        object.__setattr__(self, "_metadata", tuple(metadata))

    @classmethod
    def from_grid(
        cls,
        name: str,
        valuation_date: date,
        expiries: Sequence[float],
        strikes: Sequence[float],
        vols: Sequence[Sequence[float]],
        strike_type: StrikeType = StrikeType.STRIKE,
    ) -> "ExpiryStrikeVolatilities":
        """
        Build from a rectangular grid, vols[i][j] at expiries[i] and strikes[j].

        Smiles use linear interpolation and flat extrapolation.
        """
        smiles = tuple(
            InterpolatedNodalCurve.of(
                f"{name}-{t:g}Y", strikes, row, value_type=ValueType.BLACK_VOLATILITY
            )
            for t, row in zip(expiries, vols)
        )
        logger.debug("Building surface %s with %d expiries x %d strikes",
                     name, len(smiles), len(strikes))
        return cls(name, valuation_date, tuple(expiries), smiles, strike_type)

    @property
    def parameters(self) -> Tuple[float, ...]:
        return self._parameters

    @property
    def parameter_metadata(self) -> Tuple[ParameterMetadata, ...]:
        return self._metadata

    def _with_parameters(self, values: Sequence[float]) -> "ExpiryStrikeVolatilities":
        if len(values) != self.parameter_count:
            raise ValidationError(
                f"Expected {self.parameter_count} values, got {len(values)}"
            )
        smiles = []
        start = 0
        for smile in self.smiles:
            end = start + smile.parameter_count
            smiles.append(smile.with_y_values(values[start:end]))
            start = end
        return ExpiryStrikeVolatilities(
            self.name, self.valuation_date, self.expiries, tuple(smiles),
            self.strike_type, self.day_count,
        )

    def _smile_coordinate(self, strike: float, forward: float) -> float:
        return convert_strike(SimpleStrike(strike), self.strike_type, forward).value

    def volatility(self, expiry: Expiry, strike: float, forward: float) -> float:
        t = self.relative_time(expiry)
        x = self._smile_coordinate(strike, forward)
        weights = variance_weights(self.expiries, t)
        if len(weights) == 1:
            return self.smiles[weights[0][0]].y_value(x)
        variance = sum(c * self.smiles[i].y_value(x) ** 2 for i, c in weights)
        return math.sqrt(variance)

    def volatility_parameter_sensitivity(self, expiry: Expiry, strike: float, forward: float) -> np.ndarray:
        """
        Sensitivity of volatility(expiry, strike, forward) to every parameter.

        With sigma^2 = sum c_i sigma_i^2 the chain rule gives
        d sigma / d p = sum c_i sigma_i / sigma * d sigma_i / d p.
        """
        t = self.relative_time(expiry)
        x = self._smile_coordinate(strike, forward)
        weights = variance_weights(self.expiries, t)
        offsets = np.cumsum([0] + [s.parameter_count for s in self.smiles])
        result = np.zeros(self.parameter_count)

        if len(weights) == 1:
            i = weights[0][0]
            result[offsets[i]:offsets[i + 1]] = self.smiles[i].y_value_parameter_sensitivity(x)
            return result

        vol = self.volatility(t, strike, forward)
        if vol == 0:
            return result
        for i, c in weights:
            smile = self.smiles[i]
            scale = c * smile.y_value(x) / vol
            result[offsets[i]:offsets[i + 1]] += scale * smile.y_value_parameter_sensitivity(x)
        return result


__all__ = ["ExpiryStrikeVolatilities"]
