"""
Nodal curve representation and operations.

InterpolatedNodalCurve combines a DataBundle with an interpolator and a
pair of extrapolators:

- y_value(x): interpolated inside [first_key, last_key], extrapolated outside
- first_derivative(x): analytic dy/dx
- y_value_parameter_sensitivity(x): dy/d(node value) for every node

The node values are the curve parameters. "Bumping" a curve returns a new
curve; the original is never modified.

For rates curves the y-values are either discount factors or continuously
compounded zero rates (see ValueType), and x is a year fraction.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import logging
import math

import numpy as np
import pandas as pd

from ..conventions import CompoundingConvention, DayCount, ValueType
from ..errors import ValidationError, require_not_none
from ..perturbation import ParameterMetadata, ParameterPerturbation
from .bundle import DataBundle
from .extrapolation import Extrapolator, FlatExtrapolator
from .interpolation import Interpolator, LinearInterpolator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterpolatedNodalCurve:
    """
    Curve defined by knots, an interpolator and left/right extrapolators.

    Attributes:
        name: Curve name, e.g. "USD-OIS"
        bundle: The knots (x = year fraction, y = value_type measure)
        interpolator: Used inside the knot range
        extrapolator_left: Used below the first knot
        extrapolator_right: Used above the last knot
        value_type: Measure held on the y-axis
        day_count: Day count used to turn dates into x-values
        parameter_metadata: One entry per knot in key order (labels for risk reports)
    """
    name: str
    bundle: DataBundle
    interpolator: Interpolator = field(default_factory=LinearInterpolator)
    extrapolator_left: Extrapolator = field(default_factory=FlatExtrapolator)
    extrapolator_right: Extrapolator = field(default_factory=FlatExtrapolator)
    value_type: ValueType = ValueType.UNKNOWN
    day_count: DayCount = DayCount.ACT_365
    parameter_metadata: Tuple[ParameterMetadata, ...] = ()

    def __post_init__(self):
        require_not_none(self.name, "name")
        require_not_none(self.bundle, "bundle")
        require_not_none(self.interpolator, "interpolator")
        require_not_none(self.extrapolator_left, "extrapolator_left")
        require_not_none(self.extrapolator_right, "extrapolator_right")
        if not self.parameter_metadata:
            metadata = tuple(ParameterMetadata(label=f"{k:g}") for k in self.bundle.keys)
            object.__setattr__(self, "parameter_metadata", metadata)
        elif len(self.parameter_metadata) != self.bundle.size:
            raise ValidationError(
                f"Expected {self.bundle.size} parameter metadata entries, "
                f"got {len(self.parameter_metadata)}"
            )
        else:
            object.__setattr__(self, "parameter_metadata", tuple(self.parameter_metadata))

    @classmethod
    def of(
        cls,
        name: str,
        x_values: Sequence[float],
        y_values: Sequence[float],
        interpolator: Optional[Interpolator] = None,
        extrapolator_left: Optional[Extrapolator] = None,
        extrapolator_right: Optional[Extrapolator] = None,
        value_type: ValueType = ValueType.UNKNOWN,
        parameter_metadata: Sequence[ParameterMetadata] = (),
        day_count: DayCount = DayCount.ACT_365,
    ) -> "InterpolatedNodalCurve":
        """
        Build a curve from x and y sequences (defaults: linear, flat/flat).

        x_values need not be sorted; y_values and parameter_metadata are
        reordered with them so each label stays on its own knot.
        """
        xs = [float(x) for x in x_values]
        ys = [float(y) for y in y_values]
        metadata = tuple(parameter_metadata)
        if len(ys) == len(xs) and len(metadata) == len(xs):
            # DataBundle sorts by key; keep metadata aligned with it
            order = sorted(range(len(xs)), key=lambda i: xs[i])
            xs = [xs[i] for i in order]
            ys = [ys[i] for i in order]
            metadata = tuple(metadata[i] for i in order)
        return cls(
            name=name,
            bundle=DataBundle.of(xs, ys),
            interpolator=interpolator or LinearInterpolator(),
            extrapolator_left=extrapolator_left or FlatExtrapolator(),
            extrapolator_right=extrapolator_right or FlatExtrapolator(),
            value_type=value_type,
            day_count=day_count,
            parameter_metadata=metadata,
        )

    # ------------------------------------------------------------------
    # Queries

    @property
    def x_values(self) -> np.ndarray:
        return self.bundle.key_array()

    @property
    def y_values(self) -> np.ndarray:
        return self.bundle.value_array()

    def _extrapolator_for(self, x: float) -> Optional[Extrapolator]:
        if x < self.bundle.first_key():
            return self.extrapolator_left
        if x > self.bundle.last_key():
            return self.extrapolator_right
        return None

    def y_value(self, x: float) -> float:
        """Curve value at x."""
        extrapolator = self._extrapolator_for(x)
        if extrapolator is None:
            return float(self.interpolator.value_at(self.bundle, x))
        return float(extrapolator.value_at(self.bundle, x, self.interpolator))

    def __call__(self, x: float) -> float:
        return self.y_value(x)

    def first_derivative(self, x: float) -> float:
        """Analytic dy/dx at x."""
        extrapolator = self._extrapolator_for(x)
        if extrapolator is None:
            return float(self.interpolator.first_derivative_at(self.bundle, x))
        return float(extrapolator.first_derivative_at(self.bundle, x, self.interpolator))

    def y_value_parameter_sensitivity(self, x: float) -> np.ndarray:
        """Sensitivity of y_value(x) to each node value."""
        extrapolator = self._extrapolator_for(x)
        if extrapolator is None:
            return self.interpolator.node_sensitivities_at(self.bundle, x)
        return extrapolator.node_sensitivities_at(self.bundle, x, self.interpolator)

    # ------------------------------------------------------------------
    # Rates helpers

    def discount_factor(self, t: float) -> float:
        """
        Discount factor P(0,t).

        DISCOUNT_FACTOR curves return the y-value directly; ZERO_RATE
        curves return exp(-z(t) t).
        """
        if self.value_type == ValueType.DISCOUNT_FACTOR:
            return self.y_value(t)
        if self.value_type == ValueType.ZERO_RATE:
            return math.exp(-self.y_value(t) * t)
        raise ValidationError(f"Curve {self.name} of type {self.value_type.value} has no discount factors")

    def zero_rate(
        self,
        t: float,
        compounding: CompoundingConvention = CompoundingConvention.CONTINUOUS
    ) -> float:
        """
        Zero rate z(t) in the requested compounding (default continuous).
        """
        if self.value_type == ValueType.ZERO_RATE:
            zr_cont = self.y_value(t)
        elif self.value_type == ValueType.DISCOUNT_FACTOR:
            if t <= 0:
                raise ValidationError("Zero rate from discount factors needs t > 0")
            zr_cont = -math.log(self.y_value(t)) / t
        else:
            raise ValidationError(f"Curve {self.name} of type {self.value_type.value} has no zero rates")

        if compounding == CompoundingConvention.CONTINUOUS:
            return zr_cont
        elif compounding == CompoundingConvention.ANNUAL:
            return math.exp(zr_cont) - 1
        elif compounding == CompoundingConvention.SEMI_ANNUAL:
            return 2 * (math.exp(zr_cont / 2) - 1)
        return 4 * (math.exp(zr_cont / 4) - 1)

    def forward_rate(self, t1: float, t2: float) -> float:
        """Simply compounded forward rate between t1 and t2."""
        if t2 <= t1:
            raise ValidationError("t2 must be greater than t1")
        return (self.discount_factor(t1) / self.discount_factor(t2) - 1) / (t2 - t1)

    # ------------------------------------------------------------------
    # Parameters

    @property
    def parameter_count(self) -> int:
        return self.bundle.size

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.parameter_count:
            raise ValidationError(
                f"Parameter index {index} out of range [0, {self.parameter_count})"
            )

    def get_parameter(self, index: int) -> float:
        self._check_index(index)
        return self.bundle.values[index]

    def get_parameter_metadata(self, index: int) -> ParameterMetadata:
        self._check_index(index)
        return self.parameter_metadata[index]

    def with_y_values(self, y_values: Sequence[float]) -> "InterpolatedNodalCurve":
        """New curve with the same knots and configuration and new values."""
        if len(y_values) != self.parameter_count:
            raise ValidationError(
                f"Expected {self.parameter_count} values, got {len(y_values)}"
            )
        return _replace_bundle(self, self.bundle.with_values(y_values))

    def with_parameter(self, index: int, new_value: float) -> "InterpolatedNodalCurve":
        """New curve with one node value replaced."""
        self._check_index(index)
        return _replace_bundle(self, self.bundle.with_value(index, new_value))

    def with_perturbation(self, perturbation: ParameterPerturbation) -> "InterpolatedNodalCurve":
        """New curve with the perturbation applied to every node value."""
        values = [
            perturbation(i, value, self.parameter_metadata[i])
            for i, value in enumerate(self.bundle.values)
        ]
        return _replace_bundle(self, self.bundle.with_values(values))

    def to_frame(self) -> pd.DataFrame:
        """Knots as a DataFrame with columns [label, x, y]."""
        return pd.DataFrame({
            "label": [m.label for m in self.parameter_metadata],
            "x": self.x_values,
            "y": self.y_values,
        })

    def __repr__(self) -> str:
        return (f"InterpolatedNodalCurve(name={self.name}, nodes={self.parameter_count}, "
                f"interpolator={self.interpolator}, left={self.extrapolator_left}, "
                f"right={self.extrapolator_right})")


def _replace_bundle(curve: InterpolatedNodalCurve, bundle: DataBundle) -> InterpolatedNodalCurve:
    return InterpolatedNodalCurve(
        name=curve.name,
        bundle=bundle,
        interpolator=curve.interpolator,
        extrapolator_left=curve.extrapolator_left,
        extrapolator_right=curve.extrapolator_right,
        value_type=curve.value_type,
        day_count=curve.day_count,
        parameter_metadata=curve.parameter_metadata,
    )


def create_flat_curve(
    rate: float,
    name: str = "FLAT",
    max_tenor_years: float = 30.0,
) -> InterpolatedNodalCurve:
    """
    Create a flat zero-rate curve.

    Args:
        rate: Flat continuously compounded rate
        name: Curve name
        max_tenor_years: Last node time in years

    Returns:
        Flat ZERO_RATE curve with linear interpolation and flat extrapolation
    """
    times = [t for t in [0.25, 0.5, 1, 2, 5, 10, 20] if t < max_tenor_years] + [max_tenor_years]
    logger.debug("Creating flat curve %s at %s with %d nodes", name, rate, len(times))
    return InterpolatedNodalCurve.of(
        name,
        times,
        [rate] * len(times),
        value_type=ValueType.ZERO_RATE,
    )


__all__ = [
    "InterpolatedNodalCurve",
    "create_flat_curve",
]
