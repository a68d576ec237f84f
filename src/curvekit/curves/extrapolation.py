"""
Extrapolation methods for nodal curves.

Provides:
- FlatExtrapolator: Boundary value held constant
- LinearExtrapolator: Straight line with the interpolant's slope at the boundary
- ExponentialExtrapolator: exp(m * x) anchored on the boundary knot

Extrapolators answer the same three queries as interpolators but only
outside [first_key, last_key]; an interior key raises DomainError. The
left branch is used below first_key, the right branch above last_key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple
import math

import numpy as np

from ..errors import DomainError, NumericDomainError, ValidationError
from .bundle import DataBundle
from .interpolation import Interpolator, LinearInterpolator


class Extrapolator(ABC):
    """Abstract base class for curve extrapolation."""

    NAME: ClassVar[str] = ""

    @property
    def name(self) -> str:
        return self.NAME

    def _boundary(self, bundle: DataBundle, x: float) -> Tuple[int, float, float]:
        """
        Index, key and value of the knot anchoring the branch used for x.

        Raises:
            DomainError: If x is inside the data range
        """
        if x < bundle.first_key():
            return 0, bundle.first_key(), bundle.first_value()
        if x > bundle.last_key():
            return bundle.size - 1, bundle.last_key(), bundle.last_value()
        raise DomainError(f"Value {x} was within data range")

    @abstractmethod
    def value_at(
        self, bundle: DataBundle, x: float, interpolator: Optional[Interpolator] = None
    ) -> float:
        """Extrapolated value at x."""

    @abstractmethod
    def first_derivative_at(
        self, bundle: DataBundle, x: float, interpolator: Optional[Interpolator] = None
    ) -> float:
        """First derivative of the extrapolant with respect to x."""

    @abstractmethod
    def node_sensitivities_at(
        self, bundle: DataBundle, x: float, interpolator: Optional[Interpolator] = None
    ) -> np.ndarray:
        """Sensitivity of value_at(bundle, x) to each knot value."""

    def __str__(self) -> str:
        return self.NAME


@dataclass(frozen=True)
class FlatExtrapolator(Extrapolator):
    """Holds the boundary knot value constant."""

    NAME: ClassVar[str] = "Flat"

    def value_at(self, bundle, x, interpolator=None):
        _, _, y0 = self._boundary(bundle, x)
        return y0

    def first_derivative_at(self, bundle, x, interpolator=None):
        self._boundary(bundle, x)
        return 0.0

    def node_sensitivities_at(self, bundle, x, interpolator=None):
        index, _, _ = self._boundary(bundle, x)
        result = np.zeros(bundle.size)
        result[index] = 1.0
        return result


@dataclass(frozen=True)
class LinearExtrapolator(Extrapolator):
    """
    Extends the curve along its tangent at the boundary knot.

    value = y_b + g (x - x_b), where g is the interpolator's first
    derivative at x_b. Node sensitivities combine the boundary knot with
    the sensitivities of g. Without an interpolator, linear interpolation
    is assumed.
    """

    NAME: ClassVar[str] = "Linear"

    @staticmethod
    def _interpolator(interpolator: Optional[Interpolator]) -> Interpolator:
        return interpolator if interpolator is not None else LinearInterpolator()

    def value_at(self, bundle, x, interpolator=None):
        _, x0, y0 = self._boundary(bundle, x)
        slope = self._interpolator(interpolator).first_derivative_at(bundle, x0)
        return y0 + slope * (x - x0)

    def first_derivative_at(self, bundle, x, interpolator=None):
        _, x0, _ = self._boundary(bundle, x)
        return self._interpolator(interpolator).first_derivative_at(bundle, x0)

    def node_sensitivities_at(self, bundle, x, interpolator=None):
        index, x0, _ = self._boundary(bundle, x)
        slope_sens = self._interpolator(interpolator).first_derivative_node_sensitivities_at(bundle, x0)
        result = (x - x0) * slope_sens
        result[index] += 1.0
        return result


@dataclass(frozen=True)
class ExponentialExtrapolator(Extrapolator):
    """
    Extrapolator based on an exponential function.

    Outside the data range the function is exp(m * x), where m is such that
    the boundary knot is reproduced exactly:

    - on the left:  exp(m * first_key) = first_value
    - on the right: exp(m * last_key) = last_value

    so m = ln(y0) / x0 and the curve is continuous at the boundary. Only
    the anchoring knot has a non-zero sensitivity:

        d exp(m x) / d y0 = exp(m x) * x / (x0 * y0)
    """

    NAME: ClassVar[str] = "Exponential"

    @staticmethod
    def _slope(x0: float, y0: float) -> float:
        if not y0 > 0:
            raise NumericDomainError(
                f"Exponential extrapolation needs a positive boundary value, got {y0}"
            )
        if x0 == 0:
            raise NumericDomainError("Exponential extrapolation cannot be anchored at key 0")
        return math.log(y0) / x0

    def value_at(self, bundle, x, interpolator=None):
        _, x0, y0 = self._boundary(bundle, x)
        m = self._slope(x0, y0)
        return math.exp(m * x)

    def first_derivative_at(self, bundle, x, interpolator=None):
        _, x0, y0 = self._boundary(bundle, x)
        m = self._slope(x0, y0)
        return m * math.exp(m * x)

    def node_sensitivities_at(self, bundle, x, interpolator=None):
        index, x0, y0 = self._boundary(bundle, x)
        m = self._slope(x0, y0)
        result = np.zeros(bundle.size)
        result[index] = math.exp(m * x) * x / (x0 * y0)
        return result


_EXTRAPOLATORS = {
    "flat": FlatExtrapolator,
    "linear": LinearExtrapolator,
    "lin": LinearExtrapolator,
    "exponential": ExponentialExtrapolator,
    "exp": ExponentialExtrapolator,
}


def create_extrapolator(method: str) -> Extrapolator:
    """
    Factory function to create an extrapolator by name.

    Args:
        method: One of "flat", "linear", "exponential" (case-insensitive)

    Returns:
        Extrapolator instance
    """
    key = str(method).lower().replace("-", "_").replace(" ", "_")
    try:
        return _EXTRAPOLATORS[key]()
    except KeyError:
        raise ValidationError(f"Unknown extrapolation method: {method}") from None


__all__ = [
    "Extrapolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "ExponentialExtrapolator",
    "create_extrapolator",
]
