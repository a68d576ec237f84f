"""
Interpolation methods for nodal curves.

Provides:
- LinearInterpolator: Piecewise linear interpolation
- LogLinearInterpolator: Linear interpolation of log(value), i.e. piecewise
  constant forward rates when values are discount factors
- NaturalCubicSplineInterpolator: Natural cubic spline (zero curvature at ends)

Interpolators are stateless: every query receives the DataBundle, so one
instance can be shared by any number of curves and threads. Each query
comes in three forms, all exact and closed-form:

- value_at: interpolated value
- first_derivative_at: d value / d x
- node_sensitivities_at: d value / d knot value, one entry per knot

Queries are only valid inside [first_key, last_key]; anything else raises
DomainError and is the extrapolators' business.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar, Tuple
import math

import numpy as np

from ..errors import DomainError, NumericDomainError, ValidationError
from .bundle import DataBundle


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    NAME: ClassVar[str] = ""

    @property
    def name(self) -> str:
        return self.NAME

    def _check_domain(self, bundle: DataBundle, x: float) -> None:
        if not bundle.contains_key(x):
            raise DomainError(
                f"Value {x} is outside data range [{bundle.first_key()}, {bundle.last_key()}]"
            )

    @abstractmethod
    def value_at(self, bundle: DataBundle, x: float) -> float:
        """Interpolated value at x."""

    @abstractmethod
    def first_derivative_at(self, bundle: DataBundle, x: float) -> float:
        """First derivative of the interpolant with respect to x."""

    @abstractmethod
    def node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        """Sensitivity of value_at(bundle, x) to each knot value."""

    @abstractmethod
    def first_derivative_node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        """Sensitivity of first_derivative_at(bundle, x) to each knot value."""

    def __str__(self) -> str:
        return self.NAME


def _single_knot_sensitivities(bundle: DataBundle) -> np.ndarray:
    return np.ones(1)


@dataclass(frozen=True)
class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Between knots i and i+1 with weight w = (x - x_i) / (x_{i+1} - x_i)
    the value is (1 - w) y_i + w y_{i+1}, so the sensitivities are
    (1 - w) and w on the bracketing knots.
    """

    NAME: ClassVar[str] = "Linear"

    def _bracket(self, bundle: DataBundle, x: float) -> Tuple[int, float, float]:
        i = bundle.lower_bound_index(x)
        h = bundle.keys[i + 1] - bundle.keys[i]
        return i, h, (x - bundle.keys[i]) / h

    def value_at(self, bundle: DataBundle, x: float) -> float:
        self._check_domain(bundle, x)
        if bundle.size == 1:
            return bundle.first_value()
        i, _, w = self._bracket(bundle, x)
        y0, y1 = bundle.values[i], bundle.values[i + 1]
        return y0 + w * (y1 - y0)

    def first_derivative_at(self, bundle: DataBundle, x: float) -> float:
        self._check_domain(bundle, x)
        if bundle.size == 1:
            return 0.0
        i, h, _ = self._bracket(bundle, x)
        return (bundle.values[i + 1] - bundle.values[i]) / h

    def node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        self._check_domain(bundle, x)
        if bundle.size == 1:
            return _single_knot_sensitivities(bundle)
        i, _, w = self._bracket(bundle, x)
        result = np.zeros(bundle.size)
        result[i] = 1.0 - w
        result[i + 1] = w
        return result

    def first_derivative_node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        self._check_domain(bundle, x)
        result = np.zeros(bundle.size)
        if bundle.size == 1:
            return result
        i, h, _ = self._bracket(bundle, x)
        result[i] = -1.0 / h
        result[i + 1] = 1.0 / h
        return result


@dataclass(frozen=True)
class LogLinearInterpolator(Interpolator):
    """
    Log-linear interpolation.

    Interpolates linearly in log(value) space, which corresponds to
    piecewise constant forward rates for discount factors. All knot
    values must be strictly positive.
    """

    NAME: ClassVar[str] = "LogLinear"

    def _check_positive(self, bundle: DataBundle) -> None:
        for value in bundle.values:
            if not value > 0:
                raise NumericDomainError(
                    f"Log-linear interpolation needs positive values, got {value}"
                )

    def _prepare(self, bundle: DataBundle, x: float) -> Tuple[int, float, float, float]:
        self._check_domain(bundle, x)
        self._check_positive(bundle)
        i = bundle.lower_bound_index(x)
        h = bundle.keys[i + 1] - bundle.keys[i]
        w = (x - bundle.keys[i]) / h
        log_y0 = math.log(bundle.values[i])
        log_y1 = math.log(bundle.values[i + 1])
        value = math.exp(log_y0 + w * (log_y1 - log_y0))
        return i, h, w, value

    def value_at(self, bundle: DataBundle, x: float) -> float:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return bundle.first_value()
        _, _, _, value = self._prepare(bundle, x)
        return value

    def first_derivative_at(self, bundle: DataBundle, x: float) -> float:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return 0.0
        i, h, _, value = self._prepare(bundle, x)
        slope = (math.log(bundle.values[i + 1]) - math.log(bundle.values[i])) / h
        return value * slope

    def node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return _single_knot_sensitivities(bundle)
        i, _, w, value = self._prepare(bundle, x)
        result = np.zeros(bundle.size)
        result[i] = value * (1.0 - w) / bundle.values[i]
        result[i + 1] = value * w / bundle.values[i + 1]
        return result

    def first_derivative_node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        result = np.zeros(bundle.size)
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return result
        i, h, w, value = self._prepare(bundle, x)
        y0, y1 = bundle.values[i], bundle.values[i + 1]
        slope = (math.log(y1) - math.log(y0)) / h
        # d(value * slope) = slope * d(value) + value * d(slope)
        result[i] = slope * value * (1.0 - w) / y0 - value / (h * y0)
        result[i + 1] = slope * value * w / y1 + value / (h * y1)
        return result


@lru_cache(maxsize=256)
def _second_derivative_map(keys: Tuple[float, ...]) -> np.ndarray:
    """
    Matrix S such that the natural spline second derivatives are S @ values.

    S depends on the keys only, so it is cached per key tuple and shared by
    every bundle on the same grid. The returned array is read-only.
    """
    n = len(keys)
    h = np.diff(keys)
    A = np.zeros((n, n))
    B = np.zeros((n, n))
    A[0, 0] = 1.0
    A[n - 1, n - 1] = 1.0
    for i in range(1, n - 1):
        A[i, i - 1] = h[i - 1]
        A[i, i] = 2 * (h[i - 1] + h[i])
        A[i, i + 1] = h[i]
        B[i, i - 1] = 6.0 / h[i - 1]
        B[i, i] = -6.0 / h[i - 1] - 6.0 / h[i]
        B[i, i + 1] = 6.0 / h[i]
    S = np.linalg.solve(A, B)
    S.setflags(write=False)
    return S


@dataclass(frozen=True)
class NaturalCubicSplineInterpolator(Interpolator):
    """
    Natural cubic spline interpolation.

    Second derivatives M solve a tridiagonal system A M = B y with
    M[0] = M[n-1] = 0. Because M is linear in the knot values, the
    sensitivity of M to y is the matrix A^-1 B, which gives exact node
    sensitivities. With two knots the spline is linear.
    """

    NAME: ClassVar[str] = "NaturalCubicSpline"

    def _prepare(self, bundle: DataBundle, x: float):
        self._check_domain(bundle, x)
        keys = bundle.key_array()
        values = bundle.value_array()
        S = _second_derivative_map(bundle.keys)
        M = S @ values
        i = bundle.lower_bound_index(x)
        h = keys[i + 1] - keys[i]
        dx = x - keys[i]
        return i, h, dx, values, S, M

    def value_at(self, bundle: DataBundle, x: float) -> float:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return bundle.first_value()
        i, h, dx, y, _, M = self._prepare(bundle, x)
        b = (y[i + 1] - y[i]) / h - h * (M[i + 1] + 2 * M[i]) / 6
        c = M[i] / 2
        d = (M[i + 1] - M[i]) / (6 * h)
        return float(y[i] + b * dx + c * dx**2 + d * dx**3)

    def first_derivative_at(self, bundle: DataBundle, x: float) -> float:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return 0.0
        i, h, dx, y, _, M = self._prepare(bundle, x)
        b = (y[i + 1] - y[i]) / h - h * (M[i + 1] + 2 * M[i]) / 6
        return float(b + M[i] * dx + (M[i + 1] - M[i]) * dx**2 / (2 * h))

    def second_derivative_at(self, bundle: DataBundle, x: float) -> float:
        """Second derivative of the spline at x."""
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return 0.0
        i, h, dx, _, _, M = self._prepare(bundle, x)
        return float(M[i] + (M[i + 1] - M[i]) * dx / h)

    def node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return _single_knot_sensitivities(bundle)
        i, h, dx, _, S, _ = self._prepare(bundle, x)
        result = (
            (-h * dx / 3 + dx**2 / 2 - dx**3 / (6 * h)) * S[i]
            + (-h * dx / 6 + dx**3 / (6 * h)) * S[i + 1]
        )
        result[i] += 1.0 - dx / h
        result[i + 1] += dx / h
        return result

    def first_derivative_node_sensitivities_at(self, bundle: DataBundle, x: float) -> np.ndarray:
        if bundle.size == 1:
            self._check_domain(bundle, x)
            return np.zeros(1)
        i, h, dx, _, S, _ = self._prepare(bundle, x)
        result = (
            (-h / 3 + dx - dx**2 / (2 * h)) * S[i]
            + (-h / 6 + dx**2 / (2 * h)) * S[i + 1]
        )
        result[i] -= 1.0 / h
        result[i + 1] += 1.0 / h
        return result


_INTERPOLATORS = {
    "linear": LinearInterpolator,
    "lin": LinearInterpolator,
    "log_linear": LogLinearInterpolator,
    "loglinear": LogLinearInterpolator,
    "natural_cubic_spline": NaturalCubicSplineInterpolator,
    "naturalcubicspline": NaturalCubicSplineInterpolator,
    "cubic_spline": NaturalCubicSplineInterpolator,
    "cubic": NaturalCubicSplineInterpolator,
    "spline": NaturalCubicSplineInterpolator,
}


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "log_linear", "natural_cubic_spline"
            (case, spaces and hyphens are ignored)

    Returns:
        Interpolator instance
    """
    key = str(method).lower().replace("-", "_").replace(" ", "_")
    try:
        return _INTERPOLATORS[key]()
    except KeyError:
        raise ValidationError(f"Unknown interpolation method: {method}") from None


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "NaturalCubicSplineInterpolator",
    "create_interpolator",
]
