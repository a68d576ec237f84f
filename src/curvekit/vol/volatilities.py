"""
Parameterised volatility objects.

Every volatility surface in this package exposes its parameters as one
flat, ordered vector with one ParameterMetadata per entry. Bumped
surfaces are new instances (copy-on-write); the original never changes.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Sequence, Tuple, Union

import numpy as np

from ..conventions import DayCount, year_fraction
from ..errors import ValidationError
from ..perturbation import ParameterMetadata, ParameterPerturbation

Expiry = Union[date, float]


class Volatilities(ABC):
    """
    Abstract base class for volatility surfaces.

    Subclasses are frozen dataclasses holding ``valuation_date`` and
    ``day_count`` and implement ``parameters``, ``parameter_metadata``,
    ``_with_parameters`` and ``volatility``.
    """

    valuation_date: date
    day_count: DayCount

    @property
    @abstractmethod
    def parameters(self) -> Tuple[float, ...]:
        """All parameters in index order."""

    @property
    @abstractmethod
    def parameter_metadata(self) -> Tuple[ParameterMetadata, ...]:
        """One metadata entry per parameter."""

    @abstractmethod
    def _with_parameters(self, values: Sequence[float]) -> "Volatilities":
        """New instance with the same configuration and a new parameter vector."""

    @abstractmethod
    def volatility(self, expiry: Expiry, strike: float, forward: float) -> float:
        """Black volatility for an expiry, absolute strike and forward."""

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.parameter_count:
            raise ValidationError(
                f"Parameter index {index} out of range [0, {self.parameter_count})"
            )

    def get_parameter(self, index: int) -> float:
        self._check_index(index)
        return self.parameters[index]

    def get_parameter_metadata(self, index: int) -> ParameterMetadata:
        self._check_index(index)
        return self.parameter_metadata[index]

    def with_parameter(self, index: int, new_value: float) -> "Volatilities":
        """New surface with one parameter replaced."""
        self._check_index(index)
        values = list(self.parameters)
        values[index] = float(new_value)
        return self._with_parameters(values)

    def with_perturbation(self, perturbation: ParameterPerturbation) -> "Volatilities":
        """New surface with the perturbation applied to every parameter."""
        values = [
            perturbation(i, value, self.parameter_metadata[i])
            for i, value in enumerate(self.parameters)
        ]
        return self._with_parameters(values)

    def relative_time(self, expiry: Expiry) -> float:
        """Year fraction from the valuation date; floats pass through."""
        if isinstance(expiry, date):
            return year_fraction(self.valuation_date, expiry, self.day_count)
        return float(expiry)


def check_expiries(expiries: Sequence[float]) -> Tuple[float, ...]:
    """Validate expiry times: non-empty, positive, strictly increasing."""
    times = tuple(float(t) for t in expiries)
    if not times:
        raise ValidationError("At least one expiry is required")
    if times[0] <= 0:
        raise ValidationError(f"Expiries must be positive, got {times[0]}")
    if any(b <= a for a, b in zip(times, times[1:])):
        raise ValidationError("Expiries must be strictly increasing")
    return times


def variance_weights(expiries: Sequence[float], t: float) -> List[Tuple[int, float]]:
    """
    Weights c_i such that sigma(t)^2 = sum c_i sigma_i^2.

    Between two expiries total variance sigma^2 t is linear in t. Outside
    the expiry range the volatility of the nearest expiry is used.
    """
    if t <= expiries[0]:
        return [(0, 1.0)]
    if t >= expiries[-1]:
        return [(len(expiries) - 1, 1.0)]
    j = int(np.searchsorted(expiries, t, side='right'))
    i = j - 1
    w = (t - expiries[i]) / (expiries[j] - expiries[i])
    return [(i, (1.0 - w) * expiries[i] / t), (j, w * expiries[j] / t)]


__all__ = [
    "Expiry",
    "Volatilities",
    "check_expiries",
    "variance_weights",
]
