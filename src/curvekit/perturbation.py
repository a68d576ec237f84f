"""
Parameter metadata and structured perturbations.

A perturbation is any callable ``(index, value, metadata) -> new value``.
Curves and volatility objects apply it to every parameter and return a new
instance; the definition of the shift itself is caller configuration.

Provides:
- ParameterMetadata: label attached to a curve or surface parameter
- ParallelShift: same additive shift on every parameter
- PointShift: additive shift on a single parameter index
- LabelledShifts: additive shifts keyed by parameter label
- ScaledShift: multiplicative change on every parameter
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Tuple


@dataclass(frozen=True)
class ParameterMetadata:
    """Describes one parameter of a curve or surface."""
    label: str

    @classmethod
    def empty(cls, index: int) -> "ParameterMetadata":
        return cls(label=f"p{index}")


class ParameterPerturbation(Protocol):
    """Callable protocol applied to each parameter in turn."""

    def __call__(self, index: int, value: float, metadata: ParameterMetadata) -> float:
        ...


@dataclass(frozen=True)
class ParallelShift:
    """Add the same amount to every parameter."""
    amount: float

    def __call__(self, index: int, value: float, metadata: ParameterMetadata) -> float:
        return value + self.amount


@dataclass(frozen=True)
class PointShift:
    """Add an amount to one parameter, leaving the others untouched."""
    index: int
    amount: float

    def __call__(self, index: int, value: float, metadata: ParameterMetadata) -> float:
        return value + self.amount if index == self.index else value


@dataclass(frozen=True)
class LabelledShifts:
    """
    Additive shifts by parameter label (bucketed bump).

    Labels not present in the mapping are left unchanged.
    """
    shifts: Tuple[Tuple[str, float], ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, shifts: Mapping[str, float]) -> "LabelledShifts":
        return cls(tuple(sorted((str(k), float(v)) for k, v in shifts.items())))

    def shift_for(self, label: str) -> Optional[float]:
        for key, amount in self.shifts:
            if key == label:
                return amount
        return None

    def __call__(self, index: int, value: float, metadata: ParameterMetadata) -> float:
        amount = self.shift_for(metadata.label)
        return value if amount is None else value + amount


@dataclass(frozen=True)
class ScaledShift:
    """Multiply every parameter by ``1 + relative``."""
    relative: float

    def __call__(self, index: int, value: float, metadata: ParameterMetadata) -> float:
        return value * (1.0 + self.relative)


__all__ = [
    "ParameterMetadata",
    "ParameterPerturbation",
    "ParallelShift",
    "PointShift",
    "LabelledShifts",
    "ScaledShift",
]
