"""
Ordered, immutable collection of curve knots.

A DataBundle holds (key, value) pairs with strictly increasing keys. The
closed interval [first_key, last_key] is the interpolation domain; keys
outside it belong to the extrapolators.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

from ..errors import ValidationError


@dataclass(frozen=True)
class DataBundle:
    """
    Curve knots as parallel tuples of keys and values.

    Unsorted input is sorted by key (values follow their keys). Duplicate or
    non-finite keys, mismatched lengths and empty input are rejected.

    Attributes:
        keys: Strictly increasing knot keys (e.g. year fractions)
        values: Knot values (discount factors, zero rates, vols, ...)
    """
    keys: Tuple[float, ...]
    values: Tuple[float, ...]

    def __post_init__(self):
        if self.keys is None or self.values is None:
            raise ValidationError("DataBundle keys and values must not be None")
        keys = [float(k) for k in self.keys]
        values = [float(v) for v in self.values]
        if len(keys) != len(values):
            raise ValidationError(
                f"Keys and values must have same length, got {len(keys)} and {len(values)}"
            )
        if not keys:
            raise ValidationError("DataBundle needs at least one knot")
        if not np.all(np.isfinite(keys)):
            raise ValidationError("DataBundle keys must be finite")

        order = np.argsort(keys, kind="stable")
        sorted_keys = tuple(keys[i] for i in order)
        sorted_values = tuple(values[i] for i in order)
        if any(b <= a for a, b in zip(sorted_keys, sorted_keys[1:])):
            raise ValidationError("Duplicate keys are not allowed in a DataBundle")

        object.__setattr__(self, "keys", sorted_keys)
        object.__setattr__(self, "values", sorted_values)

    @classmethod
    def of(cls, keys: Iterable[float], values: Iterable[float]) -> "DataBundle":
        return cls(tuple(keys), tuple(values))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[float, float]]) -> "DataBundle":
        pairs = list(pairs)
        return cls(tuple(p[0] for p in pairs), tuple(p[1] for p in pairs))

    @property
    def size(self) -> int:
        return len(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return iter(zip(self.keys, self.values))

    def first_key(self) -> float:
        return self.keys[0]

    def last_key(self) -> float:
        return self.keys[-1]

    def first_value(self) -> float:
        return self.values[0]

    def last_value(self) -> float:
        return self.values[-1]

    def key_array(self) -> np.ndarray:
        return np.array(self.keys, dtype=np.float64)

    def value_array(self) -> np.ndarray:
        return np.array(self.values, dtype=np.float64)

    def contains_key(self, x: float) -> bool:
        """True if x lies inside [first_key, last_key]."""
        return self.keys[0] <= x <= self.keys[-1]

    def lower_bound_index(self, x: float) -> int:
        """
        Index i of the interval [keys[i], keys[i+1]] containing x.

        The last interval is used for x == last_key. Requires size >= 2
        and an interior x.
        """
        idx = int(np.searchsorted(self.keys, x, side='right')) - 1
        return max(0, min(idx, len(self.keys) - 2))

    def with_value(self, index: int, value: float) -> "DataBundle":
        """Return a new bundle with one value replaced."""
        if not 0 <= index < len(self.values):
            raise ValidationError(
                f"Index {index} out of range for bundle of size {len(self.values)}"
            )
        values = list(self.values)
        values[index] = float(value)
        return DataBundle(self.keys, tuple(values))

    def with_values(self, values: Sequence[float]) -> "DataBundle":
        """Return a new bundle with the same keys and new values."""
        return DataBundle(self.keys, tuple(values))


__all__ = ["DataBundle"]
