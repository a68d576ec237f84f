"""
Error taxonomy for curve construction and sensitivity calculations.

All errors derive from the built-in exception a caller would expect for
the same failure (``ValueError`` or ``KeyError``), so standard handling
keeps working.

- DomainError: query key outside an interpolator/extrapolator domain
- NumericDomainError: closed-form precondition violated (e.g. log of a
  non-positive anchor value)
- ValidationError: bad constructor input, index out of range, bad name
- MissingMarketDataError: requested market-data identifier not available
"""


class CurveKitError(Exception):
    """Base class for all library errors."""


class DomainError(CurveKitError, ValueError):
    """Query key outside the valid domain of an interpolator or extrapolator."""


class NumericDomainError(CurveKitError, ValueError):
    """A closed-form formula was asked to work outside its numeric domain."""


class ValidationError(CurveKitError, ValueError):
    """Invalid input detected at construction or call time."""


class MissingMarketDataError(CurveKitError, KeyError):
    """Market data does not contain the requested identifier."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument
        return str(self.args[0]) if self.args else ""


def require_not_none(value, name: str):
    """Return value, raising ValidationError if it is None."""
    if value is None:
        raise ValidationError(f"{name} must not be None")
    return value


def require_not_negative(value: float, name: str) -> float:
    """Return value, raising ValidationError if it is negative or NaN."""
    if not value >= 0:
        raise ValidationError(f"{name} must not be negative, got {value}")
    return value


__all__ = [
    "CurveKitError",
    "DomainError",
    "NumericDomainError",
    "ValidationError",
    "MissingMarketDataError",
    "require_not_none",
    "require_not_negative",
]
