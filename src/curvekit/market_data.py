"""
Market data identifiers and lookup.

Curve nodes declare the identifiers they need (``requirements()``) and
read observed values through ``MarketData.get_value``. Resolution, retries
and staleness are the caller's concern; this module only holds values.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Hashable, Iterator, Mapping, Optional, Tuple, Union

from .errors import MissingMarketDataError, ValidationError


@dataclass(frozen=True)
class QuoteId:
    """
    Identifier of a single market quote.

    Attributes:
        name: Ticker or symbol, e.g. "USD-OIS-2Y"
        field_name: Field of the quote being read
    """
    name: str
    field_name: str = "MarketValue"

    def __post_init__(self):
        if not self.name:
            raise ValidationError("QuoteId name must not be empty")

    def __str__(self) -> str:
        return f"{self.name}/{self.field_name}"


@dataclass(frozen=True)
class FxRateId:
    """Identifier of an FX rate, quoted as units of counter per unit of base."""
    base: str
    counter: str

    def __post_init__(self):
        if len(self.base) != 3 or len(self.counter) != 3:
            raise ValidationError(f"Currency codes must have 3 letters, got {self.base}/{self.counter}")
        if self.base == self.counter:
            raise ValidationError(f"FX rate needs two distinct currencies, got {self.base}/{self.counter}")

    def __str__(self) -> str:
        return f"{self.base.upper()}/{self.counter.upper()}"


MarketDataId = Union[QuoteId, FxRateId]


@dataclass(frozen=True)
class MarketData:
    """
    Immutable snapshot of observed market values keyed by identifier.

    Attributes:
        valuation_date: Date the values were observed
        values: Read-only mapping of identifier -> observed value
    """
    valuation_date: Optional[date] = None
    values: Mapping[Hashable, float] = field(default_factory=dict)

    def __post_init__(self):
        values = {k: float(v) for k, v in dict(self.values).items()}
        object.__setattr__(self, "values", MappingProxyType(values))

    @classmethod
    def of(cls, values: Mapping[Hashable, float], valuation_date: Optional[date] = None) -> "MarketData":
        return cls(valuation_date=valuation_date, values=values)

    def get_value(self, identifier: Hashable) -> float:
        """
        Return the observed value for an identifier.

        Raises:
            MissingMarketDataError: If the identifier is not present
        """
        try:
            return self.values[identifier]
        except KeyError:
            raise MissingMarketDataError(f"No market data available for '{identifier}'") from None

    def contains(self, identifier: Hashable) -> bool:
        return identifier in self.values

    def ids(self) -> Tuple[Hashable, ...]:
        return tuple(self.values)

    def with_value(self, identifier: Hashable, value: float) -> "MarketData":
        """Return a copy with one value added or replaced."""
        updated: Dict[Hashable, float] = dict(self.values)
        updated[identifier] = value
        return MarketData(self.valuation_date, updated)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __hash__(self) -> int:
        return hash((self.valuation_date, frozenset(self.values.items())))


__all__ = [
    "QuoteId",
    "FxRateId",
    "MarketDataId",
    "MarketData",
]
