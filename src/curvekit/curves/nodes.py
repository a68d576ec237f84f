"""
Curve nodes: the calibration inputs of a nodal curve.

A node ties one market instrument to the quote(s) it is calibrated to.
The calibration solver consumes nodes through four pure functions:

- requirements(): market-data identifiers the node reads
- metadata(valuation_date): pillar date and tenor label of the node
- trade(valuation_date, market_data): instrument built at the market quote
- initial_guess(valuation_date, market_data, value_type): solver seed

Variants:
- TermDepositCurveNode
- FraCurveNode
- FixedOvernightSwapCurveNode
- XCcyIborIborSwapCurveNode (spread quote plus FX rate)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Hashable, Optional

from ..conventions import BuySell, ValueType
from ..errors import require_not_none
from ..market_data import FxRateId, MarketData, QuoteId
from ..perturbation import ParameterMetadata
from .templates import (
    FixedOvernightSwapTemplate,
    FraTemplate,
    TermDepositTemplate,
    Trade,
    XCcyIborIborSwapTemplate,
)


@dataclass(frozen=True)
class TenorCurveNodeMetadata(ParameterMetadata):
    """
    Pillar of a curve node.

    Attributes:
        label: Display label, defaults to the tenor
        node_date: Structural date of the node instrument (its end date)
        tenor: Configured tenor of the template
    """
    node_date: Optional[date] = None
    tenor: str = ""

    @classmethod
    def of(cls, node_date: date, tenor: str, label: Optional[str] = None) -> "TenorCurveNodeMetadata":
        return cls(label=label or tenor, node_date=node_date, tenor=tenor)


class CurveNode(ABC):
    """
    Abstract base for curve nodes.

    Subclasses are frozen dataclasses with a ``template``, one or more
    market-data identifiers and a ``spread`` added to the primary quote.
    """

    label: Optional[str]

    @abstractmethod
    def requirements(self) -> FrozenSet[Hashable]:
        """Every market-data identifier this node reads."""

    @abstractmethod
    def _metadata_trade(self, valuation_date: date) -> Trade:
        """Zero-size trade at a neutral quote, used to read the node date."""

    @abstractmethod
    def trade(self, valuation_date: date, market_data: MarketData) -> Trade:
        """The node instrument at the observed market quote plus spread."""

    @property
    @abstractmethod
    def tenor(self) -> str:
        """Tenor tag used in the node metadata."""

    def metadata(self, valuation_date: date) -> TenorCurveNodeMetadata:
        """
        Pillar of the node for a valuation date.

        The date is the end date of the instrument built with a neutral
        quote; quote construction errors propagate unchanged.
        """
        trade = self._metadata_trade(valuation_date)
        return TenorCurveNodeMetadata.of(trade.product.end_date, self.tenor, self.label)

    def initial_guess(self, valuation_date: date, market_data: MarketData, value_type: ValueType) -> float:
        """
        Seed for the calibration solver.

        1.0 for discount factor curves, 0.0 for anything else (zero rates,
        spreads), for every node type.
        """
        if value_type == ValueType.DISCOUNT_FACTOR:
            return 1.0
        return 0.0


@dataclass(frozen=True)
class TermDepositCurveNode(CurveNode):
    """
    A curve node whose instrument is a term deposit.

    Attributes:
        template: Deposit template
        rate_id: Identifier of the market rate
        spread: Added to the market rate (default 0)
        label: Optional metadata label (defaults to the tenor)
    """
    template: TermDepositTemplate
    rate_id: QuoteId
    spread: float = 0.0
    label: Optional[str] = None

    def __post_init__(self):
        require_not_none(self.template, "template")
        require_not_none(self.rate_id, "rate_id")
        require_not_none(self.spread, "spread")

    @property
    def tenor(self) -> str:
        return self.template.tenor

    def requirements(self) -> FrozenSet[Hashable]:
        return frozenset({self.rate_id})

    def _metadata_trade(self, valuation_date: date) -> Trade:
        return self.template.to_trade(valuation_date, BuySell.BUY, 0.0, 0.0)

    def trade(self, valuation_date: date, market_data: MarketData) -> Trade:
        rate = market_data.get_value(self.rate_id) + self.spread
        return self.template.to_trade(valuation_date, BuySell.BUY, 1.0, rate)


@dataclass(frozen=True)
class FraCurveNode(CurveNode):
    """
    A curve node whose instrument is a forward rate agreement.

    The metadata tenor is the FRA period to end.
    """
    template: FraTemplate
    rate_id: QuoteId
    spread: float = 0.0
    label: Optional[str] = None

    def __post_init__(self):
        require_not_none(self.template, "template")
        require_not_none(self.rate_id, "rate_id")
        require_not_none(self.spread, "spread")

    @property
    def tenor(self) -> str:
        return self.template.tenor

    def requirements(self) -> FrozenSet[Hashable]:
        return frozenset({self.rate_id})

    def _metadata_trade(self, valuation_date: date) -> Trade:
        return self.template.to_trade(valuation_date, BuySell.BUY, 0.0, 0.0)

    def trade(self, valuation_date: date, market_data: MarketData) -> Trade:
        rate = market_data.get_value(self.rate_id) + self.spread
        return self.template.to_trade(valuation_date, BuySell.BUY, 1.0, rate)


@dataclass(frozen=True)
class FixedOvernightSwapCurveNode(CurveNode):
    """A curve node whose instrument is a fixed vs overnight swap."""
    template: FixedOvernightSwapTemplate
    rate_id: QuoteId
    spread: float = 0.0
    label: Optional[str] = None

    def __post_init__(self):
        require_not_none(self.template, "template")
        require_not_none(self.rate_id, "rate_id")
        require_not_none(self.spread, "spread")

    @property
    def tenor(self) -> str:
        return self.template.tenor

    def requirements(self) -> FrozenSet[Hashable]:
        return frozenset({self.rate_id})

    def _metadata_trade(self, valuation_date: date) -> Trade:
        return self.template.to_trade(valuation_date, BuySell.BUY, 0.0, 0.0)

    def trade(self, valuation_date: date, market_data: MarketData) -> Trade:
        rate = market_data.get_value(self.rate_id) + self.spread
        return self.template.to_trade(valuation_date, BuySell.BUY, 1.0, rate)


@dataclass(frozen=True)
class XCcyIborIborSwapCurveNode(CurveNode):
    """
    A curve node whose instrument is a cross-currency Ibor-Ibor swap.

    Two market quotes are required, one for the spread and one for the FX
    rate used to size the counter-currency notional.

    Attributes:
        template: Cross-currency swap template
        spread_id: Identifier of the market basis spread
        fx_id: Identifier of the near-date FX rate
        spread: Added to the market spread (default 0)
    """
    template: XCcyIborIborSwapTemplate
    spread_id: QuoteId
    fx_id: FxRateId
    spread: float = 0.0
    label: Optional[str] = None

    def __post_init__(self):
        require_not_none(self.template, "template")
        require_not_none(self.spread_id, "spread_id")
        require_not_none(self.fx_id, "fx_id")
        require_not_none(self.spread, "spread")

    @property
    def tenor(self) -> str:
        return self.template.tenor

    def requirements(self) -> FrozenSet[Hashable]:
        return frozenset({self.spread_id, self.fx_id})

    def _metadata_trade(self, valuation_date: date) -> Trade:
        return self.template.to_trade(valuation_date, BuySell.BUY, 1.0, 1.0, 0.0)

    def trade(self, valuation_date: date, market_data: MarketData) -> Trade:
        market_quote = market_data.get_value(self.spread_id) + self.spread
        fx_rate = market_data.get_value(self.fx_id)
        return self.template.to_trade(valuation_date, BuySell.BUY, 1.0, fx_rate, market_quote)


__all__ = [
    "CurveNode",
    "TenorCurveNodeMetadata",
    "TermDepositCurveNode",
    "FraCurveNode",
    "FixedOvernightSwapCurveNode",
    "XCcyIborIborSwapCurveNode",
]
