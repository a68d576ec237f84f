"""
Nodal curve definitions.

A NodalCurveDefinition is what the calibration solver works from: an
ordered set of curve nodes plus the interpolation configuration. It
collects market-data requirements, node pillars and solver seeds, and
turns a vector of solved parameters into an InterpolatedNodalCurve. The
root-finding loop itself lives outside this library.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Hashable, List, Mapping, Sequence, Tuple
import logging

from ..conventions import DayCount, ValueType, year_fraction
from ..errors import ValidationError, require_not_none
from ..market_data import MarketData
from .curve import InterpolatedNodalCurve
from .bundle import DataBundle
from .extrapolation import Extrapolator, create_extrapolator
from .interpolation import Interpolator, create_interpolator
from .nodes import CurveNode, TenorCurveNodeMetadata
from .templates import Trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveInterpolationConfig:
    """
    Choice of interpolation scheme for a curve, by name.

    Attributes:
        interpolator: Interpolator name (see create_interpolator)
        extrapolator_left: Extrapolator name used below the first node
        extrapolator_right: Extrapolator name used above the last node
    """
    interpolator: str = "linear"
    extrapolator_left: str = "flat"
    extrapolator_right: str = "flat"

    def __post_init__(self):
        # Fail at construction on unknown names
        self.create_interpolator()
        self.create_extrapolator_left()
        self.create_extrapolator_right()

    @classmethod
    def from_dict(cls, d: Mapping[str, str]) -> "CurveInterpolationConfig":
        """Create from dictionary; missing keys take the defaults."""
        defaults = cls.__dataclass_fields__
        return cls(**{
            name: d.get(name, defaults[name].default) for name in defaults
        })

    def to_dict(self) -> Dict[str, str]:
        return {
            "interpolator": self.interpolator,
            "extrapolator_left": self.extrapolator_left,
            "extrapolator_right": self.extrapolator_right,
        }

    def create_interpolator(self) -> Interpolator:
        return create_interpolator(self.interpolator)

    def create_extrapolator_left(self) -> Extrapolator:
        return create_extrapolator(self.extrapolator_left)

    def create_extrapolator_right(self) -> Extrapolator:
        return create_extrapolator(self.extrapolator_right)


@dataclass(frozen=True)
class NodalCurveDefinition:
    """
    Definition of a curve calibrated to a set of nodes.

    Attributes:
        name: Curve name
        value_type: Measure on the y-axis (drives the solver seed)
        nodes: Curve nodes; their pillar dates define the x-values
        day_count: Converts node dates to year fractions
        config: Interpolation/extrapolation choice
    """
    name: str
    value_type: ValueType
    nodes: Tuple[CurveNode, ...]
    day_count: DayCount = DayCount.ACT_365
    config: CurveInterpolationConfig = field(default_factory=CurveInterpolationConfig)

    def __post_init__(self):
        require_not_none(self.name, "name")
        require_not_none(self.value_type, "value_type")
        require_not_none(self.nodes, "nodes")
        require_not_none(self.config, "config")
        object.__setattr__(self, "nodes", tuple(self.nodes))
        if not self.nodes:
            raise ValidationError(f"Curve definition {self.name} has no nodes")

    @property
    def parameter_count(self) -> int:
        return len(self.nodes)

    def requirements(self) -> FrozenSet[Hashable]:
        """Union of the requirements of every node."""
        ids = set()
        for node in self.nodes:
            ids.update(node.requirements())
        return frozenset(ids)

    def node_metadata(self, valuation_date: date) -> List[TenorCurveNodeMetadata]:
        return [node.metadata(valuation_date) for node in self.nodes]

    def initial_guesses(self, valuation_date: date, market_data: MarketData) -> List[float]:
        return [
            node.initial_guess(valuation_date, market_data, self.value_type)
            for node in self.nodes
        ]

    def trades(self, valuation_date: date, market_data: MarketData) -> List[Trade]:
        return [node.trade(valuation_date, market_data) for node in self.nodes]

    def curve(self, valuation_date: date, parameters: Sequence[float]) -> InterpolatedNodalCurve:
        """
        Build the curve for a vector of node values.

        Parameters are in node order; x-values are year fractions from the
        valuation date to each node date. The curve holds its knots in date
        order, so for nodes listed out of date order curve parameter j is
        parameters[i] for the node with the j-th earliest date. Metadata
        moves with its value, so labels always match knots.

        Raises:
            ValidationError: Wrong parameter count or two nodes on the same date
        """
        if len(parameters) != self.parameter_count:
            raise ValidationError(
                f"Curve {self.name} needs {self.parameter_count} parameters, got {len(parameters)}"
            )
        metadata = self.node_metadata(valuation_date)
        times = [year_fraction(valuation_date, m.node_date, self.day_count) for m in metadata]
        if len(set(times)) != len(times):
            raise ValidationError(f"Curve {self.name} has two nodes on the same date")

        # DataBundle sorts by key; keep metadata aligned with it
        order = sorted(range(len(times)), key=lambda i: times[i])
        bundle = DataBundle.of([times[i] for i in order], [parameters[i] for i in order])
        logger.debug(
            "Building curve %s with %d nodes from %s to %s",
            self.name, bundle.size, bundle.first_key(), bundle.last_key(),
        )
        return InterpolatedNodalCurve(
            name=self.name,
            bundle=bundle,
            interpolator=self.config.create_interpolator(),
            extrapolator_left=self.config.create_extrapolator_left(),
            extrapolator_right=self.config.create_extrapolator_right(),
            value_type=self.value_type,
            day_count=self.day_count,
            parameter_metadata=tuple(metadata[i] for i in order),
        )


__all__ = [
    "CurveInterpolationConfig",
    "NodalCurveDefinition",
]
