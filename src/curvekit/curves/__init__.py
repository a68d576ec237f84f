"""
Curves package - nodal curve construction and sensitivities.

Provides:
- DataBundle: Immutable ordered curve knots
- Interpolators and extrapolators with analytic node sensitivities
- InterpolatedNodalCurve: Knots + interpolator + left/right extrapolators
- Curve nodes and instrument templates for calibration
- NodalCurveDefinition: Nodes + interpolation config, builds curves
"""

from .bundle import DataBundle
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    NaturalCubicSplineInterpolator,
    create_interpolator,
)
from .extrapolation import (
    Extrapolator,
    FlatExtrapolator,
    LinearExtrapolator,
    ExponentialExtrapolator,
    create_extrapolator,
)
from .curve import InterpolatedNodalCurve, create_flat_curve
from .templates import (
    Trade,
    TermDeposit,
    Fra,
    FixedOvernightSwap,
    XCcyIborIborSwap,
    TermDepositTemplate,
    FraTemplate,
    FixedOvernightSwapTemplate,
    XCcyIborIborSwapTemplate,
)
from .nodes import (
    CurveNode,
    TenorCurveNodeMetadata,
    TermDepositCurveNode,
    FraCurveNode,
    FixedOvernightSwapCurveNode,
    XCcyIborIborSwapCurveNode,
)
from .definition import CurveInterpolationConfig, NodalCurveDefinition

__all__ = [
    "DataBundle",
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "NaturalCubicSplineInterpolator",
    "create_interpolator",
    "Extrapolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "ExponentialExtrapolator",
    "create_extrapolator",
    "InterpolatedNodalCurve",
    "create_flat_curve",
    "Trade",
    "TermDeposit",
    "Fra",
    "FixedOvernightSwap",
    "XCcyIborIborSwap",
    "TermDepositTemplate",
    "FraTemplate",
    "FixedOvernightSwapTemplate",
    "XCcyIborIborSwapTemplate",
    "CurveNode",
    "TenorCurveNodeMetadata",
    "TermDepositCurveNode",
    "FraCurveNode",
    "FixedOvernightSwapCurveNode",
    "XCcyIborIborSwapCurveNode",
    "CurveInterpolationConfig",
    "NodalCurveDefinition",
]
