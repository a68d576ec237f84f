"""
CurveKit: Nodal Curve Interpolation & Sensitivity Library

A modular library for:
- Building interpolated curves from market-quote nodes
- Interpolating and extrapolating with exact analytic node sensitivities
- Describing calibration inputs (curve nodes, instrument templates)
- Strike conventions and parameterised volatility surfaces
- Bump-and-revalue checks of analytic sensitivities

Scope: curve representation and sensitivities; calibration solvers and
instrument pricing live outside the library.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import DayCount, BusinessDayConvention, BuySell, Conventions, ValueType, year_fraction
from .dates import DateUtils
from .errors import (
    CurveKitError,
    DomainError,
    NumericDomainError,
    ValidationError,
    MissingMarketDataError,
)
from .market_data import QuoteId, FxRateId, MarketData
from .perturbation import (
    ParameterMetadata,
    ParallelShift,
    PointShift,
    LabelledShifts,
    ScaledShift,
)

# Curves
from .curves import (
    DataBundle,
    LinearInterpolator,
    LogLinearInterpolator,
    NaturalCubicSplineInterpolator,
    FlatExtrapolator,
    LinearExtrapolator,
    ExponentialExtrapolator,
    InterpolatedNodalCurve,
    create_interpolator,
    create_extrapolator,
    TermDepositCurveNode,
    FraCurveNode,
    FixedOvernightSwapCurveNode,
    XCcyIborIborSwapCurveNode,
    CurveInterpolationConfig,
    NodalCurveDefinition,
)

# Volatility
from .vol import (
    StrikeType,
    SimpleStrike,
    MoneynessStrike,
    LogMoneynessStrike,
    DeltaStrike,
    convert_strike,
    ExpiryStrikeVolatilities,
    SabrParams,
    SabrVolatilities,
)

# Risk
from .risk import BumpEngine, BumpResult, curve_sensitivity_report

__all__ = [
    "__version__",
    "DayCount",
    "BusinessDayConvention",
    "BuySell",
    "Conventions",
    "ValueType",
    "year_fraction",
    "DateUtils",
    "CurveKitError",
    "DomainError",
    "NumericDomainError",
    "ValidationError",
    "MissingMarketDataError",
    "QuoteId",
    "FxRateId",
    "MarketData",
    "ParameterMetadata",
    "ParallelShift",
    "PointShift",
    "LabelledShifts",
    "ScaledShift",
    "DataBundle",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "NaturalCubicSplineInterpolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "ExponentialExtrapolator",
    "InterpolatedNodalCurve",
    "create_interpolator",
    "create_extrapolator",
    "TermDepositCurveNode",
    "FraCurveNode",
    "FixedOvernightSwapCurveNode",
    "XCcyIborIborSwapCurveNode",
    "CurveInterpolationConfig",
    "NodalCurveDefinition",
    "StrikeType",
    "SimpleStrike",
    "MoneynessStrike",
    "LogMoneynessStrike",
    "DeltaStrike",
    "convert_strike",
    "ExpiryStrikeVolatilities",
    "SabrParams",
    "SabrVolatilities",
    "BumpEngine",
    "BumpResult",
    "curve_sensitivity_report",
]
