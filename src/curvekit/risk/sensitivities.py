"""
Sensitivity reports.

Puts the analytic parameter sensitivities of curves and surfaces next to
bump-and-revalue finite differences, one row per parameter label.
"""

from datetime import date
from typing import Union

import numpy as np
import pandas as pd

from ..curves.curve import InterpolatedNodalCurve
from ..vol.surface import ExpiryStrikeVolatilities
from .bumping import BumpEngine


def _report(labels, analytic: np.ndarray, numeric: np.ndarray) -> pd.DataFrame:
    return pd.DataFrame({
        "label": list(labels),
        "analytic": analytic,
        "finite_difference": numeric,
        "difference": analytic - numeric,
    })


def curve_sensitivity_report(
    curve: InterpolatedNodalCurve,
    x: float,
    shift: float = 1e-6,
) -> pd.DataFrame:
    """
    Node sensitivities of curve.y_value(x), analytic vs central difference.

    Args:
        curve: Curve to analyse
        x: Query key (inside or outside the node range)
        shift: Absolute bump applied to each node value

    Returns:
        DataFrame with columns [label, analytic, finite_difference, difference]
    """
    analytic = curve.y_value_parameter_sensitivity(x)
    numeric = BumpEngine(curve).parameter_sensitivities(lambda c: c.y_value(x), shift)
    return _report((m.label for m in curve.parameter_metadata), analytic, numeric)


def volatility_sensitivity_report(
    surface: ExpiryStrikeVolatilities,
    expiry: Union[date, float],
    strike: float,
    forward: float,
    shift: float = 1e-6,
) -> pd.DataFrame:
    """Parameter sensitivities of surface.volatility, analytic vs central difference."""
    analytic = surface.volatility_parameter_sensitivity(expiry, strike, forward)
    numeric = BumpEngine(surface).parameter_sensitivities(
        lambda s: s.volatility(expiry, strike, forward), shift
    )
    return _report((m.label for m in surface.parameter_metadata), analytic, numeric)


__all__ = ["curve_sensitivity_report", "volatility_sensitivity_report"]
