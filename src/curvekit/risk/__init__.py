"""
Risk package - bump-and-revalue and sensitivity reports.
"""

from .bumping import BumpEngine, BumpResult
from .sensitivities import curve_sensitivity_report, volatility_sensitivity_report

__all__ = [
    "BumpEngine",
    "BumpResult",
    "curve_sensitivity_report",
    "volatility_sensitivity_report",
]
