"""
Volatility package - strikes, smiles and parameterised surfaces.

Provides:
- Strike variants and convert_strike
- Volatilities: copy-on-write parameterised surface contract
- ExpiryStrikeVolatilities: smile curves per expiry
- SabrVolatilities: bucketed SABR parameters
"""

from .strike import (
    StrikeType,
    Strike,
    SimpleStrike,
    MoneynessStrike,
    LogMoneynessStrike,
    DeltaStrike,
    strike_of,
    absolute_strike,
    convert_strike,
)
from .volatilities import Volatilities
from .surface import ExpiryStrikeVolatilities
from .sabr import SabrParams, SabrModel, hagan_black_vol, hagan_normal_vol, alpha_from_sigma_atm
from .sabr_surface import SabrVolatilities

__all__ = [
    "StrikeType",
    "Strike",
    "SimpleStrike",
    "MoneynessStrike",
    "LogMoneynessStrike",
    "DeltaStrike",
    "strike_of",
    "absolute_strike",
    "convert_strike",
    "Volatilities",
    "ExpiryStrikeVolatilities",
    "SabrParams",
    "SabrModel",
    "hagan_black_vol",
    "hagan_normal_vol",
    "alpha_from_sigma_atm",
    "SabrVolatilities",
]
