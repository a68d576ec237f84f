"""
Black'76 option pricing.

Prices European options on a forward from a Black (lognormal)
volatility. Used to revalue options under bumped volatility surfaces
and to check surface sensitivities against vega.
"""

import numpy as np
from scipy.stats import norm

from ..errors import NumericDomainError

N = norm.cdf
n = norm.pdf


def _d1_d2(F: float, K: float, T: float, sigma_b: float):
    if F <= 0 or K <= 0:
        raise NumericDomainError("Forward and strike must be positive for the Black model")
    std_dev = sigma_b * np.sqrt(T)
    d1 = (np.log(F / K) + 0.5 * std_dev**2) / std_dev
    return d1, d1 - std_dev


def black76_call(F: float, K: float, T: float, sigma_b: float, df: float = 1.0) -> float:
    """
    Black'76 call price.

    Args:
        F: Forward
        K: Strike
        T: Time to expiry (years)
        sigma_b: Black volatility
        df: Discount factor to payment

    Returns:
        Call price; intrinsic value when T or sigma_b is not positive
    """
    if T <= 0 or sigma_b <= 0:
        return max(F - K, 0.0) * df
    d1, d2 = _d1_d2(F, K, T, sigma_b)
    return float(df * (F * N(d1) - K * N(d2)))


def black76_put(F: float, K: float, T: float, sigma_b: float, df: float = 1.0) -> float:
    """Black'76 put price; intrinsic value when T or sigma_b is not positive."""
    if T <= 0 or sigma_b <= 0:
        return max(K - F, 0.0) * df
    d1, d2 = _d1_d2(F, K, T, sigma_b)
    return float(df * (K * N(-d2) - F * N(-d1)))


def black76_vega(F: float, K: float, T: float, sigma_b: float, df: float = 1.0) -> float:
    """d price / d sigma_b, identical for calls and puts."""
    if T <= 0 or sigma_b <= 0:
        return 0.0
    d1, _ = _d1_d2(F, K, T, sigma_b)
    return float(df * F * n(d1) * np.sqrt(T))


__all__ = ["black76_call", "black76_put", "black76_vega"]
