"""
SABR stochastic volatility model.

Implements:
- Hagan et al. Black implied volatility approximation
- Shifted SABR for negative rates
- Alpha inversion from the ATM volatility (sigma_atm parameterisation)
- Normal volatility approximation

References:
- Hagan, P.S. et al. (2002). "Managing Smile Risk." Wilmott Magazine.
"""

from dataclasses import dataclass
from typing import Dict, Mapping
import logging

import numpy as np
from scipy.optimize import brentq

from ..errors import NumericDomainError, ValidationError

logger = logging.getLogger(__name__)

_ATM_TOLERANCE = 1e-10


@dataclass(frozen=True)
class SabrParams:
    """
    SABR model parameters.

    Uses sigma_atm instead of alpha: alpha is recovered by inverting the
    ATM formula for the forward and expiry at hand.

    Attributes:
        sigma_atm: ATM Black volatility
        beta: CEV exponent in [0, 1], normally fixed
        rho: Correlation between forward and volatility, in (-1, 1)
        nu: Volatility of volatility, non-negative
        shift: Shift for negative rates (default 0)
    """
    sigma_atm: float
    beta: float
    rho: float
    nu: float
    shift: float = 0.0

    def __post_init__(self):
        if not -1 < self.rho < 1:
            raise ValidationError(f"rho must be in (-1, 1), got {self.rho}")
        if not self.nu >= 0:
            raise ValidationError(f"nu must be non-negative, got {self.nu}")
        if not 0 <= self.beta <= 1:
            raise ValidationError(f"beta must be in [0, 1], got {self.beta}")
        if not self.sigma_atm > 0:
            raise ValidationError(f"sigma_atm must be positive, got {self.sigma_atm}")

    def to_dict(self) -> Dict[str, float]:
        return {
            "sigma_atm": self.sigma_atm,
            "beta": self.beta,
            "rho": self.rho,
            "nu": self.nu,
            "shift": self.shift,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, float]) -> "SabrParams":
        """Create from dictionary; shift is optional."""
        try:
            return cls(
                sigma_atm=d["sigma_atm"],
                beta=d["beta"],
                rho=d["rho"],
                nu=d["nu"],
                shift=d.get("shift", 0.0),
            )
        except KeyError as exc:
            raise ValidationError(f"Missing SABR parameter {exc.args[0]}") from None


def _hagan_atm_vol(F: float, T: float, alpha: float, beta: float, rho: float, nu: float) -> float:
    """ATM Black vol from the Hagan formula (F already shifted)."""
    f_pow = F ** (1 - beta)
    correction = (
        (1 - beta) ** 2 * alpha**2 / (24 * f_pow**2)
        + rho * beta * nu * alpha / (4 * f_pow)
        + (2 - 3 * rho**2) * nu**2 / 24
    )
    return alpha / f_pow * (1 + correction * T)


def hagan_black_vol(
    F: float,
    K: float,
    T: float,
    alpha: float,
    beta: float,
    rho: float,
    nu: float,
    shift: float = 0.0,
) -> float:
    """
    Hagan et al. approximation for SABR Black implied volatility.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry (years)
        alpha: SABR alpha (instantaneous vol)
        beta: CEV exponent
        rho: Correlation
        nu: Vol of vol
        shift: Shift for negative rates

    Returns:
        Black implied volatility of the shifted forward and strike

    Raises:
        NumericDomainError: Shifted forward or strike not positive
    """
    f = F + shift
    k = K + shift
    if f <= 0 or k <= 0:
        raise NumericDomainError(f"Shifted forward ({f}) and strike ({k}) must be positive")

    if abs(f - k) < _ATM_TOLERANCE:
        return _hagan_atm_vol(f, T, alpha, beta, rho, nu)

    log_fk = np.log(f / k)
    one_minus_beta = 1 - beta
    fk_pow = (f * k) ** (one_minus_beta / 2)

    denominator = fk_pow * (
        1 + one_minus_beta**2 / 24 * log_fk**2 + one_minus_beta**4 / 1920 * log_fk**4
    )

    z = nu / alpha * fk_pow * log_fk
    if abs(z) < _ATM_TOLERANCE:
        z_over_x = 1.0
    else:
        x_z = np.log((np.sqrt(1 - 2 * rho * z + z**2) + z - rho) / (1 - rho))
        z_over_x = z / x_z

    correction = (
        one_minus_beta**2 * alpha**2 / (24 * fk_pow**2)
        + rho * beta * nu * alpha / (4 * fk_pow)
        + (2 - 3 * rho**2) * nu**2 / 24
    )
    return float(alpha / denominator * z_over_x * (1 + correction * T))


def hagan_normal_vol(
    F: float,
    K: float,
    T: float,
    alpha: float,
    beta: float,
    rho: float,
    nu: float,
    shift: float = 0.0,
) -> float:
    """
    SABR normal (Bachelier) implied volatility.

    sigma_N = sigma_B * F at the money; away from it
    sigma_N = sigma_B * sqrt(F K) * (1 - ln(F/K)^2 / 24).
    """
    f = F + shift
    k = K + shift
    sigma_b = hagan_black_vol(F, K, T, alpha, beta, rho, nu, shift)
    if abs(f - k) < _ATM_TOLERANCE:
        return sigma_b * f
    log_fk = np.log(f / k)
    return float(sigma_b * np.sqrt(f * k) * (1 - log_fk**2 / 24))


def alpha_from_sigma_atm(F: float, T: float, params: SabrParams) -> float:
    """
    Invert the ATM formula: find alpha with ATM_vol(alpha) = sigma_atm.

    Brent's method on a bracket around the seed sigma_atm * F^(1-beta).
    If no root is bracketed the seed is returned and a warning logged.
    """
    f = F + params.shift
    if f <= 0:
        raise NumericDomainError(f"Shifted forward must be positive, got {f}")

    def objective(alpha):
        if alpha <= 0:
            return float('inf')
        return _hagan_atm_vol(f, T, alpha, params.beta, params.rho, params.nu) - params.sigma_atm

    seed = params.sigma_atm * f ** (1 - params.beta)
    low, high = seed * 0.01, seed * 10.0
    try:
        if objective(low) * objective(high) > 0:
            if objective(low) > 0:
                low = seed * 0.001
            else:
                high = seed * 100.0
        return float(brentq(objective, low, high, xtol=1e-12))
    except (ValueError, RuntimeError):
        logger.warning(
            "SABR alpha inversion failed for F=%s T=%s sigma_atm=%s; using seed %s",
            F, T, params.sigma_atm, seed,
        )
        return seed


class SabrModel:
    """
    SABR implied volatilities in the sigma_atm parameterisation.

    Stateless; one instance can serve any number of surfaces.
    """

    def implied_vol_black(self, F: float, K: float, T: float, params: SabrParams) -> float:
        alpha = alpha_from_sigma_atm(F, T, params)
        return hagan_black_vol(F, K, T, alpha, params.beta, params.rho, params.nu, params.shift)

    def implied_vol_normal(self, F: float, K: float, T: float, params: SabrParams) -> float:
        alpha = alpha_from_sigma_atm(F, T, params)
        return hagan_normal_vol(F, K, T, alpha, params.beta, params.rho, params.nu, params.shift)

    def alpha_from_sigma_atm(self, F: float, T: float, params: SabrParams) -> float:
        return alpha_from_sigma_atm(F, T, params)


__all__ = [
    "SabrParams",
    "SabrModel",
    "hagan_black_vol",
    "hagan_normal_vol",
    "alpha_from_sigma_atm",
]
