"""
Special Functions
=================

Scalar special functions used by distributions and estimators.

Every function returns ``nan`` instead of raising on out-of-domain input
(e.g. a negative factorial argument), so callers can propagate sentinels
through densities and moments without wrapping calls in ``try`` blocks.

Gamma, beta, zeta and Bessel evaluations delegate to :mod:`scipy.special`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from math import inf, isfinite, isnan, nan

import numpy as np
from scipy import special as _sp_special

FACTORIAL_TABLE_SIZE = 170
"""Largest ``n`` whose factorial is representable as a double."""

LOG_FACTORIAL_TABLE_SIZE = 255
"""Largest ``n`` served from the log-factorial table."""

_FACTORIAL_TABLE: tuple[float, ...] = tuple(
    float(math.factorial(n)) for n in range(FACTORIAL_TABLE_SIZE + 1)
)
_LOG_FACTORIAL_TABLE: tuple[float, ...] = tuple(
    float(v)
    for v in np.concatenate(
        ([0.0], np.cumsum(np.log(np.arange(1, LOG_FACTORIAL_TABLE_SIZE + 1, dtype=float))))
    )
)

_LN_SQRT_2PI = 0.5 * math.log(2.0 * math.pi)


def _is_integer(x: float) -> bool:
    return isfinite(x) and float(x).is_integer()


# --- gamma family -------------------------------------------------------------


def log_gamma(x: float) -> float:
    """Natural logarithm of ``|Γ(x)|``; ``nan`` at non-positive integers."""
    if isnan(x) or (x <= 0 and _is_integer(x)):
        return nan
    return float(_sp_special.gammaln(x))


def regularized_lower_inc_gamma(a: float, x: float) -> float:
    """Regularized lower incomplete gamma ``P(a, x)``."""
    if not a > 0 or isnan(x) or x < 0:
        return nan
    return float(_sp_special.gammainc(a, x))


def regularized_upper_inc_gamma(a: float, x: float) -> float:
    """Regularized upper incomplete gamma ``Q(a, x) = 1 - P(a, x)``."""
    if not a > 0 or isnan(x) or x < 0:
        return nan
    return float(_sp_special.gammaincc(a, x))


def lower_inc_gamma(a: float, x: float) -> float:
    """Lower incomplete gamma ``γ(a, x)``."""
    p = regularized_lower_inc_gamma(a, x)
    if isnan(p):
        return nan
    return p * float(_sp_special.gamma(a))


def upper_inc_gamma(a: float, x: float) -> float:
    """Upper incomplete gamma ``Γ(a, x)``."""
    q = regularized_upper_inc_gamma(a, x)
    if isnan(q):
        return nan
    return q * float(_sp_special.gamma(a))


def log_lower_inc_gamma(a: float, x: float) -> float:
    """
    Logarithm of the lower incomplete gamma function.

    Stays finite where ``γ(a, x)`` itself overflows (large ``a``).
    """
    p = regularized_lower_inc_gamma(a, x)
    if isnan(p):
        return nan
    if p == 0.0:
        return -inf
    return math.log(p) + log_gamma(a)


def log_upper_inc_gamma(a: float, x: float) -> float:
    """Logarithm of the upper incomplete gamma function."""
    q = regularized_upper_inc_gamma(a, x)
    if isnan(q):
        return nan
    if q == 0.0:
        return -inf
    return math.log(q) + log_gamma(a)


def digamma(x: float) -> float:
    """Logarithmic derivative of the gamma function ``ψ(x)``."""
    if isnan(x) or (x <= 0 and _is_integer(x)):
        return nan
    return float(_sp_special.digamma(x))


def trigamma(x: float) -> float:
    """Derivative of the digamma function ``ψ'(x)``."""
    if isnan(x) or (x <= 0 and _is_integer(x)):
        return nan
    return float(_sp_special.polygamma(1, x))


def gamma_half(n: int) -> float:
    """
    ``Γ(n / 2)`` for a positive integer ``n``.

    Parameters
    ----------
    n : int
        Twice the gamma argument.

    Returns
    -------
    float
        ``Γ(n / 2)``, or ``nan`` for ``n < 1``.
    """
    if n < 1:
        return nan
    if n % 2 == 0:
        return factorial(n // 2 - 1)
    # Γ(k + 1/2) = (2k - 1)!! / 2^k * sqrt(pi)
    k = (n - 1) // 2
    return double_factorial(2 * k - 1) / 2.0**k * math.sqrt(math.pi)


# --- beta family --------------------------------------------------------------


def beta_fun(a: float, b: float) -> float:
    """Complete beta function ``B(a, b)``."""
    if not (a > 0 and b > 0):
        return nan
    return float(_sp_special.beta(a, b))


def log_beta_fun(a: float, b: float) -> float:
    """Logarithm of the complete beta function."""
    if not (a > 0 and b > 0):
        return nan
    return float(_sp_special.betaln(a, b))


def regularized_beta_fun(x: float, a: float, b: float) -> float:
    """Regularized incomplete beta ``I_x(a, b)``; clamps ``x`` into ``[0, 1]``."""
    if isnan(x) or not (a > 0 and b > 0):
        return nan
    if x <= 0.0:
        return 0.0
    if x >= 1.0:
        return 1.0
    return float(_sp_special.betainc(a, b, x))


def incomplete_beta_fun(x: float, a: float, b: float) -> float:
    """Non-regularized incomplete beta ``B(x; a, b)``."""
    ix = regularized_beta_fun(x, a, b)
    if isnan(ix):
        return nan
    return ix * beta_fun(a, b)


# --- combinatorics ------------------------------------------------------------


def _as_count(n: float, lower: int = 0) -> int | None:
    """``int(n)`` for integer-valued ``n >= lower``, otherwise ``None``."""
    if not _is_integer(n) or n < lower:
        return None
    return int(n)


def factorial(n: int) -> float:
    """
    Factorial ``n!`` from an exact table.

    Returns ``inf`` for ``n > 170`` (beyond the double range) and ``nan``
    for negative or non-integer ``n``. Integer-valued floats are accepted.
    """
    count = _as_count(n)
    if count is None:
        return nan
    if count > FACTORIAL_TABLE_SIZE:
        return inf
    return _FACTORIAL_TABLE[count]


def double_factorial(n: int) -> float:
    """Double factorial ``n!!``; ``(-1)!! = 0!! = 1``; ``nan`` below ``-1``."""
    count = _as_count(n, lower=-1)
    if count is None:
        return nan
    n = count
    result = 1.0
    while n > 1:
        result *= n
        n -= 2
        if not isfinite(result):
            return inf
    return result


def log_factorial(n: int) -> float:
    """
    Natural logarithm of ``n!``.

    Notes
    -----
    Served from a table for ``n <= 255``; beyond that the Moivre–Stirling
    series ``n ln n - n + ½ ln(2πn) + 1/(12n) - 1/(360n³) + 1/(1260n⁵)``
    is used, which is accurate to double precision there.
    """
    count = _as_count(n)
    if count is None:
        return nan
    if count <= LOG_FACTORIAL_TABLE_SIZE:
        return _LOG_FACTORIAL_TABLE[count]
    x = float(count)
    inv = 1.0 / x
    inv2 = inv * inv
    series = inv * (1.0 / 12.0 - inv2 * (1.0 / 360.0 - inv2 / 1260.0))
    return x * math.log(x) - x + _LN_SQRT_2PI + 0.5 * math.log(x) + series


def binomial_coef(n: int, k: int) -> float:
    """
    Binomial coefficient ``C(n, k)``.

    ``nan`` for negative or non-integer ``n`` and for non-integer ``k``;
    ``0`` for integer ``k`` outside ``0 <= k <= n``.
    """
    count = _as_count(n)
    if count is None or not _is_integer(k):
        return nan
    if k < 0 or k > count:
        return 0.0
    k = int(k)
    if count <= FACTORIAL_TABLE_SIZE:
        return _FACTORIAL_TABLE[count] / (_FACTORIAL_TABLE[k] * _FACTORIAL_TABLE[count - k])
    return float(np.round(math.exp(log_binomial_coef(count, k))))


def log_binomial_coef(n: int, k: int) -> float:
    """Logarithm of the binomial coefficient; ``-inf`` outside ``0 <= k <= n``."""
    count = _as_count(n)
    if count is None or not _is_integer(k):
        return nan
    if k < 0 or k > count:
        return -inf
    k = int(k)
    return log_factorial(count) - log_factorial(k) - log_factorial(count - k)


def harmonic_number(n: int, exponent: float = 1.0) -> float:
    """Generalized harmonic number ``Σ_{k=1}^{n} k^(-exponent)``."""
    count = _as_count(n)
    if count is None:
        return nan
    n = count
    if n == 0:
        return 0.0
    if exponent == 1.0:
        return float(_sp_special.digamma(n + 1) + np.euler_gamma)
    ks = np.arange(1, n + 1, dtype=float)
    return float(np.sum(ks ** (-exponent)))


# --- zeta and Bessel ----------------------------------------------------------


def zeta_riemann(s: float) -> float:
    """Riemann zeta ``ζ(s)`` for real ``s > 1``."""
    if isnan(s) or s <= 1.0:
        return nan
    return float(_sp_special.zeta(s, 1))


def modified_bessel_first_kind(x: float, nu: float) -> float:
    """Modified Bessel function of the first kind ``I_ν(x)``."""
    if isnan(x) or isnan(nu):
        return nan
    return float(_sp_special.iv(nu, x))


def log_modified_bessel_first_kind(x: float, nu: float) -> float:
    """
    Logarithm of ``I_ν(x)`` for ``x >= 0``.

    Uses the exponentially scaled ``ive`` so large arguments do not overflow:
    ``ln I_ν(x) = ln ive(ν, x) + |x|``.
    """
    if isnan(x) or isnan(nu) or x < 0:
        return nan
    if x == 0.0:
        return 0.0 if nu == 0 else -inf
    scaled = float(_sp_special.ive(nu, x))
    if not scaled > 0:
        return nan
    return math.log(scaled) + abs(x)


# --- helpers ------------------------------------------------------------------


def are_close(a: float, b: float, eps: float = 1e-6) -> bool:
    """Relative closeness ``|a - b| <= eps * max(|a|, |b|)``; absolute near zero."""
    if a == b:
        return True
    scale = max(abs(a), abs(b))
    if scale < 1.0:
        return abs(a - b) <= eps
    return abs(a - b) <= eps * scale


def sign(x: float) -> int:
    """Sign of ``x`` as ``-1``, ``0`` or ``1``."""
    return (x > 0) - (x < 0)


def linear_interpolation(a: float, b: float, fa: float, fb: float, x: float) -> float:
    """Value at ``x`` of the line through ``(a, fa)`` and ``(b, fb)``."""
    if b == a:
        return fa
    return fa + (fb - fa) * (x - a) / (b - a)


__all__ = [
    "FACTORIAL_TABLE_SIZE",
    "LOG_FACTORIAL_TABLE_SIZE",
    "are_close",
    "beta_fun",
    "binomial_coef",
    "digamma",
    "double_factorial",
    "factorial",
    "gamma_half",
    "harmonic_number",
    "incomplete_beta_fun",
    "linear_interpolation",
    "log_beta_fun",
    "log_binomial_coef",
    "log_factorial",
    "log_gamma",
    "log_lower_inc_gamma",
    "log_modified_bessel_first_kind",
    "log_upper_inc_gamma",
    "lower_inc_gamma",
    "modified_bessel_first_kind",
    "regularized_beta_fun",
    "regularized_lower_inc_gamma",
    "regularized_upper_inc_gamma",
    "sign",
    "trigamma",
    "upper_inc_gamma",
    "zeta_riemann",
]
