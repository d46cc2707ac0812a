"""
Root Finding and Minimization
=============================

Scalar solvers used by the generic fallbacks and the estimators:

- :func:`find_root_newton` — Newton iteration with an analytical derivative.
- :func:`find_root_secant` — derivative-free secant iteration.
- :func:`find_root_brent` — bracketed Brent root search.
- :func:`find_min` — bracketed Brent minimization.

All solvers report failure through :class:`SolverResult` instead of raising.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass
from math import isfinite, nan
from typing import TYPE_CHECKING

from scipy import optimize as _sp_optimize

if TYPE_CHECKING:
    from pysatl_randlib.types import ScalarFunc

logger = logging.getLogger(__name__)

ROOT_EPSILON = 1e-10
"""Default absolute tolerance of all solvers."""

MAX_NEWTON_ITERATIONS = 10_000
"""Safety cap for the open (Newton/secant) iterations."""

MAX_BRENT_ITERATIONS = 500


@dataclass(frozen=True, slots=True)
class SolverResult:
    """
    Outcome of a root or minimum search.

    Parameters
    ----------
    x : float
        Last iterate (the root or minimizer when ``converged``).
    converged : bool
        Whether the tolerance was met.
    iterations : int
        Number of iterations performed.

    Notes
    -----
    The truth value of a result is ``converged``, so
    ``if result := find_root_newton(...)`` reads naturally.
    """

    x: float
    converged: bool
    iterations: int = 0

    def __bool__(self) -> bool:
        return self.converged


def find_root_newton(
    f: ScalarFunc,
    df: ScalarFunc,
    x0: float,
    epsilon: float = ROOT_EPSILON,
) -> SolverResult:
    """
    Find a root of ``f`` by Newton's method.

    Parameters
    ----------
    f : Callable[[float], float]
        Target function.
    df : Callable[[float], float]
        Derivative of ``f``.
    x0 : float
        Starting point.
    epsilon : float, default 1e-10
        Stop when ``|f(x)| < epsilon``.

    Returns
    -------
    SolverResult
        Fails when the value, the derivative or the step becomes non-finite,
        when the derivative vanishes, or when the iterate stops moving.
    """
    x = float(x0)
    fx = float(f(x))
    for it in range(MAX_NEWTON_ITERATIONS):
        if not isfinite(fx):
            return SolverResult(x, False, it)
        if abs(fx) < epsilon:
            return SolverResult(x, True, it)
        dfx = float(df(x))
        if not isfinite(dfx) or dfx == 0.0:
            logger.debug("Newton: unusable derivative %r at x=%r", dfx, x)
            return SolverResult(x, False, it)
        step = fx / dfx
        if not isfinite(step):
            return SolverResult(x, False, it)
        x_next = x - step
        if x_next == x:
            # step below the float resolution of x
            return SolverResult(x, False, it)
        x = x_next
        fx = float(f(x))
    logger.debug("Newton: iteration cap reached at x=%r", x)
    return SolverResult(x, False, MAX_NEWTON_ITERATIONS)


def find_root_secant(f: ScalarFunc, x0: float, epsilon: float = ROOT_EPSILON) -> SolverResult:
    """
    Find a root of ``f`` by the secant method.

    The second seed is placed at a relative offset of ``1e-4`` from ``x0``
    (absolute ``1e-4`` when ``x0`` is zero). Failure contract matches
    :func:`find_root_newton`.
    """
    x_prev = float(x0)
    x = x_prev + (1e-4 * abs(x_prev) if x_prev != 0.0 else 1e-4)
    f_prev = float(f(x_prev))
    fx = float(f(x))
    for it in range(MAX_NEWTON_ITERATIONS):
        if not (isfinite(fx) and isfinite(f_prev)):
            return SolverResult(x, False, it)
        if abs(fx) < epsilon:
            return SolverResult(x, True, it)
        denom = fx - f_prev
        if denom == 0.0:
            return SolverResult(x, False, it)
        x_next = x - fx * (x - x_prev) / denom
        if not isfinite(x_next) or x_next == x:
            return SolverResult(x, False, it)
        x_prev, f_prev = x, fx
        x = x_next
        fx = float(f(x))
    logger.debug("Secant: iteration cap reached at x=%r", x)
    return SolverResult(x, False, MAX_NEWTON_ITERATIONS)


def find_root_brent(
    f: ScalarFunc, a: float, b: float, epsilon: float = ROOT_EPSILON
) -> SolverResult:
    """
    Find a root of ``f`` inside ``[a, b]`` by Brent's method.

    Parameters
    ----------
    f : Callable[[float], float]
        Continuous function on ``[a, b]``.
    a, b : float
        Bracket endpoints; ``f(a)`` and ``f(b)`` must not share a sign.
    epsilon : float, default 1e-10
        Absolute tolerance in ``x``.

    Returns
    -------
    SolverResult
        An endpoint that is an exact zero is returned directly; a bracket
        that does not straddle a root yields a failed result.
    """
    fa = float(f(a))
    if fa == 0.0:
        return SolverResult(float(a), True, 0)
    fb = float(f(b))
    if fb == 0.0:
        return SolverResult(float(b), True, 0)
    if not (isfinite(fa) and isfinite(fb)) or fa * fb > 0.0:
        return SolverResult(nan, False, 0)
    try:
        x, info = _sp_optimize.brentq(
            f, a, b, xtol=epsilon, maxiter=MAX_BRENT_ITERATIONS, full_output=True, disp=False
        )
    except ValueError as e:
        logger.debug("Brent: %s", e)
        return SolverResult(nan, False, 0)
    return SolverResult(float(x), bool(info.converged), int(info.iterations))


def find_min(f: ScalarFunc, a: float, b: float, epsilon: float = ROOT_EPSILON) -> SolverResult:
    """
    Find the minimizer of ``f`` on ``[a, b]``.

    Golden-section search with parabolic interpolation
    (``scipy.optimize.minimize_scalar`` with the bounded method).
    """
    if a > b:
        a, b = b, a
    res = _sp_optimize.minimize_scalar(
        f, bounds=(a, b), method="bounded", options={"xatol": epsilon, "maxiter": MAX_BRENT_ITERATIONS}
    )
    return SolverResult(float(res.x), bool(res.success), int(res.nfev))


__all__ = [
    "MAX_NEWTON_ITERATIONS",
    "ROOT_EPSILON",
    "SolverResult",
    "find_min",
    "find_root_brent",
    "find_root_newton",
    "find_root_secant",
]
