"""
Adaptive Quadrature
===================

Recursive adaptive Simpson integration for scalar integrands.

Notes
-----
Very sharply peaked or oscillatory integrands may be under-resolved once the
recursion depth limit is reached; the coarser estimate is accepted there.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pysatl_randlib.types import ScalarFunc

INTEGRAL_EPSILON = 1e-11
MAX_RECURSION_DEPTH = 10


def _simpson(fa: float, fm: float, fb: float, width: float) -> float:
    return width / 6.0 * (fa + 4.0 * fm + fb)


def _adaptive(
    f: ScalarFunc,
    a: float,
    b: float,
    fa: float,
    fm: float,
    fb: float,
    whole: float,
    epsilon: float,
    depth: int,
) -> float:
    m = 0.5 * (a + b)
    lm = 0.5 * (a + m)
    rm = 0.5 * (m + b)
    flm = float(f(lm))
    frm = float(f(rm))
    left = _simpson(fa, flm, fm, m - a)
    right = _simpson(fm, frm, fb, b - m)
    delta = left + right - whole
    if depth <= 0 or abs(delta) <= 15.0 * epsilon:
        return left + right + delta / 15.0
    return _adaptive(f, a, m, fa, flm, fm, left, 0.5 * epsilon, depth - 1) + _adaptive(
        f, m, b, fm, frm, fb, right, 0.5 * epsilon, depth - 1
    )


def integral(
    f: ScalarFunc,
    a: float,
    b: float,
    epsilon: float = INTEGRAL_EPSILON,
    max_recursion_depth: int = MAX_RECURSION_DEPTH,
) -> float:
    """
    Integrate ``f`` over ``[a, b]`` by adaptive Simpson's rule.

    Parameters
    ----------
    f : Callable[[float], float]
        Integrand.
    a, b : float
        Integration bounds; ``a > b`` integrates over ``[b, a]`` and negates.
    epsilon : float, default 1e-11
        Absolute tolerance of the whole interval. Each bisection halves it.
    max_recursion_depth : int, default 10
        Depth at which the current estimate is accepted unconditionally.

    Returns
    -------
    float
        Richardson-extrapolated estimate of the integral.
    """
    if a == b:
        return 0.0
    if a > b:
        return -integral(f, b, a, epsilon, max_recursion_depth)
    fa = float(f(a))
    fb = float(f(b))
    fm = float(f(0.5 * (a + b)))
    whole = _simpson(fa, fm, fb, b - a)
    return _adaptive(f, a, b, fa, fm, fb, whole, epsilon, max_recursion_depth)


__all__ = ["INTEGRAL_EPSILON", "MAX_RECURSION_DEPTH", "integral"]
