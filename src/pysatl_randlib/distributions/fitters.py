"""
Generic Fallback Fitters
========================

Fitters build characteristics a distribution does not provide in closed form
from the ones it does (density/mass, cdf, mean, variance), using the
numerical kernel:

- continuous ``ppf`` — Newton on ``cdf(x) - p`` with ``pdf`` as derivative;
- discrete ``ppf`` — leftmost lattice point with ``cdf(k) >= p``;
- ``median`` — ``ppf(0.5)``;
- ``mode`` — bracketed minimization of the negated density (continuous) or
  a hill climb over the lattice (discrete);
- ``sf`` — ``1 - cdf``;
- ``hazard`` — ``pdf / (1 - cdf)``.

:func:`expected_value` integrates (or sums) ``g(x) * density(x)`` over
bounds discovered by stepping outward from a start point.

Notes
-----
``mode`` and :func:`expected_value` rely on an analytical variance. Resolving
variance through these same fallbacks would recurse, so unimodality and a
closed-form variance are preconditions, not runtime checks.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from collections.abc import Callable
from math import ceil, floor, inf, isfinite, nan
from typing import TYPE_CHECKING, Any, cast

from mypy_extensions import KwArg

from pysatl_randlib.distributions.computation import FittedComputationMethod
from pysatl_randlib.distributions.support import IntegerLatticeDiscreteSupport
from pysatl_randlib.math.integration import integral
from pysatl_randlib.math.roots import find_min, find_root_newton
from pysatl_randlib.types import CharacteristicName, Kind

if TYPE_CHECKING:
    from pysatl_randlib.distributions.distribution import Distribution
    from pysatl_randlib.types import GenericCharacteristicName, ScalarFunc

logger = logging.getLogger(__name__)

EXPECTATION_EPSILON = 1e-10
EXPECTATION_MAX_STEPS = 1000
MODE_STEP_FACTOR = 10.0
MODE_FALLBACK_STEP = 100.0
MODE_MAX_EXPAND = 1000
DISCRETE_MAX_WALK = 10_000_000


def _resolve(distribution: Distribution, name: GenericCharacteristicName) -> ScalarFunc:
    """
    Resolve a scalar characteristic from the distribution.

    Raises
    ------
    RuntimeError
        If the distribution does not provide a computation strategy.
    """
    try:
        fn = distribution.query_method(name)
    except AttributeError as e:
        raise RuntimeError(
            "Distribution must provide computation_strategy.query_method(name, distribution)."
        ) from e

    def _wrap(x: float, **kwargs: Any) -> float:
        return float(fn(x, **kwargs))

    return _wrap


def _moment_or_nan(distribution: Distribution, name: GenericCharacteristicName) -> float:
    """Analytical moment, or ``nan`` when the distribution does not provide one."""
    comp = distribution.analytical_computations.get(name)
    if comp is None:
        return nan
    value = float(comp(None))
    return value if isfinite(value) else nan


def _density_name(distribution: Distribution) -> CharacteristicName:
    if distribution.distribution_type.kind == Kind.DISCRETE:
        return CharacteristicName.PMF
    return CharacteristicName.PDF


def _fitted(
    target: GenericCharacteristicName,
    sources: list[GenericCharacteristicName],
    func: Callable[..., float],
) -> FittedComputationMethod[Any, float]:
    return FittedComputationMethod[Any, float](
        target=target,
        sources=sources,
        func=cast(Callable[[Any, KwArg(Any)], float], func),
    )


def _lattice(distribution: Distribution) -> IntegerLatticeDiscreteSupport:
    support = distribution.support
    if isinstance(support, IntegerLatticeDiscreteSupport):
        return support
    return IntegerLatticeDiscreteSupport(min_k=None, max_k=None)


def _lattice_start(support: IntegerLatticeDiscreteSupport, mean: float) -> int:
    """Support point at or below ``mean``; the lowest one when ``mean`` lies below the support."""
    if not isfinite(mean):
        return support.clip(0)
    k = support.floor_point(mean)
    return support.clip(floor(mean)) if k is None else k


# --- continuous fallbacks ------------------------------------------------------


def fit_quantile_1C(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, float]:
    """
    Fit ``ppf`` by Newton's method on ``cdf(x) - p``.

    The iteration is seeded at the analytical mean (``0`` when it is missing
    or non-finite). Probabilities outside ``[0, 1]`` give ``nan``; a Newton
    failure gives ``+inf``, which most often means ``p == 1``.
    """
    cdf = _resolve(distribution, CharacteristicName.CDF)
    pdf = _resolve(distribution, CharacteristicName.PDF)

    def _ppf(p: float, **options: Any) -> float:
        if not 0.0 <= p <= 1.0:
            return nan
        x0 = _moment_or_nan(distribution, CharacteristicName.MEAN)
        if not isfinite(x0):
            x0 = 0.0
        result = find_root_newton(lambda x: cdf(x) - p, pdf, x0)
        if not result:
            logger.debug("Quantile fallback did not converge for p=%r", p)
            return inf
        return result.x

    return _fitted(CharacteristicName.PPF, [CharacteristicName.CDF, CharacteristicName.PDF], _ppf)


def fit_mode_1C(distribution: Distribution, /, **_: Any) -> FittedComputationMethod[Any, float]:
    """
    Fit ``mode`` of a unimodal density.

    Starts from the mean (median when the mean is unusable, ``0`` when both
    are) with a bracket of half-width ``10 * variance`` (``100`` when the
    variance is unusable). While an end of the bracket has a higher density
    than the centre, the centre moves onto that end and the bracket shifts
    by one step; then ``-pdf`` is minimized on the bracket.
    """
    pdf = _resolve(distribution, CharacteristicName.PDF)

    def _mode(_: Any = None, **options: Any) -> float:
        centre = _moment_or_nan(distribution, CharacteristicName.MEAN)
        if not isfinite(centre):
            centre = float(distribution.query_method(CharacteristicName.MEDIAN)(None))
            if not isfinite(centre):
                centre = 0.0
        step = MODE_STEP_FACTOR * _moment_or_nan(distribution, CharacteristicName.VAR)
        if not (isfinite(step) and step > 0.0):
            step = MODE_FALLBACK_STEP

        a, b = centre - step, centre + step
        fa, f_centre, fb = pdf(a), pdf(centre), pdf(b)
        # slide the centre toward the higher end until it tops both ends
        for _i in range(MODE_MAX_EXPAND):
            if not fa > f_centre:
                break
            b, fb = centre, f_centre
            centre, f_centre = a, fa
            a -= step
            fa = pdf(a)
        for _i in range(MODE_MAX_EXPAND):
            if not fb > f_centre:
                break
            a, fa = centre, f_centre
            centre, f_centre = b, fb
            b += step
            fb = pdf(b)
        return find_min(lambda x: -pdf(x), a, b).x

    return _fitted(CharacteristicName.MODE, [CharacteristicName.PDF], _mode)


# --- discrete fallbacks --------------------------------------------------------


def fit_quantile_1D(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, float]:
    """
    Fit a step ``ppf``: the leftmost support point ``k`` with ``cdf(k) >= p``.

    The search walks the integer lattice starting at the (rounded) mean.
    ``p`` outside ``[0, 1]`` gives ``nan``; ``p == 0`` gives the lower
    support bound and ``p == 1`` the upper one.
    """
    cdf = _resolve(distribution, CharacteristicName.CDF)

    def _ppf(p: float, **options: Any) -> float:
        support = _lattice(distribution)
        if not 0.0 <= p <= 1.0:
            return nan
        if p == 0.0:
            return support.lower
        if p == 1.0:
            return support.upper
        mean = _moment_or_nan(distribution, CharacteristicName.MEAN)
        k = _lattice_start(support, mean)
        for _i in range(DISCRETE_MAX_WALK):
            if cdf(k) >= p:
                below = support.prev(k)
                if below is None or cdf(below) < p:
                    return float(k)
                k = below
            else:
                if support.max_k is not None and k >= support.max_k:
                    return float(k)
                k += 1
        logger.debug("Discrete quantile walk exhausted for p=%r", p)
        return inf

    return _fitted(CharacteristicName.PPF, [CharacteristicName.CDF], _ppf)


def fit_mode_1D(distribution: Distribution, /, **_: Any) -> FittedComputationMethod[Any, float]:
    """Fit ``mode`` of a unimodal mass function by hill climbing from the mean."""
    pmf = _resolve(distribution, CharacteristicName.PMF)

    def _mode(_: Any = None, **options: Any) -> float:
        support = _lattice(distribution)
        mean = _moment_or_nan(distribution, CharacteristicName.MEAN)
        k = _lattice_start(support, mean)
        for _i in range(DISCRETE_MAX_WALK):
            here = pmf(k)
            if k + 1 in support and pmf(k + 1) > here:
                k += 1
            elif k - 1 in support and pmf(k - 1) > here:
                k -= 1
            else:
                break
        return float(k)

    return _fitted(CharacteristicName.MODE, [CharacteristicName.PMF], _mode)


# --- kind-independent fallbacks -----------------------------------------------


def fit_median(distribution: Distribution, /, **_: Any) -> FittedComputationMethod[Any, float]:
    """Fit ``median`` as ``ppf(0.5)``."""
    ppf = _resolve(distribution, CharacteristicName.PPF)

    def _median(_: Any = None, **options: Any) -> float:
        return ppf(0.5)

    return _fitted(CharacteristicName.MEDIAN, [CharacteristicName.PPF], _median)


def fit_survival(distribution: Distribution, /, **_: Any) -> FittedComputationMethod[float, float]:
    """Fit ``sf`` as ``1 - cdf``."""
    cdf = _resolve(distribution, CharacteristicName.CDF)

    def _sf(x: float, **options: Any) -> float:
        return 1.0 - cdf(x)

    return _fitted(CharacteristicName.SF, [CharacteristicName.CDF], _sf)


def fit_hazard(distribution: Distribution, /, **_: Any) -> FittedComputationMethod[float, float]:
    """Fit ``hazard`` as ``density / (1 - cdf)``."""
    density_name = _density_name(distribution)
    density = _resolve(distribution, density_name)
    cdf = _resolve(distribution, CharacteristicName.CDF)

    def _hazard(x: float, **options: Any) -> float:
        tail = 1.0 - cdf(x)
        if tail == 0.0:
            return nan
        return density(x) / tail

    return _fitted(CharacteristicName.HAZARD, [density_name, CharacteristicName.CDF], _hazard)


# --- expectations ----------------------------------------------------------------


def expected_value(
    distribution: Distribution,
    g: ScalarFunc,
    start_point: float | None = None,
    epsilon: float = EXPECTATION_EPSILON,
    max_steps: int = EXPECTATION_MAX_STEPS,
) -> float:
    """
    Expected value ``E[g(X)]`` computed numerically.

    Parameters
    ----------
    distribution : Distribution
        Distribution with an analytical variance.
    g : Callable[[float], float]
        Function of the random variable.
    start_point : float, optional
        Where the bound search starts; defaults to the mean (``0`` when it is
        unavailable).
    epsilon : float, default 1e-10
        Integrand magnitude at which the tails are cut, and the quadrature
        tolerance.
    max_steps : int, default 1000
        Maximum number of outward steps per direction.

    Returns
    -------
    float
        The expectation, or ``nan`` if the integrand does not decay within
        ``max_steps`` steps in some direction.

    Notes
    -----
    Continuous distributions step by ``variance()`` and integrate with
    :func:`~pysatl_randlib.math.integration.integral`; discrete ones sum
    ``g(k) * pmf(k)`` point by point, visiting at most
    ``max_steps * ceil(variance)`` points per direction. Bounds of the
    support stop the search early.
    """
    support = distribution.support
    lower = support.lower if support is not None else -inf
    upper = support.upper if support is not None else inf

    if start_point is None:
        start_point = _moment_or_nan(distribution, CharacteristicName.MEAN)
        if not isfinite(start_point):
            start_point = 0.0
    start_point = min(max(start_point, lower), upper)

    if distribution.distribution_type.kind == Kind.DISCRETE:
        pmf = _resolve(distribution, CharacteristicName.PMF)
        var = _moment_or_nan(distribution, CharacteristicName.VAR)
        stride = int(ceil(var)) if isfinite(var) and var > 1.0 else 1
        return _discrete_expectation(pmf, g, start_point, lower, upper, epsilon, max_steps * stride)

    pdf = _resolve(distribution, CharacteristicName.PDF)
    step = _moment_or_nan(distribution, CharacteristicName.VAR)
    if not (isfinite(step) and step > 0.0):
        raise RuntimeError("expected_value requires an analytical finite variance.")

    def integrand(x: float) -> float:
        y = g(x)
        return 0.0 if y == 0.0 else y * pdf(x)

    def tail_bound(delta: float) -> float | None:
        x = start_point
        for _i in range(max_steps):
            x += delta
            if not lower < x < upper:
                return min(max(x, lower), upper)
            if abs(integrand(x)) <= epsilon:
                return x
        return None

    a = tail_bound(-step)
    b = tail_bound(step)
    if a is None or b is None:
        logger.debug("expected_value: integrand decays too slowly from %r", start_point)
        return nan
    return integral(integrand, a, b, epsilon)


def _discrete_expectation(
    pmf: ScalarFunc,
    g: ScalarFunc,
    start_point: float,
    lower: float,
    upper: float,
    epsilon: float,
    max_walk: int,
) -> float:
    def term(k: int) -> float:
        y = g(k)
        return 0.0 if y == 0.0 else y * pmf(k)

    def tail_sum(k: int, delta: int) -> float | None:
        total = 0.0
        for _i in range(max_walk):
            k += delta
            if not lower <= k <= upper:
                return total
            t = term(k)
            total += t
            if abs(t) <= epsilon:
                return total
        return None

    k0 = int(floor(start_point))
    left = tail_sum(k0, -1)
    right = tail_sum(k0, 1)
    if left is None or right is None:
        logger.debug("expected_value: series decays too slowly from %r", start_point)
        return nan
    return term(k0) + left + right


__all__ = [
    "EXPECTATION_EPSILON",
    "EXPECTATION_MAX_STEPS",
    "expected_value",
    "fit_hazard",
    "fit_median",
    "fit_mode_1C",
    "fit_mode_1D",
    "fit_quantile_1C",
    "fit_quantile_1D",
    "fit_survival",
]
