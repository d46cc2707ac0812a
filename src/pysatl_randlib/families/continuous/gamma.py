"""
Gamma distribution family implementation.

Contains the Gamma family (shape-rate and shape-scale parameterizations) and
its constrained specializations Chi-squared and Erlang.

Variates are generated by one of five algorithms selected from the shape when
the parameters are set:

- ``INTEGER_SHAPE`` (integer α < 5): sum of α standard exponentials;
- ``HALF_INTEGER_SHAPE`` (α - ½ integer, α < 5): sum of ⌊α⌋ standard
  exponentials plus ``½·N²``;
- ``SMALL_SHAPE`` (α ≤ 1): Ahrens–Dieter GS rejection;
- ``MEDIUM_SHAPE`` (α ≤ 3): Fishman's exponential rejection;
- ``LARGE_SHAPE``: Marsaglia–Tsang squeeze/rejection.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from math import inf, isfinite, nan
from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.special import gammaincinv

from pysatl_randlib.distributions.support import ContinuousSupport
from pysatl_randlib.families.continuous.exponential import Exponential
from pysatl_randlib.families.continuous.normal import Normal
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.math.roots import find_root_newton
from pysatl_randlib.math.sample_stats import (
    as_sample_array,
    sample_log_mean,
    sample_mean,
    sample_variance,
)
from pysatl_randlib.math.special import (
    are_close,
    digamma,
    log_gamma,
    regularized_lower_inc_gamma,
    regularized_upper_inc_gamma,
    trigamma,
)
from pysatl_randlib.random import standard_uniform
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateContinuous

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import Any

    import numpy.typing as npt

    type SampleLike = Sequence[float] | npt.NDArray[Any]

logger = logging.getLogger(__name__)

MAX_REJECTION_ITERATIONS = 1_000_000
"""Attempts a rejection sampler makes before giving up with ``nan``."""

SMALL_INTEGER_SHAPE_LIMIT = 5.0
SMALL_SHAPE_LIMIT = 1.0
MEDIUM_SHAPE_LIMIT = 3.0
SHAPE_SNAP_EPSILON = 1e-6

_GAMMA_ANALYTICAL = {
    CharacteristicName.PDF: "_pdf",
    CharacteristicName.CDF: "_cdf",
    CharacteristicName.SF: "_sf",
    CharacteristicName.PPF: "_ppf",
    CharacteristicName.MEAN: "_mean",
    CharacteristicName.MODE: "_mode",
    CharacteristicName.VAR: "_var",
    CharacteristicName.SKEW: "_skew",
    CharacteristicName.KURT: "_kurt",
}


class GammaRegime(StrEnum):
    INTEGER_SHAPE = "integer_shape"
    HALF_INTEGER_SHAPE = "half_integer_shape"
    SMALL_SHAPE = "small_shape"
    MEDIUM_SHAPE = "medium_shape"
    LARGE_SHAPE = "large_shape"


def classify_gamma_regime(shape: float) -> GammaRegime:
    """Sampling algorithm for a (snapped) shape."""
    if shape < SMALL_INTEGER_SHAPE_LIMIT:
        if float(shape).is_integer():
            return GammaRegime.INTEGER_SHAPE
        if are_close(shape - math.floor(shape), 0.5, SHAPE_SNAP_EPSILON):
            return GammaRegime.HALF_INTEGER_SHAPE
    if shape <= SMALL_SHAPE_LIMIT:
        return GammaRegime.SMALL_SHAPE
    if shape <= MEDIUM_SHAPE_LIMIT:
        return GammaRegime.MEDIUM_SHAPE
    return GammaRegime.LARGE_SHAPE


def snap_shape(shape: float) -> float:
    """Round ``shape`` to the nearest positive integer when within relative 1e-6."""
    nearest = round(shape)
    if nearest >= 1 and nearest != shape and are_close(shape, nearest, SHAPE_SNAP_EPSILON):
        return float(nearest)
    return shape


@dataclass(frozen=True, slots=True)
class GammaState:
    """
    Parameters and derived constants of a Gamma distribution.

    Attributes
    ----------
    params : _ShapeRate
        Shape α (snapped) and rate β.
    scale : float
        θ = 1/β.
    log_norm : float
        ``α ln β - ln Γ(α)``, the log-density normalizer.
    regime : GammaRegime
        Sampling algorithm.
    gs_b : float
        Ahrens–Dieter ``b = 1 + α/e``.
    mt_d, mt_c : float
        Marsaglia–Tsang ``d = α - 1/3`` and ``c = 1/√(9d)``.
    """

    params: _ShapeRate
    scale: float
    log_norm: float
    regime: GammaRegime
    gs_b: float
    mt_d: float
    mt_c: float


def _is_valid_sample(arr: npt.NDArray[np.float64], strictly_positive: bool = False) -> bool:
    if arr.size == 0 or not np.all(np.isfinite(arr)):
        return False
    return bool(np.all(arr > 0)) if strictly_positive else bool(np.all(arr >= 0))


class Gamma(ParametricDistribution[GammaState]):
    """
    Gamma distribution.

    Probability density function (shape-rate parametrization):
        f(x) = β^α / Γ(α) * x^(α-1) * exp(-βx) for x ≥ 0

    Invalid shape or rate is replaced by 1. A shape within relative 1e-6 of
    an integer is snapped to that integer.
    """

    family_name = FamilyName.GAMMA
    distribution_type = UnivariateContinuous
    base_parametrization_name = "shapeRate"
    analytical_methods = _GAMMA_ANALYTICAL

    support = ContinuousSupport(left=0.0)

    def __init__(self, shape: float = 1.0, rate: float = 1.0) -> None:
        super().__init__(shape=shape, rate=rate)

    @property
    def shape(self) -> float:
        return self._state.params.shape

    @property
    def rate(self) -> float:
        return self._state.params.rate

    @property
    def scale(self) -> float:
        return self._state.scale

    @property
    def regime(self) -> GammaRegime:
        return self._state.regime

    def _build_state(self, params: Parametrization) -> GammaState:
        params = cast(_ShapeRate, params)
        shape = snap_shape(params.shape)
        if shape != params.shape:
            params = _ShapeRate(shape=shape, rate=params.rate)
        regime = classify_gamma_regime(shape)
        mt_d = shape - 1.0 / 3.0
        logger.debug("Gamma(shape=%r, rate=%r): regime %s", shape, params.rate, regime)
        return GammaState(
            params=params,
            scale=1.0 / params.rate,
            log_norm=shape * math.log(params.rate) - log_gamma(shape),
            regime=regime,
            gs_b=1.0 + shape / math.e,
            mt_d=mt_d,
            mt_c=1.0 / math.sqrt(9.0 * mt_d) if mt_d > 0 else nan,
        )

    # --- variates -------------------------------------------------------------

    def _sampler(self, state: GammaState) -> Callable[[], float]:
        scale = state.scale
        shape = state.params.shape
        match state.regime:
            case GammaRegime.INTEGER_SHAPE:
                k = int(shape)
                return lambda: scale * _sum_of_exponentials(k)
            case GammaRegime.HALF_INTEGER_SHAPE:
                k = int(math.floor(shape))
                return lambda: scale * _half_integer_variate(k)
            case GammaRegime.SMALL_SHAPE:
                b = state.gs_b
                return lambda: scale * _ahrens_dieter_variate(shape, b)
            case GammaRegime.MEDIUM_SHAPE:
                return lambda: scale * _fishman_variate(shape)
            case _:
                d, c = state.mt_d, state.mt_c
                return lambda: scale * _marsaglia_tsang_variate(d, c)

    # --- closed forms ---------------------------------------------------------

    def logpdf(self, x: float) -> float:
        p = self._state.params
        if x < 0:
            return -inf
        if x == 0:
            if p.shape < 1:
                return inf
            return math.log(p.rate) if p.shape == 1 else -inf
        return (p.shape - 1.0) * math.log(x) - p.rate * x + self._state.log_norm

    def _pdf(self, x: float, **_: Any) -> float:
        return math.exp(self.logpdf(x))

    def _cdf(self, x: float, **_: Any) -> float:
        if x <= 0:
            return 0.0
        p = self._state.params
        return regularized_lower_inc_gamma(p.shape, p.rate * x)

    def _sf(self, x: float, **_: Any) -> float:
        if x <= 0:
            return 1.0
        p = self._state.params
        return regularized_upper_inc_gamma(p.shape, p.rate * x)

    def _ppf(self, q: float, **_: Any) -> float:
        if not 0.0 <= q <= 1.0:
            return nan
        if q == 1.0:
            return inf
        return float(gammaincinv(self._state.params.shape, q)) * self._state.scale

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self._state.params.shape * self._state.scale

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._state.params.shape * self._state.scale**2

    def _mode(self, _: Any = None, **__: Any) -> float:
        return max(self._state.params.shape - 1.0, 0.0) * self._state.scale

    def _skew(self, _: Any = None, **__: Any) -> float:
        return 2.0 / math.sqrt(self._state.params.shape)

    def _kurt(self, _: Any = None, **__: Any) -> float:
        return 6.0 / self._state.params.shape

    def log_mean(self) -> float:
        """Geometric mean on the log scale, ``E[ln X] = ψ(α) - ln β``."""
        p = self._state.params
        return digamma(p.shape) - math.log(p.rate)

    def log_variance(self) -> float:
        """``Var[ln X] = ψ'(α)``."""
        return trigamma(self._state.params.shape)

    # --- estimators -----------------------------------------------------------

    def fit_scale_mle(self, sample: SampleLike) -> bool:
        """Fit the scale with the shape fixed: ``θ = mean / α``."""
        arr = as_sample_array(sample)
        if not _is_valid_sample(arr):
            return False
        mean = sample_mean(arr)
        if not mean > 0:
            return False
        shape = self.shape
        self.set_parameters(shape=shape, rate=shape / mean)
        return True

    def fit_scale_mm(self, sample: SampleLike) -> bool:
        """Method-of-moments scale; coincides with :meth:`fit_scale_mle`."""
        return self.fit_scale_mle(sample)

    def fit_rate_umvu(self, sample: SampleLike) -> bool:
        """Unbiased rate with the shape fixed: ``β = (nα - 1) / Σx``."""
        arr = as_sample_array(sample)
        if not _is_valid_sample(arr):
            return False
        total = float(np.sum(arr))
        shape = self.shape
        rate = (arr.size * shape - 1.0) / total if total > 0 else nan
        if not (isfinite(rate) and rate > 0):
            return False
        self.set_parameters(shape=shape, rate=rate)
        return True

    def fit_shape_mm(self, sample: SampleLike) -> bool:
        """Fit the shape with the scale fixed: ``α = mean / θ``."""
        arr = as_sample_array(sample)
        if not _is_valid_sample(arr):
            return False
        shape = sample_mean(arr) / self.scale
        if not shape > 0:
            return False
        self.set_parameters(shape=shape, rate=self.rate)
        return True

    def fit_shape_and_scale_mm(self, sample: SampleLike) -> bool:
        """Fit both parameters by moments: ``α = mean² / var``, ``θ = var / mean``."""
        arr = as_sample_array(sample)
        if not _is_valid_sample(arr):
            return False
        mean = sample_mean(arr)
        var = sample_variance(arr, mean)
        if not (mean > 0 and var > 0):
            return False
        self.set_parameters(shape=mean * mean / var, rate=mean / var)
        return True

    def fit_shape_and_scale_mle(self, sample: SampleLike) -> bool:
        """
        Maximum-likelihood fit of shape and scale.

        Notes
        -----
        With ``s = ln(mean) - mean(ln x)`` the shape solves
        ``ln α - ψ(α) = s``. Newton's method is started from the
        approximation ``(3 - s + √((s - 3)² + 24s)) / (12s)``; the scale is
        then ``mean / α``.
        """
        arr = as_sample_array(sample)
        if not _is_valid_sample(arr, strictly_positive=True):
            return False
        mean = sample_mean(arr)
        s = math.log(mean) - sample_log_mean(arr)
        if not (isfinite(s) and s > 0):
            return False
        guess = (3.0 - s + math.sqrt((s - 3.0) ** 2 + 24.0 * s)) / (12.0 * s)
        result = find_root_newton(
            lambda a: math.log(a) - digamma(a) - s if a > 0 else nan,
            lambda a: 1.0 / a - trigamma(a) if a > 0 else nan,
            guess,
        )
        if not (result and result.x > 0):
            logger.debug("Gamma shape MLE did not converge (s=%r)", s)
            return False
        self.set_parameters(shape=result.x, rate=result.x / mean)
        return True

    def fit_rate_bayes(self, sample: SampleLike, prior: Gamma) -> Gamma | None:
        """
        Bayesian rate update with a conjugate Gamma prior.

        The posterior is ``Gamma(nα + α₀, Σx + β₀)``; the rate is set to the
        posterior mean.

        Returns
        -------
        Gamma or None
            The posterior, or ``None`` (parameters untouched) if the sample is
            empty or has negative or non-finite values.
        """
        arr = as_sample_array(sample)
        if not _is_valid_sample(arr):
            return None
        posterior = Gamma(
            shape=self.shape * arr.size + prior.shape,
            rate=float(np.sum(arr)) + prior.rate,
        )
        self.set_parameters(shape=self.shape, rate=posterior.mean())
        return posterior


# --- regime samplers ------------------------------------------------------------


def _sum_of_exponentials(k: int) -> float:
    total = 0.0
    for _ in range(k):
        total += Exponential.standard_variate()
    return total


def _half_integer_variate(k: int) -> float:
    n = Normal.standard_variate()
    return _sum_of_exponentials(k) + 0.5 * n * n


def _ahrens_dieter_variate(shape: float, b: float) -> float:
    inv_shape = 1.0 / shape
    for _ in range(MAX_REJECTION_ITERATIONS):
        p = b * standard_uniform()
        w = Exponential.standard_variate()
        if p <= 1.0:
            x = p**inv_shape
            if x <= w:
                return x
        else:
            x = -math.log((b - p) * inv_shape)
            if (1.0 - shape) * math.log(x) <= w:
                return x
    logger.debug("Ahrens-Dieter sampler exhausted for shape=%r", shape)
    return nan


def _fishman_variate(shape: float) -> float:
    shape_m1 = shape - 1.0
    for _ in range(MAX_REJECTION_ITERATIONS):
        w1 = Exponential.standard_variate()
        w2 = Exponential.standard_variate()
        if w2 >= shape_m1 * (w1 - math.log(w1) - 1.0):
            return shape * w1
    logger.debug("Fishman sampler exhausted for shape=%r", shape)
    return nan


def _marsaglia_tsang_variate(d: float, c: float) -> float:
    for _ in range(MAX_REJECTION_ITERATIONS):
        x = Normal.standard_variate()
        v = 1.0 + c * x
        if v <= 0.0:
            continue
        v = v * v * v
        u = standard_uniform()
        x2 = x * x
        if u < 1.0 - 0.0331 * x2 * x2:
            return d * v
        if math.log(u) < 0.5 * x2 + d * (1.0 - v + math.log(v)):
            return d * v
    logger.debug("Marsaglia-Tsang sampler exhausted for d=%r", d)
    return nan


# --- parametrizations -----------------------------------------------------------


@parametrization(family=Gamma, name="shapeRate")
class _ShapeRate(Parametrization):
    """
    Shape-rate parametrization of gamma distribution.

    Parameters
    ----------
    shape : float
        Shape α
    rate : float
        Rate β
    """

    shape: float
    rate: float

    @constraint(description="shape > 0", repair=lambda p: {"shape": 1.0})
    def check_shape_positive(self) -> bool:
        return self.shape > 0 and isfinite(self.shape)

    @constraint(description="rate > 0", repair=lambda p: {"rate": 1.0})
    def check_rate_positive(self) -> bool:
        return self.rate > 0 and isfinite(self.rate)


@parametrization(family=Gamma, name="shapeScale")
class _ShapeScale(Parametrization):
    """
    Shape-scale parametrization of gamma distribution.

    Parameters
    ----------
    shape : float
        Shape α
    scale : float
        Scale θ = 1/β
    """

    shape: float
    scale: float

    @constraint(description="shape > 0", repair=lambda p: {"shape": 1.0})
    def check_shape_positive(self) -> bool:
        return self.shape > 0 and isfinite(self.shape)

    @constraint(description="scale > 0", repair=lambda p: {"scale": 1.0})
    def check_scale_positive(self) -> bool:
        return self.scale > 0 and isfinite(self.scale)

    def transform_to_base_parametrization(self) -> Parametrization:
        return _ShapeRate(shape=self.shape, rate=1.0 / self.scale)


# --- constrained specializations ------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConstrainedGammaState:
    params: Parametrization
    gamma: Gamma


class _ConstrainedGamma(ParametricDistribution[ConstrainedGammaState]):
    """
    Gamma specialization with a pinned parameter.

    Holds a private :class:`Gamma` rebuilt on every configuration call and
    forwards every characteristic and variate to it. The Gamma setters are
    not exposed, so the pinned parameter cannot be widened.
    """

    distribution_type = UnivariateContinuous
    analytical_methods = _GAMMA_ANALYTICAL

    support = ContinuousSupport(left=0.0)

    @property
    def gamma(self) -> Gamma:
        return self._state.gamma

    def _sampler(self, state: ConstrainedGammaState) -> Callable[[], float]:
        return state.gamma._sampler(state.gamma._state)

    def _pdf(self, x: float, **_: Any) -> float:
        return self._state.gamma._pdf(x)

    def _cdf(self, x: float, **_: Any) -> float:
        return self._state.gamma._cdf(x)

    def _sf(self, x: float, **_: Any) -> float:
        return self._state.gamma._sf(x)

    def _ppf(self, q: float, **_: Any) -> float:
        return self._state.gamma._ppf(q)

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self._state.gamma._mean()

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._state.gamma._var()

    def _mode(self, _: Any = None, **__: Any) -> float:
        return self._state.gamma._mode()

    def _skew(self, _: Any = None, **__: Any) -> float:
        return self._state.gamma._skew()

    def _kurt(self, _: Any = None, **__: Any) -> float:
        return self._state.gamma._kurt()

    def logpdf(self, x: float) -> float:
        return self._state.gamma.logpdf(x)


class ChiSquared(_ConstrainedGamma):
    """
    Chi-squared distribution with ``k`` degrees of freedom: ``Gamma(k/2, θ=2)``.

    A degree below 1 is replaced by 1.
    """

    family_name = FamilyName.CHI_SQUARED
    base_parametrization_name = "degree"

    def __init__(self, degree: int = 1) -> None:
        super().__init__(degree=degree)

    @property
    def degree(self) -> int:
        return cast(_Degree, self._state.params).degree

    def set_degree(self, degree: int, *, strict: bool = False) -> None:
        self.set_parameters(degree=degree, strict=strict)

    def _build_state(self, params: Parametrization) -> ConstrainedGammaState:
        degree = cast(_Degree, params).degree
        gamma = Gamma()
        gamma.set_parameters("shapeScale", shape=0.5 * degree, scale=2.0)
        return ConstrainedGammaState(params=params, gamma=gamma)


@parametrization(family=ChiSquared, name="degree")
class _Degree(Parametrization):
    """
    Parameters
    ----------
    degree : int
        Degrees of freedom k ≥ 1
    """

    degree: int

    @constraint(description="degree >= 1", repair=lambda p: {"degree": 1})
    def check_degree_positive(self) -> bool:
        return self.degree >= 1 and isfinite(self.degree)

    @constraint(description="degree is an integer", repair=lambda p: {"degree": round(p.degree)})
    def check_degree_integer(self) -> bool:
        return float(self.degree).is_integer()


class Erlang(_ConstrainedGamma):
    """
    Erlang distribution: Gamma with an integer shape ``k ≥ 1`` and rate ``β``.

    Only the rate can be estimated from data.
    """

    family_name = FamilyName.ERLANG
    base_parametrization_name = "shapeRate"

    def __init__(self, shape: int = 1, rate: float = 1.0) -> None:
        super().__init__(shape=shape, rate=rate)

    @property
    def shape(self) -> int:
        return cast(_ErlangShapeRate, self._state.params).shape

    @property
    def rate(self) -> float:
        return cast(_ErlangShapeRate, self._state.params).rate

    def _build_state(self, params: Parametrization) -> ConstrainedGammaState:
        p = cast(_ErlangShapeRate, params)
        return ConstrainedGammaState(params=params, gamma=Gamma(shape=p.shape, rate=p.rate))

    def _fit_rate(self, fit: Callable[[Gamma], bool]) -> bool:
        gamma = Gamma(shape=self.shape, rate=self.rate)
        if not fit(gamma):
            return False
        self.set_parameters(shape=self.shape, rate=gamma.rate)
        return True

    def fit_rate_mle(self, sample: SampleLike) -> bool:
        return self._fit_rate(lambda g: g.fit_scale_mle(sample))

    def fit_rate_umvu(self, sample: SampleLike) -> bool:
        return self._fit_rate(lambda g: g.fit_rate_umvu(sample))

    def fit_rate_bayes(self, sample: SampleLike, prior: Gamma) -> Gamma | None:
        """Conjugate update of the rate; see :meth:`Gamma.fit_rate_bayes`."""
        gamma = Gamma(shape=self.shape, rate=self.rate)
        posterior = gamma.fit_rate_bayes(sample, prior)
        if posterior is not None:
            self.set_parameters(shape=self.shape, rate=gamma.rate)
        return posterior


@parametrization(family=Erlang, name="shapeRate")
class _ErlangShapeRate(Parametrization):
    """
    Parameters
    ----------
    shape : int
        Number of exponential phases k ≥ 1
    rate : float
        Rate β
    """

    shape: int
    rate: float

    @constraint(description="shape >= 1", repair=lambda p: {"shape": 1})
    def check_shape_positive(self) -> bool:
        return self.shape >= 1 and isfinite(self.shape)

    @constraint(description="shape is an integer", repair=lambda p: {"shape": round(p.shape)})
    def check_shape_integer(self) -> bool:
        return float(self.shape).is_integer()

    @constraint(description="rate > 0", repair=lambda p: {"rate": 1.0})
    def check_rate_positive(self) -> bool:
        return self.rate > 0 and isfinite(self.rate)


__all__ = [
    "MAX_REJECTION_ITERATIONS",
    "ChiSquared",
    "Erlang",
    "Gamma",
    "GammaRegime",
    "classify_gamma_regime",
]
