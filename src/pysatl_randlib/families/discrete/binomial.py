"""
Binomial distribution family implementation.

Variates come from one of four algorithms selected from ``n`` and ``p`` when
the parameters are set. With ``minpq = min(p, 1 - p)``:

- ``DEGENERATE`` (p is 0 or 1): the constant 0 or n;
- ``BERNOULLI_SUM`` (tiny n, or p ≈ ½ and n ≤ 200): sum of n Bernoulli draws;
- ``WAITING`` (small ``⌊n·minpq⌋``): count of geometric waiting times that fit
  into n trials;
- ``REJECTION``: Devroye–Naderisamani rejection for ``Bin(n, pFloor)`` with
  ``pFloor = ⌊n·minpq⌋ / n``, followed by a waiting draw for the residual
  probability.

The draw is for success probability ``minpq``; it is reflected to ``n - X``
when ``p > ½``.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from math import isfinite, nan
from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.special import xlog1py, xlogy

from pysatl_randlib.distributions.support import IntegerLatticeDiscreteSupport
from pysatl_randlib.families.continuous.beta import Beta
from pysatl_randlib.families.continuous.exponential import Exponential
from pysatl_randlib.families.continuous.gamma import MAX_REJECTION_ITERATIONS
from pysatl_randlib.families.continuous.normal import Normal
from pysatl_randlib.families.discrete.bernoulli import Bernoulli
from pysatl_randlib.families.discrete.geometric import geometric_variate
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.math.sample_stats import as_sample_array, sample_mean
from pysatl_randlib.math.special import are_close, log_binomial_coef, regularized_beta_fun
from pysatl_randlib.random import standard_uniform
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateDiscrete

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import Any

    import numpy.typing as npt

    type SampleLike = Sequence[float] | npt.NDArray[Any]

logger = logging.getLogger(__name__)

BERNOULLI_SUM_MAX_N = 3
BERNOULLI_SUM_SMALL_N = 13
BERNOULLI_SUM_HALF_N = 200
WAITING_MAX_NP = 12
WAITING_MAX_NP_WITH_RESIDUAL = 16

_SQRT_2PI = math.sqrt(2.0 * math.pi)


class BinomialRegime(StrEnum):
    DEGENERATE = "degenerate"
    BERNOULLI_SUM = "bernoulli_sum"
    WAITING = "waiting"
    REJECTION = "rejection"


def classify_binomial_regime(n: int, p: float) -> BinomialRegime:
    """Sampling algorithm for ``Bin(n, p)``."""
    if p == 0.0 or p == 1.0:
        return BinomialRegime.DEGENERATE
    minpq = min(p, 1.0 - p)
    if (
        n <= BERNOULLI_SUM_MAX_N
        or (n <= BERNOULLI_SUM_SMALL_N and minpq > 0.025 * (n + 6))
        or (n <= BERNOULLI_SUM_HALF_N and are_close(p, 0.5))
    ):
        return BinomialRegime.BERNOULLI_SUM
    np_floor, p_res = _floor_split(n, minpq)
    if np_floor <= WAITING_MAX_NP or (p_res > 0 and np_floor <= WAITING_MAX_NP_WITH_RESIDUAL):
        return BinomialRegime.WAITING
    return BinomialRegime.REJECTION


def _floor_split(n: int, minpq: float) -> tuple[int, float]:
    """``(⌊n·minpq⌋, minpq - ⌊n·minpq⌋/n)`` with the residual zeroed when ``n·minpq`` is integral."""
    np_exact = n * minpq
    np_floor = int(math.floor(np_exact))
    p_res = 0.0 if are_close(np_floor, np_exact) else minpq - np_floor / n
    return np_floor, p_res


@dataclass(frozen=True, slots=True)
class RejectionConstants:
    """
    Constants of the Devroye–Naderisamani sampler for ``Bin(n, pFloor)``.

    The proposal is a mixture of two half-normals (weights up to ``a1`` and
    ``a2``) and two exponential tails (up to ``a3`` and ``a4``) around the
    mode ``np_floor``.
    """

    n: int
    np_floor: int
    nq_floor: int
    log_p_floor: float
    log_q_floor: float
    delta1: float
    delta2: float
    sigma1: float
    sigma2: float
    c: float
    a1: float
    a2: float
    a3: float
    a4: float
    coef_a3: float
    coef_a4: float
    log_pmf_at_mode: float

    @classmethod
    def build(cls, n: int, np_floor: int) -> RejectionConstants:
        p_floor = np_floor / n
        q_floor = 1.0 - p_floor
        nq_floor = n - np_floor
        npq = np_floor * q_floor
        coef = 128.0 * n / math.pi

        delta1 = npq * math.log(coef * p_floor / (81.0 * q_floor))
        delta1 = math.sqrt(delta1) if delta1 > 1.0 else 1.0
        delta2 = npq * math.log(coef * q_floor / p_floor)
        delta2 = math.sqrt(delta2) if delta2 > 1.0 else 1.0

        npq_sqrt = math.sqrt(npq)
        sigma1 = npq_sqrt * (1.0 + 0.25 * delta1 / np_floor)
        sigma2 = npq_sqrt * (1.0 + 0.25 * delta2 / nq_floor)
        c = 2.0 * delta1 / np_floor

        a1 = 0.5 * math.exp(c) * sigma1 * _SQRT_2PI
        a2 = a1 + 0.5 * sigma2 * _SQRT_2PI
        coef_a3 = 0.5 * delta1 / (sigma1 * sigma1)
        a3 = a2 + math.exp(delta1 * (1.0 / nq_floor - coef_a3)) / coef_a3
        coef_a4 = 0.5 * delta2 / (sigma2 * sigma2)
        a4 = a3 + math.exp(-delta2 * coef_a4) / coef_a4

        log_p_floor = math.log(p_floor)
        log_q_floor = log_p_floor if p_floor == q_floor else math.log(q_floor)
        return cls(
            n=n,
            np_floor=np_floor,
            nq_floor=nq_floor,
            log_p_floor=log_p_floor,
            log_q_floor=log_q_floor,
            delta1=delta1,
            delta2=delta2,
            sigma1=sigma1,
            sigma2=sigma2,
            c=c,
            a1=a1,
            a2=a2,
            a3=a3,
            a4=a4,
            coef_a3=coef_a3,
            coef_a4=coef_a4,
            log_pmf_at_mode=(
                log_binomial_coef(n, np_floor) + np_floor * log_p_floor + nq_floor * log_q_floor
            ),
        )

    def log_floor_pmf(self, k: int) -> float:
        """Log-pmf of ``Bin(n, pFloor)`` at ``k``."""
        return log_binomial_coef(self.n, k) + k * self.log_p_floor + (self.n - k) * self.log_q_floor


@dataclass(frozen=True, slots=True)
class BinomialState:
    """
    Parameters and derived constants of a Binomial distribution.

    Attributes
    ----------
    params : _Standard
        Number of trials n and success probability p.
    q : float
        1 - p.
    minpq : float
        min(p, q), the probability the generators draw for.
    np_floor : int
        ⌊n·minpq⌋.
    p_res : float
        ``minpq - np_floor / n``; zero when ``n·minpq`` is integral.
    regime : BinomialRegime
        Sampling algorithm.
    reflect : bool
        Whether draws are reflected to ``n - X`` (p > ½).
    waiting_log_q : float
        ``ln(1 - π)`` of the geometric waiting times: ``π = minpq`` in the
        waiting regime and ``π = p_res / (1 - pFloor)`` for the rejection
        residual.
    rejection : RejectionConstants or None
        Present in the rejection regime only.
    """

    params: _Standard
    q: float
    minpq: float
    np_floor: int
    p_res: float
    regime: BinomialRegime
    reflect: bool
    waiting_log_q: float
    rejection: RejectionConstants | None


def _is_valid_sample(arr: npt.NDArray[np.float64], n: int) -> bool:
    if arr.size == 0 or not np.all(np.isfinite(arr)):
        return False
    return bool(np.all((arr >= 0) & (arr <= n)))


class Binomial(ParametricDistribution[BinomialState]):
    """
    Binomial distribution: successes in ``n`` independent trials.

    Probability mass function:
        P(X = k) = C(n, k) p^k (1-p)^(n-k) for k = 0, ..., n

    ``n < 1`` is replaced by 1 and ``p`` is clamped into ``[0, 1]``.
    """

    family_name = FamilyName.BINOMIAL
    distribution_type = UnivariateDiscrete
    base_parametrization_name = "standard"
    analytical_methods = {
        CharacteristicName.PMF: "_pmf",
        CharacteristicName.CDF: "_cdf",
        CharacteristicName.SF: "_sf",
        CharacteristicName.MEAN: "_mean",
        CharacteristicName.MEDIAN: "_median",
        CharacteristicName.MODE: "_mode",
        CharacteristicName.VAR: "_var",
        CharacteristicName.SKEW: "_skew",
        CharacteristicName.KURT: "_kurt",
    }

    def __init__(self, n: int = 1, p: float = 0.5) -> None:
        super().__init__(n=n, p=p)

    @property
    def n(self) -> int:
        return self._state.params.n

    @property
    def p(self) -> float:
        return self._state.params.p

    @property
    def regime(self) -> BinomialRegime:
        return self._state.regime

    @property
    def support(self) -> IntegerLatticeDiscreteSupport:
        return IntegerLatticeDiscreteSupport(min_k=0, max_k=self._state.params.n)

    def _build_state(self, params: Parametrization) -> BinomialState:
        params = cast(_Standard, params)
        n, p = int(params.n), params.p
        if n != params.n:
            params = _Standard(n=n, p=p)
        minpq = min(p, 1.0 - p)
        np_floor, p_res = _floor_split(n, minpq)
        regime = classify_binomial_regime(n, p)
        logger.debug("Binomial(n=%r, p=%r): regime %s", n, p, regime)

        rejection = None
        waiting_p = minpq
        if regime is BinomialRegime.REJECTION:
            rejection = RejectionConstants.build(n, np_floor)
            waiting_p = p_res / (1.0 - np_floor / n)
        return BinomialState(
            params=params,
            q=1.0 - p,
            minpq=minpq,
            np_floor=np_floor,
            p_res=p_res,
            regime=regime,
            reflect=p > 0.5,
            waiting_log_q=math.log1p(-waiting_p) if 0.0 < waiting_p < 1.0 else nan,
            rejection=rejection,
        )

    # --- variates -------------------------------------------------------------

    def _sampler(self, state: BinomialState) -> Callable[[], float]:
        n, p = state.params.n, state.params.p
        log_q = state.waiting_log_q

        def _reflected(draw: Callable[[], float]) -> Callable[[], float]:
            if not state.reflect:
                return draw
            return lambda: n - draw()

        match state.regime:
            case BinomialRegime.DEGENERATE:
                value = float(n) if p == 1.0 else 0.0
                return lambda: value
            case BinomialRegime.BERNOULLI_SUM:
                return lambda: float(_bernoulli_sum(n, p))
            case BinomialRegime.WAITING:
                return _reflected(lambda: float(_waiting_variate(n, log_q)))
            case _:
                constants = cast(RejectionConstants, state.rejection)
                if state.p_res > 0:

                    def _draw() -> float:
                        x = _rejection_variate(constants)
                        if math.isnan(x):
                            return x
                        return x + _waiting_variate(n - int(x), log_q)

                    return _reflected(_draw)
                return _reflected(lambda: _rejection_variate(constants))

    @staticmethod
    def variate_with(n: int, p: float) -> int:
        """One ``Bin(n, p)`` draw by summing Bernoulli variates."""
        return _bernoulli_sum(n, p)

    # --- closed forms ---------------------------------------------------------

    def logpmf(self, x: float) -> float:
        n, p = self._state.params.n, self._state.params.p
        if x < 0 or x > n or not float(x).is_integer():
            return -math.inf
        k = int(x)
        return log_binomial_coef(n, k) + float(xlogy(k, p)) + float(xlog1py(n - k, -p))

    def _pmf(self, x: float, **_: Any) -> float:
        return math.exp(self.logpmf(x))

    def _cdf(self, x: float, **_: Any) -> float:
        if x < 0:
            return 0.0
        n = self._state.params.n
        k = int(math.floor(x))
        if k >= n:
            return 1.0
        return regularized_beta_fun(self._state.q, n - k, k + 1)

    def _sf(self, x: float, **_: Any) -> float:
        if x < 0:
            return 1.0
        n = self._state.params.n
        k = int(math.floor(x))
        if k >= n:
            return 0.0
        return regularized_beta_fun(self._state.params.p, k + 1, n - k)

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self._state.params.n * self._state.params.p

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._mean() * self._state.q

    def _median(self, _: Any = None, **__: Any) -> float:
        return float(math.floor(self._mean() + 0.5))

    def _mode(self, _: Any = None, **__: Any) -> float:
        n = self._state.params.n
        return float(min(math.floor((n + 1) * self._state.params.p), n))

    def _skew(self, _: Any = None, **__: Any) -> float:
        var = self._var()
        if var == 0:
            return nan
        return (self._state.q - self._state.params.p) / math.sqrt(var)

    def _kurt(self, _: Any = None, **__: Any) -> float:
        pq = self._state.params.p * self._state.q
        if pq == 0:
            return nan
        return (1.0 / pq - 6.0) / self._state.params.n

    # --- estimators -----------------------------------------------------------

    def fit_probability_mle(self, sample: SampleLike) -> bool:
        """
        Fit ``p`` with ``n`` fixed: ``p = mean / n``.

        Returns
        -------
        bool
            ``False`` (parameters untouched) if the sample is empty or has a
            value outside ``[0, n]``.
        """
        arr = as_sample_array(sample)
        n = self.n
        if not _is_valid_sample(arr, n):
            return False
        self.set_parameters(n=n, p=sample_mean(arr) / n)
        return True

    def fit_probability_mm(self, sample: SampleLike) -> bool:
        """Method-of-moments fit; coincides with :meth:`fit_probability_mle`."""
        return self.fit_probability_mle(sample)

    def fit_probability_bayes(self, sample: SampleLike, prior: Beta) -> Beta | None:
        """
        Bayesian update of ``p`` with a conjugate Beta prior.

        The posterior is ``Beta(Σx + α, N·n - Σx + β)`` for a sample of size
        N; ``p`` is set to the posterior mean. The prior is not modified.

        Returns
        -------
        Beta or None
            The posterior, or ``None`` (parameters untouched) if the sample is
            empty or has a value outside ``[0, n]``.
        """
        arr = as_sample_array(sample)
        n = self.n
        if not _is_valid_sample(arr, n):
            return None
        total = float(np.sum(arr))
        posterior = Beta(alpha=total + prior.alpha, beta=arr.size * n - total + prior.beta)
        self.set_parameters(n=n, p=posterior.mean())
        return posterior


# --- regime samplers ------------------------------------------------------------


def _bernoulli_sum(n: int, p: float) -> int:
    total = 0
    if are_close(p, 0.5):
        for _ in range(n):
            total += Bernoulli.standard_variate()
    else:
        for _ in range(n):
            total += Bernoulli.variate_with(p)
    return total


def _waiting_variate(n: int, log_q: float) -> int:
    """Number of geometric waiting times (trials up to a success) fitting into ``n`` trials."""
    count = -1
    trials = 0
    while trials <= n:
        trials += geometric_variate(log_q) + 1
        count += 1
    return count


def _rejection_variate(c: RejectionConstants) -> float:
    for _ in range(MAX_REJECTION_ITERATIONS):
        u = c.a4 * standard_uniform()
        if u <= c.a1:
            z = Normal.standard_variate()
            y = c.sigma1 * abs(z)
            if y >= c.delta1:
                continue
            x = math.floor(y)
            v = -Exponential.standard_variate() - 0.5 * z * z + c.c
        elif u <= c.a2:
            z = Normal.standard_variate()
            y = c.sigma2 * abs(z)
            if y >= c.delta2:
                continue
            x = math.floor(-y)
            v = -Exponential.standard_variate() - 0.5 * z * z
        elif u <= c.a3:
            y = c.delta1 + Exponential.standard_variate() / c.coef_a3
            x = math.floor(y)
            v = -Exponential.standard_variate() - c.coef_a3 * y + c.delta1 / c.nq_floor
        else:
            y = c.delta2 + Exponential.standard_variate() / c.coef_a4
            x = math.floor(-y)
            v = -Exponential.standard_variate() - c.coef_a4 * y

        k = x + c.np_floor
        if 0 <= k <= c.n and v <= c.log_floor_pmf(k) - c.log_pmf_at_mode:
            return float(k)
    logger.debug("Devroye-Naderisamani sampler exhausted for n=%r, np=%r", c.n, c.np_floor)
    return nan


# --- parametrizations -----------------------------------------------------------


def _clamp_probability(p: _Standard) -> dict[str, float]:
    return {"p": 0.5 if math.isnan(p.p) else min(max(p.p, 0.0), 1.0)}


@parametrization(family=Binomial, name="standard")
class _Standard(Parametrization):
    """
    Parameters
    ----------
    n : int
        Number of trials n ≥ 1
    p : float
        Probability of success in each trial
    """

    n: int
    p: float

    @constraint(description="n >= 1", repair=lambda p: {"n": 1})
    def check_n_positive(self) -> bool:
        return self.n >= 1 and isfinite(self.n)

    @constraint(description="n is an integer", repair=lambda p: {"n": round(p.n)})
    def check_n_integer(self) -> bool:
        return float(self.n).is_integer()

    @constraint(description="0 <= p <= 1", repair=_clamp_probability)
    def check_probability_range(self) -> bool:
        return 0.0 <= self.p <= 1.0


__all__ = [
    "Binomial",
    "BinomialRegime",
    "RejectionConstants",
    "classify_binomial_regime",
]
