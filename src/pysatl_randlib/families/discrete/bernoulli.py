"""
Bernoulli distribution family implementation.

The unit step of the Binomial generator's Bernoulli-sum regime.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from dataclasses import dataclass
from math import isfinite, nan
from typing import TYPE_CHECKING, cast

from pysatl_randlib.distributions.support import IntegerLatticeDiscreteSupport
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.random import get_uniform_source
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateDiscrete

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


@dataclass(frozen=True, slots=True)
class BernoulliState:
    params: _Probability
    q: float


class Bernoulli(ParametricDistribution[BernoulliState]):
    """
    Bernoulli distribution on ``{0, 1}``.

    Probability mass function:
        P(X = 1) = p, P(X = 0) = 1 - p

    A probability outside ``[0, 1]`` is clamped into it.
    """

    family_name = FamilyName.BERNOULLI
    distribution_type = UnivariateDiscrete
    base_parametrization_name = "probability"
    analytical_methods = {
        CharacteristicName.PMF: "_pmf",
        CharacteristicName.CDF: "_cdf",
        CharacteristicName.SF: "_sf",
        CharacteristicName.MEAN: "_mean",
        CharacteristicName.MEDIAN: "_median",
        CharacteristicName.MODE: "_median",
        CharacteristicName.VAR: "_var",
        CharacteristicName.SKEW: "_skew",
        CharacteristicName.KURT: "_kurt",
    }

    support = IntegerLatticeDiscreteSupport(min_k=0, max_k=1)

    def __init__(self, p: float = 0.5) -> None:
        super().__init__(p=p)

    @property
    def p(self) -> float:
        return self._state.params.p

    @staticmethod
    def standard_variate() -> int:
        """Fair coin flip."""
        return int(get_uniform_source().random() < 0.5)

    @staticmethod
    def variate_with(p: float) -> int:
        """One Bernoulli(p) draw without building an instance."""
        return int(get_uniform_source().random() < p)

    def _build_state(self, params: Parametrization) -> BernoulliState:
        params = cast(_Probability, params)
        return BernoulliState(params=params, q=1.0 - params.p)

    def _sampler(self, state: BernoulliState) -> Callable[[], float]:
        p = state.params.p
        return lambda: Bernoulli.variate_with(p)

    def _pmf(self, x: float, **_: Any) -> float:
        if x == 0:
            return self._state.q
        if x == 1:
            return self._state.params.p
        return 0.0

    def _cdf(self, x: float, **_: Any) -> float:
        if x < 0:
            return 0.0
        return self._state.q if x < 1 else 1.0

    def _sf(self, x: float, **_: Any) -> float:
        return 1.0 - self._cdf(x)

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self._state.params.p

    def _median(self, _: Any = None, **__: Any) -> float:
        return 1.0 if self._state.params.p > 0.5 else 0.0

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._state.params.p * self._state.q

    def _skew(self, _: Any = None, **__: Any) -> float:
        p, q = self._state.params.p, self._state.q
        if p * q == 0:
            return nan
        return (q - p) / math.sqrt(p * q)

    def _kurt(self, _: Any = None, **__: Any) -> float:
        pq = self._state.params.p * self._state.q
        if pq == 0:
            return nan
        return (1.0 - 6.0 * pq) / pq


def _clamp_probability(p: _Probability) -> dict[str, float]:
    return {"p": min(max(p.p, 0.0), 1.0) if not math.isnan(p.p) else 0.5}


@parametrization(family=Bernoulli, name="probability")
class _Probability(Parametrization):
    """
    Parameters
    ----------
    p : float
        Probability of success
    """

    p: float

    @constraint(description="0 <= p <= 1", repair=_clamp_probability)
    def check_probability_range(self) -> bool:
        return 0.0 <= self.p <= 1.0 and isfinite(self.p)


__all__ = ["Bernoulli"]
