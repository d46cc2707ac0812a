"""
Geometric distribution family implementation.

Counts the failures before the first success, so the support is
``{0, 1, 2, ...}``. Its variates are the waiting times of the Binomial
generator.
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
from pysatl_randlib.families.continuous.exponential import Exponential
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateDiscrete

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


@dataclass(frozen=True, slots=True)
class GeometricState:
    """
    Attributes
    ----------
    params : _Probability
        Success probability p.
    log_q : float
        ``ln(1 - p)``; ``-inf`` when p = 1.
    """

    params: _Probability
    log_q: float


def geometric_variate(log_q: float) -> int:
    """
    Draw ``⌊W / -ln(1 - p)⌋`` for a standard exponential ``W``.

    ``log_q`` is ``ln(1 - p)``; p = 1 (``log_q = -inf``) always gives 0.
    """
    if log_q == -math.inf:
        return 0
    return int(math.floor(Exponential.standard_variate() / -log_q))


class Geometric(ParametricDistribution[GeometricState]):
    """
    Geometric distribution on ``{0, 1, 2, ...}``.

    Probability mass function:
        P(X = k) = p (1 - p)^k

    A probability outside ``(0, 1]`` is replaced by 0.5.
    """

    family_name = FamilyName.GEOMETRIC
    distribution_type = UnivariateDiscrete
    base_parametrization_name = "probability"
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

    support = IntegerLatticeDiscreteSupport(min_k=0)

    def __init__(self, p: float = 0.5) -> None:
        super().__init__(p=p)

    @property
    def p(self) -> float:
        return self._state.params.p

    def _build_state(self, params: Parametrization) -> GeometricState:
        params = cast(_Probability, params)
        log_q = math.log1p(-params.p) if params.p < 1.0 else -math.inf
        return GeometricState(params=params, log_q=log_q)

    def _sampler(self, state: GeometricState) -> Callable[[], float]:
        log_q = state.log_q
        return lambda: geometric_variate(log_q)

    def _pmf(self, x: float, **_: Any) -> float:
        if x < 0 or not float(x).is_integer():
            return 0.0
        return self._state.params.p * math.exp(x * self._state.log_q) if x > 0 else self._state.params.p

    def _cdf(self, x: float, **_: Any) -> float:
        if x < 0:
            return 0.0
        return -math.expm1((math.floor(x) + 1.0) * self._state.log_q)

    def _sf(self, x: float, **_: Any) -> float:
        if x < 0:
            return 1.0
        return math.exp((math.floor(x) + 1.0) * self._state.log_q)

    def _mean(self, _: Any = None, **__: Any) -> float:
        p = self._state.params.p
        return (1.0 - p) / p

    def _median(self, _: Any = None, **__: Any) -> float:
        if self._state.log_q == -math.inf:
            return 0.0
        return max(math.ceil(-math.log(2.0) / self._state.log_q) - 1.0, 0.0)

    def _mode(self, _: Any = None, **__: Any) -> float:
        return 0.0

    def _var(self, _: Any = None, **__: Any) -> float:
        p = self._state.params.p
        return (1.0 - p) / (p * p)

    def _skew(self, _: Any = None, **__: Any) -> float:
        p = self._state.params.p
        return (2.0 - p) / math.sqrt(1.0 - p) if p < 1.0 else nan

    def _kurt(self, _: Any = None, **__: Any) -> float:
        p = self._state.params.p
        return 6.0 + p * p / (1.0 - p) if p < 1.0 else nan


@parametrization(family=Geometric, name="probability")
class _Probability(Parametrization):
    """
    Parameters
    ----------
    p : float
        Probability of success in each trial
    """

    p: float

    @constraint(description="0 < p <= 1", repair=lambda p: {"p": 0.5})
    def check_probability_range(self) -> bool:
        return 0.0 < self.p <= 1.0 and isfinite(self.p)


__all__ = ["Geometric", "geometric_variate"]
