"""
Exponential distribution family implementation.

Contains the Exponential family with rate and scale parameterizations, and the
standard exponential variate consumed by the Gamma and Binomial generators.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from dataclasses import dataclass
from math import inf, nan
from typing import TYPE_CHECKING, cast

from pysatl_randlib.distributions.support import ContinuousSupport
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.random import get_uniform_source
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateContinuous

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


@dataclass(frozen=True, slots=True)
class ExponentialState:
    params: _Rate
    scale: float


class Exponential(ParametricDistribution[ExponentialState]):
    """
    Exponential distribution.

    The exponential distribution describes the time between events in a
    Poisson process. It has a single parameter: rate (λ) or scale (β = 1/λ).

    Probability density function (rate parametrization):
        f(x) = λ * exp(-λ * x) for x ≥ 0
    """

    family_name = FamilyName.EXPONENTIAL
    distribution_type = UnivariateContinuous
    base_parametrization_name = "rate"
    analytical_methods = {
        CharacteristicName.PDF: "_pdf",
        CharacteristicName.CDF: "_cdf",
        CharacteristicName.SF: "_sf",
        CharacteristicName.PPF: "_ppf",
        CharacteristicName.HAZARD: "_hazard",
        CharacteristicName.MEAN: "_mean",
        CharacteristicName.MEDIAN: "_median",
        CharacteristicName.MODE: "_mode",
        CharacteristicName.VAR: "_var",
        CharacteristicName.SKEW: "_skew",
        CharacteristicName.KURT: "_kurt",
    }

    support = ContinuousSupport(left=0.0)

    def __init__(self, lambda_: float = 1.0) -> None:
        super().__init__(lambda_=lambda_)

    @staticmethod
    def standard_variate() -> float:
        """Draw from the standard exponential distribution (λ = 1)."""
        return float(get_uniform_source().standard_exponential())

    def _build_state(self, params: Parametrization) -> ExponentialState:
        params = cast(_Rate, params)
        return ExponentialState(params=params, scale=1.0 / params.lambda_)

    def _sampler(self, state: ExponentialState) -> Callable[[], float]:
        scale = state.scale
        return lambda: scale * Exponential.standard_variate()

    def _pdf(self, x: float, **_: Any) -> float:
        lambda_ = self._state.params.lambda_
        return lambda_ * math.exp(-lambda_ * x) if x >= 0 else 0.0

    def _cdf(self, x: float, **_: Any) -> float:
        return -math.expm1(-self._state.params.lambda_ * x) if x > 0 else 0.0

    def _sf(self, x: float, **_: Any) -> float:
        return math.exp(-self._state.params.lambda_ * x) if x > 0 else 1.0

    def _ppf(self, q: float, **_: Any) -> float:
        if not 0.0 <= q <= 1.0:
            return nan
        if q == 1.0:
            return inf
        return -math.log1p(-q) * self._state.scale

    def _hazard(self, x: float, **_: Any) -> float:
        return self._state.params.lambda_ if x >= 0 else 0.0

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self._state.scale

    def _median(self, _: Any = None, **__: Any) -> float:
        return self._state.scale * math.log(2.0)

    def _mode(self, _: Any = None, **__: Any) -> float:
        return 0.0

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._state.scale**2

    def _skew(self, _: Any = None, **__: Any) -> float:
        return 2.0

    def _kurt(self, _: Any = None, **__: Any) -> float:
        return 6.0


@parametrization(family=Exponential, name="rate")
class _Rate(Parametrization):
    """
    Rate parametrization of exponential distribution.

    Parameters
    ----------
    lambda_ : float
        Rate parameter (λ) of the distribution
    """

    lambda_: float

    @constraint(description="lambda_ > 0", repair=lambda p: {"lambda_": 1.0})
    def check_lambda_positive(self) -> bool:
        """Check that rate parameter is positive."""
        return self.lambda_ > 0 and math.isfinite(self.lambda_)


@parametrization(family=Exponential, name="scale")
class _Scale(Parametrization):
    """
    Scale parametrization of exponential distribution.

    Parameters
    ----------
    beta : float
        Scale parameter (β) of the distribution, β = 1/λ
    """

    beta: float

    @constraint(description="beta > 0", repair=lambda p: {"beta": 1.0})
    def check_beta_positive(self) -> bool:
        """Check that scale parameter is positive."""
        return self.beta > 0 and math.isfinite(self.beta)

    def transform_to_base_parametrization(self) -> Parametrization:
        return _Rate(lambda_=1.0 / self.beta)


__all__ = ["Exponential"]
