"""
Normal (Gaussian) distribution family implementation.

Contains the Normal family with mean-std and mean-precision parameterizations,
and the standard normal variate consumed by the Gamma and Binomial generators.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from dataclasses import dataclass
from math import inf, nan
from typing import TYPE_CHECKING, cast

from scipy.special import erf, erfinv

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

_SQRT2 = math.sqrt(2.0)
_LN_SQRT_2PI = 0.5 * math.log(2.0 * math.pi)


@dataclass(frozen=True, slots=True)
class NormalState:
    params: _MeanStd
    log_sigma: float


class Normal(ParametricDistribution[NormalState]):
    """
    Normal (Gaussian) distribution.

    Probability density function:
        f(x) = 1/(σ√(2π)) * exp(-(x-μ)²/(2σ²))
    """

    family_name = FamilyName.NORMAL
    distribution_type = UnivariateContinuous
    base_parametrization_name = "meanStd"
    analytical_methods = {
        CharacteristicName.PDF: "_pdf",
        CharacteristicName.CDF: "_cdf",
        CharacteristicName.SF: "_sf",
        CharacteristicName.PPF: "_ppf",
        CharacteristicName.MEAN: "_mean",
        CharacteristicName.MEDIAN: "_mean",
        CharacteristicName.MODE: "_mean",
        CharacteristicName.VAR: "_var",
        CharacteristicName.SKEW: "_zero",
        CharacteristicName.KURT: "_zero",
    }

    support = ContinuousSupport()

    def __init__(self, mu: float = 0.0, sigma: float = 1.0) -> None:
        super().__init__(mu=mu, sigma=sigma)

    @staticmethod
    def standard_variate() -> float:
        """Draw from the standard normal distribution."""
        return float(get_uniform_source().standard_normal())

    def _build_state(self, params: Parametrization) -> NormalState:
        params = cast(_MeanStd, params)
        return NormalState(params=params, log_sigma=math.log(params.sigma))

    def _sampler(self, state: NormalState) -> Callable[[], float]:
        mu, sigma = state.params.mu, state.params.sigma
        return lambda: mu + sigma * Normal.standard_variate()

    def _z(self, x: float) -> float:
        p = self._state.params
        return (x - p.mu) / p.sigma

    def logpdf(self, x: float) -> float:
        z = self._z(x)
        return -0.5 * z * z - self._state.log_sigma - _LN_SQRT_2PI

    def _pdf(self, x: float, **_: Any) -> float:
        return math.exp(self.logpdf(x))

    def _cdf(self, x: float, **_: Any) -> float:
        return float(0.5 * (1.0 + erf(self._z(x) / _SQRT2)))

    def _sf(self, x: float, **_: Any) -> float:
        return float(0.5 * (1.0 - erf(self._z(x) / _SQRT2)))

    def _ppf(self, q: float, **_: Any) -> float:
        if not 0.0 <= q <= 1.0:
            return nan
        if q == 0.0:
            return -inf
        if q == 1.0:
            return inf
        p = self._state.params
        return p.mu + p.sigma * _SQRT2 * float(erfinv(2.0 * q - 1.0))

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self._state.params.mu

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._state.params.sigma**2

    def _zero(self, _: Any = None, **__: Any) -> float:
        return 0.0


@parametrization(family=Normal, name="meanStd")
class _MeanStd(Parametrization):
    """
    Standard parametrization of normal distribution.

    Parameters
    ----------
    mu : float
        Mean of the distribution
    sigma : float
        Standard deviation of the distribution
    """

    mu: float
    sigma: float

    @constraint(description="mu is finite", repair=lambda p: {"mu": 0.0})
    def check_mu_finite(self) -> bool:
        return math.isfinite(self.mu)

    @constraint(description="sigma > 0", repair=lambda p: {"sigma": 1.0})
    def check_sigma_positive(self) -> bool:
        """Check that standard deviation is positive."""
        return self.sigma > 0 and math.isfinite(self.sigma)


@parametrization(family=Normal, name="meanPrec")
class _MeanPrec(Parametrization):
    """
    Mean-precision parametrization of normal distribution.

    Parameters
    ----------
    mu : float
        Mean of the distribution
    tau : float
        Precision parameter (inverse variance)
    """

    mu: float
    tau: float

    @constraint(description="tau > 0", repair=lambda p: {"tau": 1.0})
    def check_tau_positive(self) -> bool:
        """Check that precision parameter is positive."""
        return self.tau > 0 and math.isfinite(self.tau)

    def transform_to_base_parametrization(self) -> Parametrization:
        return _MeanStd(mu=self.mu, sigma=math.sqrt(1 / self.tau))


__all__ = ["Normal"]
