"""
Beta distribution family implementation.

Used as the conjugate prior (and posterior) of the Binomial success
probability. Variates are ``X / (X + Y)`` for independent ``X ~ Gamma(α)``
and ``Y ~ Gamma(β)``.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from dataclasses import dataclass
from math import inf, isfinite, nan
from typing import TYPE_CHECKING, cast

from scipy.special import betaincinv

from pysatl_randlib.distributions.support import ContinuousSupport
from pysatl_randlib.families.continuous.gamma import Gamma
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.math.special import log_beta_fun, regularized_beta_fun
from pysatl_randlib.random import standard_uniform
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateContinuous

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


@dataclass(frozen=True, slots=True)
class BetaState:
    params: _Standard
    log_beta: float
    gamma_alpha: Gamma
    gamma_beta: Gamma


class Beta(ParametricDistribution[BetaState]):
    """
    Beta distribution on ``[0, 1]``.

    Probability density function:
        f(x) = x^(α-1) (1-x)^(β-1) / B(α, β)
    """

    family_name = FamilyName.BETA
    distribution_type = UnivariateContinuous
    base_parametrization_name = "standard"
    analytical_methods = {
        CharacteristicName.PDF: "_pdf",
        CharacteristicName.CDF: "_cdf",
        CharacteristicName.SF: "_sf",
        CharacteristicName.PPF: "_ppf",
        CharacteristicName.MEAN: "_mean",
        CharacteristicName.VAR: "_var",
        CharacteristicName.SKEW: "_skew",
        CharacteristicName.KURT: "_kurt",
    }

    support = ContinuousSupport(left=0.0, right=1.0)

    def __init__(self, alpha: float = 1.0, beta: float = 1.0) -> None:
        super().__init__(alpha=alpha, beta=beta)

    @property
    def alpha(self) -> float:
        return self._state.params.alpha

    @property
    def beta(self) -> float:
        return self._state.params.beta

    def _build_state(self, params: Parametrization) -> BetaState:
        params = cast(_Standard, params)
        return BetaState(
            params=params,
            log_beta=log_beta_fun(params.alpha, params.beta),
            gamma_alpha=Gamma(shape=params.alpha),
            gamma_beta=Gamma(shape=params.beta),
        )

    def _sampler(self, state: BetaState) -> Callable[[], float]:
        log_x = _log_gamma_sampler(state.gamma_alpha)
        log_y = _log_gamma_sampler(state.gamma_beta)

        def _draw() -> float:
            lx, ly = log_x(), log_y()
            # both gamma draws may underflow for small shapes
            top = max(lx, ly)
            x, y = math.exp(lx - top), math.exp(ly - top)
            return x / (x + y)

        return _draw

    def logpdf(self, x: float) -> float:
        a, b = self.alpha, self.beta
        if x < 0 or x > 1:
            return -inf
        if x == 0:
            return inf if a < 1 else (-self._state.log_beta if a == 1 else -inf)
        if x == 1:
            return inf if b < 1 else (-self._state.log_beta if b == 1 else -inf)
        return (a - 1.0) * math.log(x) + (b - 1.0) * math.log1p(-x) - self._state.log_beta

    def _pdf(self, x: float, **_: Any) -> float:
        return math.exp(self.logpdf(x))

    def _cdf(self, x: float, **_: Any) -> float:
        return regularized_beta_fun(x, self.alpha, self.beta)

    def _sf(self, x: float, **_: Any) -> float:
        return regularized_beta_fun(1.0 - x, self.beta, self.alpha)

    def _ppf(self, q: float, **_: Any) -> float:
        if not 0.0 <= q <= 1.0:
            return nan
        return float(betaincinv(self.alpha, self.beta, q))

    def _mean(self, _: Any = None, **__: Any) -> float:
        return self.alpha / (self.alpha + self.beta)

    def _var(self, _: Any = None, **__: Any) -> float:
        a, b = self.alpha, self.beta
        s = a + b
        return a * b / (s * s * (s + 1.0))

    def _skew(self, _: Any = None, **__: Any) -> float:
        a, b = self.alpha, self.beta
        s = a + b
        return 2.0 * (b - a) * math.sqrt(s + 1.0) / ((s + 2.0) * math.sqrt(a * b))

    def _kurt(self, _: Any = None, **__: Any) -> float:
        a, b = self.alpha, self.beta
        s = a + b
        num = (a - b) ** 2 * (s + 1.0) - a * b * (s + 2.0)
        return 6.0 * num / (a * b * (s + 2.0) * (s + 3.0))


def _log_gamma_sampler(gamma: Gamma) -> Callable[[], float]:
    """
    Draws of ``ln X`` for ``X ~ gamma``.

    Shapes below one use ``X = Y·U^(1/α)`` with ``Y ~ Gamma(α + 1)``, so the
    logarithm stays finite where ``X`` itself underflows to zero.
    """
    shape = gamma.shape
    if shape >= 1.0:
        draw = gamma._sampler(gamma._state)
        return lambda: math.log(draw())
    boosted = Gamma(shape=shape + 1.0, rate=gamma.rate)
    draw_boosted = boosted._sampler(boosted._state)
    return lambda: math.log(draw_boosted()) + math.log(standard_uniform()) / shape


@parametrization(family=Beta, name="standard")
class _Standard(Parametrization):
    """
    Parameters
    ----------
    alpha : float
        First shape parameter α
    beta : float
        Second shape parameter β
    """

    alpha: float
    beta: float

    @constraint(description="alpha > 0", repair=lambda p: {"alpha": 1.0})
    def check_alpha_positive(self) -> bool:
        return self.alpha > 0 and isfinite(self.alpha)

    @constraint(description="beta > 0", repair=lambda p: {"beta": 1.0})
    def check_beta_positive(self) -> bool:
        return self.beta > 0 and isfinite(self.beta)


__all__ = ["Beta"]
