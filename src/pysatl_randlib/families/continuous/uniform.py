"""
Uniform distribution family implementation.

Contains the Uniform family with standard and mean-width parameterizations,
and the standard uniform variate consumed by the other generators.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from math import nan
from typing import TYPE_CHECKING, cast

from pysatl_randlib.distributions.support import ContinuousSupport
from pysatl_randlib.families.distribution import ParametricDistribution
from pysatl_randlib.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_randlib.random import standard_uniform
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateContinuous

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


@dataclass(frozen=True, slots=True)
class UniformState:
    params: _Standard
    width: float


class Uniform(ParametricDistribution[UniformState]):
    """
    Continuous uniform distribution on ``[lower_bound, upper_bound]``.

    Probability density function:
        f(x) = 1 / (b - a) for a ≤ x ≤ b

    Invalid bounds are repaired: swapped when reversed, widened by one when
    equal.
    """

    family_name = FamilyName.UNIFORM
    distribution_type = UnivariateContinuous
    base_parametrization_name = "standard"
    analytical_methods = {
        CharacteristicName.PDF: "_pdf",
        CharacteristicName.CDF: "_cdf",
        CharacteristicName.SF: "_sf",
        CharacteristicName.PPF: "_ppf",
        CharacteristicName.MEAN: "_mean",
        CharacteristicName.MEDIAN: "_mean",
        CharacteristicName.VAR: "_var",
        CharacteristicName.SKEW: "_skew",
        CharacteristicName.KURT: "_kurt",
    }

    def __init__(self, lower_bound: float = 0.0, upper_bound: float = 1.0) -> None:
        super().__init__(lower_bound=lower_bound, upper_bound=upper_bound)

    @staticmethod
    def standard_variate() -> float:
        """Draw from ``U(0, 1)`` (open interval)."""
        return standard_uniform()

    def _build_state(self, params: Parametrization) -> UniformState:
        params = cast(_Standard, params)
        return UniformState(params=params, width=params.upper_bound - params.lower_bound)

    @property
    def support(self) -> ContinuousSupport:
        p = self._state.params
        return ContinuousSupport(left=p.lower_bound, right=p.upper_bound)

    def _sampler(self, state: UniformState) -> Callable[[], float]:
        a, width = state.params.lower_bound, state.width
        return lambda: a + width * standard_uniform()

    def _pdf(self, x: float, **_: Any) -> float:
        p = self._state.params
        return 1.0 / self._state.width if p.lower_bound <= x <= p.upper_bound else 0.0

    def _cdf(self, x: float, **_: Any) -> float:
        p = self._state.params
        if x <= p.lower_bound:
            return 0.0
        if x >= p.upper_bound:
            return 1.0
        return (x - p.lower_bound) / self._state.width

    def _sf(self, x: float, **_: Any) -> float:
        return 1.0 - self._cdf(x)

    def _ppf(self, q: float, **_: Any) -> float:
        if not 0.0 <= q <= 1.0:
            return nan
        return self._state.params.lower_bound + q * self._state.width

    def _mean(self, _: Any = None, **__: Any) -> float:
        p = self._state.params
        return 0.5 * (p.lower_bound + p.upper_bound)

    def _var(self, _: Any = None, **__: Any) -> float:
        return self._state.width**2 / 12.0

    def _skew(self, _: Any = None, **__: Any) -> float:
        return 0.0

    def _kurt(self, _: Any = None, **__: Any) -> float:
        return -1.2


def _order_bounds(p: _Standard) -> dict[str, float]:
    if p.lower_bound == p.upper_bound:
        return {"upper_bound": p.lower_bound + 1.0}
    return {"lower_bound": p.upper_bound, "upper_bound": p.lower_bound}


@parametrization(family=Uniform, name="standard")
class _Standard(Parametrization):
    """
    Standard parametrization of uniform distribution.

    Parameters
    ----------
    lower_bound : float
        Lower bound of the distribution
    upper_bound : float
        Upper bound of the distribution
    """

    lower_bound: float
    upper_bound: float

    @constraint(description="lower_bound < upper_bound", repair=_order_bounds)
    def check_lower_less_than_upper(self) -> bool:
        """Check that lower bound is less than upper bound."""
        return self.lower_bound < self.upper_bound


@parametrization(family=Uniform, name="meanWidth")
class _MeanWidth(Parametrization):
    """
    Mean-width parametrization of uniform distribution.

    Parameters
    ----------
    mean : float
        Mean (center) of the distribution
    width : float
        Width of the distribution (upper_bound - lower_bound)
    """

    mean: float
    width: float

    @constraint(description="width > 0", repair=lambda p: {"width": 1.0})
    def check_width_positive(self) -> bool:
        """Check that width is positive."""
        return self.width > 0

    def transform_to_base_parametrization(self) -> Parametrization:
        half = 0.5 * self.width
        return _Standard(lower_bound=self.mean - half, upper_bound=self.mean + half)


__all__ = ["Uniform"]
