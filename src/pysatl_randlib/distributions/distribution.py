"""
Distribution Interface
======================

This module defines the public :class:`Distribution` protocol used by
strategies, fitters and parametric families.

A distribution supplies its type, its analytical computations, its support
and two strategies. Everything else (quantiles, moments, likelihoods,
expectations, sampling) is provided here as default methods that resolve the
needed characteristic through the computation strategy, so a closed form is
used when present and a generic fallback otherwise.

Notes
-----
- Characteristic functions are scalar (``float -> float``).
- Log-likelihood uses ``pdf`` (continuous) or ``pmf`` (discrete).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from pysatl_randlib.distributions.fitters import expected_value as _expected_value
from pysatl_randlib.distributions.sampling import ArraySample
from pysatl_randlib.types import CharacteristicName, Kind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from typing import Any

    import numpy.typing as npt

    from pysatl_randlib.distributions.computation import AnalyticalComputation
    from pysatl_randlib.distributions.sampling import Sample
    from pysatl_randlib.distributions.strategies import (
        ComputationStrategy,
        Method,
        SamplingStrategy,
    )
    from pysatl_randlib.distributions.support import Support
    from pysatl_randlib.types import (
        EuclideanDistributionType,
        GenericCharacteristicName,
        ScalarFunc,
    )


def _observations(sample: Sample | Sequence[float] | npt.NDArray[Any]) -> npt.NDArray[np.float64]:
    if isinstance(sample, ArraySample):
        return sample.values
    return np.asarray(sample, dtype=np.float64).reshape(-1)


@runtime_checkable
class Distribution(Protocol):
    """Public distribution interface used by strategies and fitters."""

    @property
    def distribution_type(self) -> EuclideanDistributionType: ...

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]: ...

    @property
    def sampling_strategy(self) -> SamplingStrategy: ...
    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]: ...

    @property
    def support(self) -> Support | None: ...

    def query_method(
        self, characteristic_name: GenericCharacteristicName, **options: Any
    ) -> Method[Any, Any]:
        return self.computation_strategy.query_method(characteristic_name, self, **options)

    def calculate_characteristic(
        self, characteristic_name: GenericCharacteristicName, value: Any, **options: Any
    ) -> Any:
        return self.query_method(characteristic_name, **options)(value)

    def _density_name(self) -> CharacteristicName:
        if self.distribution_type.kind == Kind.DISCRETE:
            return CharacteristicName.PMF
        return CharacteristicName.PDF

    # --- point characteristics ------------------------------------------------

    def density(self, x: float) -> float:
        """Density (continuous) or probability mass (discrete) at ``x``."""
        return float(self.calculate_characteristic(self._density_name(), x))

    def cumulative(self, x: float) -> float:
        return float(self.calculate_characteristic(CharacteristicName.CDF, x))

    def survival(self, x: float) -> float:
        return float(self.calculate_characteristic(CharacteristicName.SF, x))

    def quantile(self, p: float) -> float:
        """Quantile at probability ``p``; ``nan`` outside ``[0, 1]``."""
        return float(self.calculate_characteristic(CharacteristicName.PPF, p))

    def hazard(self, x: float) -> float:
        return float(self.calculate_characteristic(CharacteristicName.HAZARD, x))

    # --- summary characteristics ----------------------------------------------

    def median(self) -> float:
        return float(self.calculate_characteristic(CharacteristicName.MEDIAN, None))

    def mode(self) -> float:
        return float(self.calculate_characteristic(CharacteristicName.MODE, None))

    def mean(self) -> float:
        return float(self.calculate_characteristic(CharacteristicName.MEAN, None))

    def variance(self) -> float:
        return float(self.calculate_characteristic(CharacteristicName.VAR, None))

    def skewness(self) -> float:
        return float(self.calculate_characteristic(CharacteristicName.SKEW, None))

    def excess_kurtosis(self) -> float:
        return float(self.calculate_characteristic(CharacteristicName.KURT, None))

    def expected_value(self, g: ScalarFunc, start_point: float | None = None) -> float:
        """
        Numerical expectation ``E[g(X)]``.

        See :func:`pysatl_randlib.distributions.fitters.expected_value`; the
        distribution must provide an analytical variance.
        """
        return _expected_value(self, g, start_point)

    # --- samples --------------------------------------------------------------

    def likelihood(self, sample: Sample | Sequence[float] | npt.NDArray[Any]) -> float:
        """Product of densities over the sample; a zero density gives ``0``."""
        density = self.query_method(self._density_name())
        result = 1.0
        for x in _observations(sample):
            result *= float(density(float(x)))
        return result

    def log_likelihood(self, sample: Sample | Sequence[float] | npt.NDArray[Any]) -> float:
        """Sum of log densities over the sample; a zero density gives ``-inf``."""
        density = self.query_method(self._density_name())
        values = np.array(
            [float(density(float(x))) for x in _observations(sample)], dtype=np.float64
        )
        with np.errstate(divide="ignore"):
            return float(np.sum(np.log(values)))

    def probability_density_function(
        self, xs: Sequence[float] | npt.NDArray[Any], ys: npt.NDArray[np.float64]
    ) -> None:
        """
        Write ``density(xs[i])`` into ``ys[i]``.

        Does nothing when ``ys`` is shorter than ``xs``.
        """
        if len(ys) < len(xs):
            return
        density = self.query_method(self._density_name())
        for i, x in enumerate(xs):
            ys[i] = float(density(float(x)))

    def sample(self, n: int, **options: Any) -> Sample:
        return self.sampling_strategy.sample(n, distr=self, **options)


__all__ = ["Distribution"]
