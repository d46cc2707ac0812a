"""
Computation and Sampling Strategies
===================================

This module defines the pluggable strategy interfaces and default implementations:

- :class:`ComputationStrategy` — resolves characteristic methods.
- :class:`DefaultComputationStrategy` — returns analytical computations,
  otherwise fits (and optionally caches) the generic fallback registered
  for the distribution kind.
- :class:`SamplingStrategy` — draws samples from a distribution.
- :class:`DefaultSamplingUnivariateStrategy` — inverse transform sampling
  through the resolved ``ppf``.
- :class:`VariateSamplingStrategy` — delegates to the distribution's own
  regime sampler (``fill_sample``).

Notes
-----
A caching computation strategy belongs to one distribution: cached fallbacks
are keyed by characteristic name only.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from pysatl_randlib.distributions.computation import (
    AnalyticalComputation,
    FittedComputationMethod,
)
from pysatl_randlib.distributions.registry import characteristic_registry
from pysatl_randlib.distributions.sampling import ArraySample, Sample
from pysatl_randlib.random import get_uniform_source
from pysatl_randlib.types import GenericCharacteristicName

if TYPE_CHECKING:
    from pysatl_randlib.distributions.distribution import Distribution

logger = logging.getLogger(__name__)

type Method[In, Out] = AnalyticalComputation[In, Out] | FittedComputationMethod[In, Out]


class ComputationStrategy[In, Out](Protocol):
    """Protocol for characteristic resolution strategies."""

    enable_caching: bool

    def query_method(
        self, state: GenericCharacteristicName, distr: "Distribution", **options: Any
    ) -> Method[In, Out]: ...


class DefaultComputationStrategy[In, Out]:
    """
    Default characteristic resolver.

    Resolution order
    ----------------
    1. If the distribution provides an analytical implementation, return it.
    2. Else, if caching is enabled and the method is cached, return it.
    3. Else fit the fallback registered for the distribution kind (the fitter
       may recursively resolve its sources through the strategy).

    Parameters
    ----------
    enable_caching : bool, default False
        If ``True``, cache fitted fallbacks keyed by target characteristic.

    Raises
    ------
    RuntimeError
        If the distribution has no analytical computations, no fallback is
        registered for the characteristic, or a cycle is detected during
        resolution.
    """

    def __init__(self, enable_caching: bool = False) -> None:
        self.enable_caching = enable_caching
        self._cache: dict[GenericCharacteristicName, FittedComputationMethod[In, Out]] = {}
        self._resolving: dict[int, set[GenericCharacteristicName]] = {}

    def _push_guard(self, distr: "Distribution", state: GenericCharacteristicName) -> None:
        key = id(distr)
        seen = self._resolving.setdefault(key, set())
        if state in seen:
            raise RuntimeError(
                f"Cycle detected while resolving '{state}'. "
                "Provide the characteristic analytically in the distribution."
            )
        seen.add(state)

    def _pop_guard(self, distr: "Distribution", state: GenericCharacteristicName) -> None:
        key = id(distr)
        seen = self._resolving.get(key)
        if seen is not None:
            seen.discard(state)
            if not seen:
                self._resolving.pop(key, None)

    def clear_cache(self) -> None:
        self._cache.clear()

    def query_method(
        self, state: GenericCharacteristicName, distr: "Distribution", **options: Any
    ) -> Method[In, Out]:
        """
        Resolve an analytical or fitted method for ``state``.

        Parameters
        ----------
        state : str
            Target characteristic name to resolve.
        distr : Distribution
            The distribution providing the analytical base and type.
        **options
            Passed to the fitter when a fallback is required.

        Returns
        -------
        Method
            Analytical or fitted callable implementing ``state``.
        """
        if state in distr.analytical_computations:
            return distr.analytical_computations[state]

        if self.enable_caching:
            cached = self._cache.get(state)
            if cached is not None:
                return cached

        if not distr.analytical_computations:
            raise RuntimeError(
                "Distribution provides no analytical computations to ground fallbacks."
            )

        method = characteristic_registry().get(distr.distribution_type.kind, state)
        if method is None:
            raise RuntimeError(
                f"No analytical computation or fallback for '{state}' "
                f"on a {distr.distribution_type.kind} distribution."
            )

        self._push_guard(distr, state)
        try:
            fitted: FittedComputationMethod[In, Out] = method.fit(distr, **options)
        finally:
            self._pop_guard(distr, state)

        logger.debug("Fitted fallback '%s' from %s", state, list(method.sources))
        if self.enable_caching:
            self._cache[state] = fitted
        return fitted


class SamplingStrategy(Protocol):
    """Protocol for sampling strategies (return a :class:`Sample`)."""

    def sample(self, n: int, distr: "Distribution", **options: Any) -> Sample: ...


class DefaultSamplingUnivariateStrategy(SamplingStrategy):
    """
    Default univariate sampler using inverse transform sampling.

    The strategy resolves the distribution's ``ppf`` and applies it to i.i.d.
    uniforms ``U ~ U(0, 1)`` drawn from the process-wide uniform source.

    Returns
    -------
    ArraySample
        A 2D sample of shape ``(n, 1)``.
    """

    def sample(self, n: int, distr: "Distribution", **options: Any) -> ArraySample:
        ppf = distr.query_method("ppf", **options)
        U = get_uniform_source().random(n)
        return ArraySample.from_values([ppf(Ui) for Ui in U])


class VariateSamplingStrategy(SamplingStrategy):
    """
    Sampler for distributions that generate their own variates.

    Allocates an ``(n,)`` buffer, lets the distribution fill it in place
    (``distr.fill_sample(buffer)``), and wraps it as an ``(n, 1)`` sample.
    """

    def sample(self, n: int, distr: "Distribution", **options: Any) -> ArraySample:
        fill = getattr(distr, "fill_sample", None)
        if fill is None:
            raise RuntimeError("VariateSamplingStrategy requires a distribution with fill_sample().")
        buffer = np.empty(n, dtype=np.float64)
        fill(buffer)
        return ArraySample.from_values(buffer)


__all__ = [
    "ComputationStrategy",
    "DefaultComputationStrategy",
    "DefaultSamplingUnivariateStrategy",
    "Method",
    "SamplingStrategy",
    "VariateSamplingStrategy",
]
