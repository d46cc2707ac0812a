"""
Computation Primitives
======================

Callables that evaluate a single distribution characteristic:

- :class:`AnalyticalComputation` — closed form provided by the distribution.
- :class:`FittedComputationMethod` — generic fallback bound to one
  distribution, ready to be called.
- :class:`ComputationMethod` — factory that *fits* a fallback for a given
  distribution (registered per distribution kind in
  :mod:`pysatl_randlib.distributions.registry`).

Notes
-----
Univariate callables are scalar: ``float -> float``. Characteristics without
an argument (moments, median, mode) ignore the value they are called with,
so every computation shares the ``(data, **options)`` call shape.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mypy_extensions import KwArg

from pysatl_randlib.types import GenericCharacteristicName

if TYPE_CHECKING:
    from pysatl_randlib.distributions.distribution import Distribution


@dataclass(frozen=True, slots=True)
class AnalyticalComputation[In, Out]:
    """Closed-form computation provided directly by the distribution.

    Parameters
    ----------
    target : str
        Characteristic name (e.g., ``"pdf"``).
    func : Callable[[In, KwArg(Any)], Out]
        Callable evaluating the characteristic. Bound methods of the
        distribution are typical, so the computation always sees the current
        parameters.
    """

    target: GenericCharacteristicName
    func: Callable[[In, KwArg(Any)], Out]

    def __call__(self, data: In, **options: Any) -> Out:
        return self.func(data, **options)


@dataclass(frozen=True, slots=True)
class FittedComputationMethod[In, Out]:
    """Fallback computation fitted to one distribution.

    Parameters
    ----------
    target : str
        Characteristic this method evaluates.
    sources : Sequence[str]
        Characteristics the fallback is derived from (e.g. ``ppf`` from
        ``cdf`` and ``pdf``).
    func : Callable[[In, KwArg(Any)], Out]
        The fitted callable.
    """

    target: GenericCharacteristicName
    sources: Sequence[GenericCharacteristicName]
    func: Callable[[In, KwArg(Any)], Out]

    def __call__(self, data: In, **options: Any) -> Out:
        return self.func(data, **options)


@dataclass(frozen=True, slots=True)
class ComputationMethod[In, Out]:
    """Fallback factory.

    Parameters
    ----------
    target : str
        Characteristic the fitted method evaluates.
    sources : Sequence[str]
        Characteristics the fitter resolves from the distribution.
    fitter : Callable[[Distribution, KwArg(Any)], FittedComputationMethod]
        Builds the fitted callable for a concrete distribution.
    """

    target: GenericCharacteristicName
    sources: Sequence[GenericCharacteristicName]
    fitter: Callable[["Distribution", KwArg(Any)], FittedComputationMethod[In, Out]]

    def fit(self, distribution: "Distribution", **options: Any) -> FittedComputationMethod[In, Out]:
        """Fit and return a :class:`FittedComputationMethod`."""
        return self.fitter(distribution, **options)


__all__ = [
    "AnalyticalComputation",
    "ComputationMethod",
    "FittedComputationMethod",
]
