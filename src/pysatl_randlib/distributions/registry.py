"""
Fallback Registry
=================

Maps ``(distribution kind, characteristic)`` to the generic
:class:`~pysatl_randlib.distributions.computation.ComputationMethod` used
when a distribution has no analytical form for that characteristic.

- No auto-configuration in the constructor.
- :func:`characteristic_registry` builds the process-wide instance once
  (``@lru_cache``) and seeds it with the default fallbacks.
- :func:`reset_characteristic_registry` drops it (used by tests).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from pysatl_randlib.distributions.computation import ComputationMethod
from pysatl_randlib.distributions.fitters import (
    fit_hazard,
    fit_median,
    fit_mode_1C,
    fit_mode_1D,
    fit_quantile_1C,
    fit_quantile_1D,
    fit_survival,
)
from pysatl_randlib.types import CharacteristicName, Kind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pysatl_randlib.types import GenericCharacteristicName


class CharacteristicRegistry:
    """Registry of generic fallbacks, keyed by distribution kind and target."""

    def __init__(self) -> None:
        self._methods: dict[tuple[Kind, GenericCharacteristicName], ComputationMethod[Any, Any]] = {}

    def add_computation(self, kind: Kind, method: ComputationMethod[Any, Any]) -> None:
        """
        Register ``method`` as the fallback for ``method.target`` on ``kind``.

        Raises
        ------
        ValueError
            If a fallback for the same kind and target is already registered.
        """
        key = (kind, method.target)
        if key in self._methods:
            raise ValueError(f"Fallback for '{method.target}' on {kind} is already registered.")
        self._methods[key] = method

    def get(
        self, kind: Kind, target: GenericCharacteristicName
    ) -> ComputationMethod[Any, Any] | None:
        return self._methods.get((kind, target))

    def targets(self, kind: Kind) -> Iterator[GenericCharacteristicName]:
        """Characteristics with a registered fallback for ``kind``."""
        return (target for (k, target) in self._methods if k == kind)

    def __contains__(self, key: object) -> bool:
        return key in self._methods

    def __len__(self) -> int:
        return len(self._methods)


def _configure(reg: CharacteristicRegistry) -> None:
    """Default fallbacks for univariate distributions."""
    ppf_1C = ComputationMethod[float, float](
        target=CharacteristicName.PPF,
        sources=[CharacteristicName.CDF, CharacteristicName.PDF],
        fitter=fit_quantile_1C,
    )
    ppf_1D = ComputationMethod[float, float](
        target=CharacteristicName.PPF, sources=[CharacteristicName.CDF], fitter=fit_quantile_1D
    )
    mode_1C = ComputationMethod[Any, float](
        target=CharacteristicName.MODE, sources=[CharacteristicName.PDF], fitter=fit_mode_1C
    )
    mode_1D = ComputationMethod[Any, float](
        target=CharacteristicName.MODE, sources=[CharacteristicName.PMF], fitter=fit_mode_1D
    )

    reg.add_computation(Kind.CONTINUOUS, ppf_1C)
    reg.add_computation(Kind.DISCRETE, ppf_1D)
    reg.add_computation(Kind.CONTINUOUS, mode_1C)
    reg.add_computation(Kind.DISCRETE, mode_1D)

    for kind, density in ((Kind.CONTINUOUS, CharacteristicName.PDF), (Kind.DISCRETE, CharacteristicName.PMF)):
        reg.add_computation(
            kind,
            ComputationMethod[Any, float](
                target=CharacteristicName.MEDIAN, sources=[CharacteristicName.PPF], fitter=fit_median
            ),
        )
        reg.add_computation(
            kind,
            ComputationMethod[float, float](
                target=CharacteristicName.SF, sources=[CharacteristicName.CDF], fitter=fit_survival
            ),
        )
        reg.add_computation(
            kind,
            ComputationMethod[float, float](
                target=CharacteristicName.HAZARD,
                sources=[density, CharacteristicName.CDF],
                fitter=fit_hazard,
            ),
        )


@lru_cache(maxsize=1)
def characteristic_registry() -> CharacteristicRegistry:
    """
    Return the cached, configured fallback registry.

    Notes
    -----
    Configuration is applied exactly once per process. A separate,
    unconfigured registry can be built by instantiating
    :class:`CharacteristicRegistry` directly.
    """
    reg = CharacteristicRegistry()
    _configure(reg)
    return reg


def reset_characteristic_registry() -> None:
    """Reset the cached fallback registry."""
    characteristic_registry.cache_clear()


__all__ = [
    "CharacteristicRegistry",
    "characteristic_registry",
    "reset_characteristic_registry",
]
