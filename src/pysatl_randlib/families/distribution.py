"""
Parametric distributions with generated variates.

This module provides :class:`ParametricDistribution`, the base class of every
built-in family. An instance holds one immutable *state*: the parameters in
the family's base parametrization together with every constant derived from
them (normalizers, the sampling regime and its precomputed coefficients).
:meth:`ParametricDistribution.set_parameters` builds a complete new state and
swaps it in with a single assignment, so derived constants never disagree with
the parameters.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from abc import abstractmethod
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from pysatl_randlib.distributions.computation import AnalyticalComputation
from pysatl_randlib.distributions.distribution import Distribution
from pysatl_randlib.distributions.strategies import (
    DefaultComputationStrategy,
    VariateSamplingStrategy,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import numpy.typing as npt

    from pysatl_randlib.distributions.strategies import ComputationStrategy, SamplingStrategy
    from pysatl_randlib.families.parametrizations import Parametrization
    from pysatl_randlib.types import (
        EuclideanDistributionType,
        FamilyName,
        GenericCharacteristicName,
        ParametrizationName,
    )

logger = logging.getLogger(__name__)

_VARIATE_SAMPLING = VariateSamplingStrategy()


class ParametricDistribution[S](Distribution):
    """
    Base class of parametric families.

    Subclasses declare

    - ``family_name`` and ``distribution_type``;
    - ``base_parametrization_name``: parametrization the state is built from;
    - ``analytical_methods``: characteristic name -> method name of the
      closed forms the family provides;

    and implement :meth:`_build_state`, :meth:`_sampler` and ``support``.
    Parametrization classes register themselves through
    :func:`~pysatl_randlib.families.parametrizations.parametrization`.

    Parameters
    ----------
    parametrization_name : str, optional
        Parametrization of ``values``; the base one when omitted.
    strict : bool, default False
        Raise ``ValueError`` on invalid values instead of clamping them.
    **values
        Parameter values.
    """

    family_name: ClassVar[FamilyName]
    distribution_type: ClassVar[EuclideanDistributionType]  # type: ignore[misc]
    base_parametrization_name: ClassVar[ParametrizationName]
    analytical_methods: ClassVar[Mapping[GenericCharacteristicName, str]] = {}
    parametrizations: ClassVar[dict[ParametrizationName, type[Parametrization]]]

    _state: S

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.parametrizations = {}

    def __init__(
        self,
        parametrization_name: ParametrizationName | None = None,
        /,
        *,
        strict: bool = False,
        **values: Any,
    ) -> None:
        self._computation_strategy: DefaultComputationStrategy[Any, Any] = (
            DefaultComputationStrategy(enable_caching=True)
        )
        self._analytical = MappingProxyType(
            {
                name: AnalyticalComputation[Any, Any](target=name, func=getattr(self, method))
                for name, method in self.analytical_methods.items()
            }
        )
        self.set_parameters(parametrization_name, strict=strict, **values)

    # --- registration ---------------------------------------------------------

    @classmethod
    def register_parametrization(
        cls, name: ParametrizationName, parametrization_class: type[Parametrization]
    ) -> None:
        """
        Register a parametrization class.

        Raises
        ------
        ValueError
            If name is already registered.
        """
        if name in cls.parametrizations:
            raise ValueError(f"Parametrization '{name}' is already registered.")
        cls.parametrizations[name] = parametrization_class

    @classmethod
    def get_parametrization(cls, name: ParametrizationName) -> type[Parametrization]:
        """
        Fetch a parametrization class by name.

        Raises
        ------
        KeyError
            If name is not registered.
        """
        try:
            return cls.parametrizations[name]
        except KeyError as exc:
            raise KeyError(
                f"Unknown parametrization '{name}' for {cls.family_name}; "
                f"known: {sorted(cls.parametrizations)}"
            ) from exc

    # --- configuration --------------------------------------------------------

    def set_parameters(
        self,
        parametrization_name: ParametrizationName | None = None,
        /,
        *,
        strict: bool = False,
        **values: Any,
    ) -> None:
        """
        Configure the distribution.

        Invalid values are repaired (clamped) with a
        :class:`~pysatl_randlib.families.parametrizations.ParameterClampWarning`,
        or rejected when ``strict`` is set; in that case the instance keeps
        its previous parameters.

        Parameters
        ----------
        parametrization_name : str, optional
            Parametrization of ``values``; the base one when omitted.
        strict : bool, default False
            Raise ``ValueError`` on invalid values instead of clamping them.
        **values
            Parameter values.

        Notes
        -----
        The clamp warning is a diagnostic only: the repaired parameters are
        applied whether or not it is shown. A warnings filter that turns
        :class:`ParameterClampWarning` into an error (``-W error``) makes
        repairs raise instead; ignore the category to keep configuration
        permissive under such filters.
        """
        name = self.base_parametrization_name if parametrization_name is None else parametrization_name
        params = self.get_parametrization(name)(**values).repaired(strict=strict)
        base = params.transform_to_base_parametrization().repaired(strict=strict)
        self._apply(base)

    def _apply(self, base: Parametrization) -> None:
        state = self._build_state(base)
        self._state = state
        logger.debug("%s configured: %s", self.family_name, state)

    @abstractmethod
    def _build_state(self, params: Parametrization) -> S:
        """Derive the full state from valid base-parametrization values."""

    @property
    def parameters(self) -> Parametrization:
        """Current parameters in the base parametrization."""
        return self._state.params  # type: ignore[attr-defined,no-any-return]

    # --- Distribution protocol ------------------------------------------------

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        return self._analytical

    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]:
        return self._computation_strategy

    @property
    def sampling_strategy(self) -> SamplingStrategy:
        return _VARIATE_SAMPLING

    # --- variates -------------------------------------------------------------

    @abstractmethod
    def _sampler(self, state: S) -> Callable[[], float]:
        """Single-draw generator for the regime of ``state``."""

    def variate(self) -> float:
        """Draw one variate."""
        return self._sampler(self._state)()

    def fill_sample(self, out: npt.NDArray[np.float64]) -> None:
        """
        Fill a caller-owned 1-D buffer with independent variates in place.

        The sampling regime is chosen once for the whole buffer.

        Raises
        ------
        ValueError
            If ``out`` is not one-dimensional.
        """
        if np.ndim(out) != 1:
            raise ValueError(f"fill_sample expects a 1-D buffer, got shape {np.shape(out)}.")
        draw = self._sampler(self._state)
        for i in range(len(out)):
            out[i] = draw()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.parameters})"


__all__ = ["ParametricDistribution"]
