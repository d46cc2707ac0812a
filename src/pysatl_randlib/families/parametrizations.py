"""
Parameterization classes and constraints for distribution families.

This module provides the core abstractions for defining different parameterizations
of statistical distributions: constraint validation, repair of invalid values
by clamping, and conversion between parameterization formats.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import warnings
from abc import ABC
from dataclasses import dataclass, is_dataclass, replace
from functools import wraps
from inspect import isfunction
from typing import TYPE_CHECKING, ParamSpec

from pysatl_randlib.types import ParametrizationName

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any, ClassVar

    from pysatl_randlib.families.distribution import ParametricDistribution

    type Repair = Callable[[Any], dict[str, Any]]


class ParameterClampWarning(UserWarning):
    """Emitted when an invalid parameter value is replaced by a valid one."""


@dataclass(slots=True, frozen=True)
class ParametrizationConstraint:
    """
    Constraint on parameter values for a parametrization.

    Parameters
    ----------
    description : str
        Human-readable description of the constraint.
    check : Callable[[Any], bool]
        Validation function that returns True if constraint is satisfied.
    repair : Callable[[Any], dict[str, Any]] or None
        Returns replacement field values that satisfy the constraint. ``None``
        means a violation cannot be repaired.
    """

    description: str
    check: Callable[[Any], bool]
    repair: Repair | None = None


class Parametrization(ABC):
    """
    Abstract base class for distribution parametrizations.

    Subclasses are frozen dataclasses (see :func:`parametrization`) whose
    fields are the parameters.
    """

    # These attributes are set by the @parametrization decorator
    __family__: ClassVar[type[ParametricDistribution[Any]]]
    __param_name__: ClassVar[ParametrizationName]

    _constraints: ClassVar[list[ParametrizationConstraint]] = []

    @property
    def name(self) -> str:
        """Get the name of this parametrization."""
        return self.__class__.__param_name__

    @property
    def parameters(self) -> dict[str, Any]:
        """Get parameters as a dictionary."""
        fields = getattr(self, "__dataclass_fields__", None)
        if fields:
            return {f: getattr(self, f) for f in fields}
        ann = getattr(self, "__annotations__", {})
        return {k: getattr(self, k) for k in ann}

    @property
    def constraints(self) -> list[ParametrizationConstraint]:
        """Get constraints for this parametrization."""
        return self._constraints

    def validate(self) -> None:
        """
        Validate all constraints for this parametrization.

        Raises
        ------
        ValueError
            If any constraint is not satisfied.
        """
        for constraint in self._constraints:
            if not constraint.check(self):
                raise ValueError(f'Constraint "{constraint.description}" does not hold')

    def repaired(self, strict: bool = False) -> Parametrization:
        """
        Return parameters satisfying every constraint.

        Violated constraints are repaired in declaration order; each repair
        emits a :class:`ParameterClampWarning`.

        Parameters
        ----------
        strict : bool, default False
            Raise instead of repairing.

        Returns
        -------
        Parametrization
            ``self`` when valid, otherwise a repaired copy.

        Raises
        ------
        ValueError
            If ``strict`` is set and a constraint is violated, or a violated
            constraint has no repair.
        """
        current: Parametrization = self
        for constraint in self._constraints:
            if constraint.check(current):
                continue
            if strict or constraint.repair is None:
                raise ValueError(
                    f'Constraint "{constraint.description}" does not hold for {current.parameters}'
                )
            fixed = constraint.repair(current)
            warnings.warn(
                f'{type(current).__name__}: "{constraint.description}" violated by '
                f"{current.parameters}; using {fixed}",
                ParameterClampWarning,
                stacklevel=4,
            )
            current = replace(current, **fixed)  # type: ignore[type-var]
        return current

    def transform_to_base_parametrization(self) -> Parametrization:
        """
        Convert this parametrization to the base parametrization.

        Returns
        -------
        Parametrization
            Equivalent parameters in the base parametrization.

        Notes
        -----
        Base implementation returns self. Subclasses should override
        if conversion to a different parametrization is needed.
        """
        return self


P = ParamSpec("P")


def constraint(
    description: str, repair: Repair | None = None
) -> Callable[[Callable[P, bool]], Callable[P, bool]]:
    """
    Decorator to mark an instance method as a parameter constraint.

    Parameters
    ----------
    description : str
        Human-readable description of the constraint.
    repair : Callable[[Parametrization], dict[str, Any]], optional
        Maps violating parameters to replacement field values.

    Returns
    -------
    Callable[[Callable[P, bool]], Callable[P, bool]]
        Decorator that marks the function as a constraint.

    Notes
    -----
    The decorated function must be a predicate returning bool.
    """

    def decorator(func: Callable[P, bool]) -> Callable[P, bool]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> bool:
            return func(*args, **kwargs)

        setattr(wrapper, "__is_constraint", True)
        setattr(wrapper, "__constraint_description", description)
        setattr(wrapper, "__constraint_repair", repair)
        return wrapper

    return decorator


def parametrization(
    *,
    family: type[ParametricDistribution[Any]],
    name: str,
) -> Callable[[type[Parametrization]], type[Parametrization]]:
    """
    Decorator to register a class as a parametrization of a distribution class.

    Parameters
    ----------
    family : type[ParametricDistribution]
        Distribution class to register the parametrization with.
    name : str
        Name of the parametrization.

    Returns
    -------
    Callable[[type[Parametrization]], type[Parametrization]]
        Class decorator that registers the parametrization.

    Notes
    -----
    Automatically converts the class to a frozen dataclass if not already one.
    Collects constraint methods marked with @constraint, in definition order.
    """

    def _collect_constraints(
        cls: type[Parametrization],
    ) -> list[ParametrizationConstraint]:
        """Collect constraint methods from the class."""
        constraints: list[ParametrizationConstraint] = []
        for attr_name, attr in cls.__dict__.items():
            if isinstance(attr, staticmethod | classmethod):
                if getattr(attr.__func__, "__is_constraint", False):
                    raise TypeError(f"@constraint '{attr_name}' must be an instance method")
                continue

            func = attr if callable(attr) and isfunction(attr) else None
            if not func:
                continue
            if getattr(func, "__is_constraint", False):
                desc = getattr(func, "__constraint_description", func.__name__)
                repair = getattr(func, "__constraint_repair", None)
                constraints.append(
                    ParametrizationConstraint(description=desc, check=func, repair=repair)
                )
        return constraints

    def decorator(cls: type[Parametrization]) -> type[Parametrization]:
        if not is_dataclass(cls):
            cls = dataclass(slots=True, frozen=True)(cls)

        cls.__family__ = family
        cls.__param_name__ = name
        cls._constraints = _collect_constraints(cls)

        family.register_parametrization(name, cls)
        return cls

    return decorator


__all__ = [
    "ParameterClampWarning",
    "Parametrization",
    "ParametrizationConstraint",
    "constraint",
    "parametrization",
]
