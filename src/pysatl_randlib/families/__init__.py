"""
Parametric families of distributions with variate generators.

This package provides the parametric base class, the parametrization
machinery (constraints with clamping repairs) and the built-in continuous
and discrete families.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov, Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from .distribution import ParametricDistribution
from .parametrizations import (
    ParameterClampWarning,
    Parametrization,
    ParametrizationConstraint,
    constraint,
    parametrization,
)
from .continuous import *
from .continuous import __all__ as _continuous_all
from .discrete import *
from .discrete import __all__ as _discrete_all

__all__ = [
    "ParameterClampWarning",
    "ParametrizationConstraint",
    "Parametrization",
    "ParametricDistribution",
    "constraint",
    "parametrization",
    *_continuous_all,
    *_discrete_all,
]

del _continuous_all
del _discrete_all
