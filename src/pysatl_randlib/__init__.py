"""
PySATL randlib
==============

Random variate generators for parametric probability distributions, with
closed-form characteristics, numeric fallbacks and estimators, built on a
small numerical kernel.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from importlib.metadata import version

from .distributions import *
from .distributions import __all__ as _distr_all
from .families import *
from .families import __all__ as _family_all
from .random import *
from .random import __all__ as _random_all
from .types import *
from .types import __all__ as _types_all

__version__ = version("pysatl-randlib")
__all__ = [
    "__version__",
    *_distr_all,
    *_family_all,
    *_random_all,
    *_types_all,
]

del _distr_all
del _family_all
del _random_all
del _types_all
