"""
Discrete distribution families.

This module contains the Bernoulli and Geometric families and the Binomial
generator.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_randlib.families.discrete.bernoulli import Bernoulli
from pysatl_randlib.families.discrete.binomial import (
    Binomial,
    BinomialRegime,
    classify_binomial_regime,
)
from pysatl_randlib.families.discrete.geometric import Geometric

__all__ = [
    "Bernoulli",
    "Binomial",
    "BinomialRegime",
    "Geometric",
    "classify_binomial_regime",
]
