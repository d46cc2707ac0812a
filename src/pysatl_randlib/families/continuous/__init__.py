"""
Continuous distribution families.

This module contains the standard-variate families and the Gamma generator
with its Chi-squared and Erlang specializations.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_randlib.families.continuous.beta import Beta
from pysatl_randlib.families.continuous.exponential import Exponential
from pysatl_randlib.families.continuous.gamma import (
    ChiSquared,
    Erlang,
    Gamma,
    GammaRegime,
    classify_gamma_regime,
)
from pysatl_randlib.families.continuous.normal import Normal
from pysatl_randlib.families.continuous.uniform import Uniform

__all__ = [
    "Beta",
    "ChiSquared",
    "Erlang",
    "Exponential",
    "Gamma",
    "GammaRegime",
    "Normal",
    "Uniform",
    "classify_gamma_regime",
]
