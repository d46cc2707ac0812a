"""
Numerical kernel

Pure scalar numerics used by distributions:

- special functions (:mod:`.special`);
- root finding and minimization (:mod:`.roots`);
- adaptive quadrature (:mod:`.integration`);
- sample statistics (:mod:`.sample_stats`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .integration import integral
from .roots import (
    SolverResult,
    find_min,
    find_root_brent,
    find_root_newton,
    find_root_secant,
)
from .sample_stats import (
    central_moment,
    normalised_moment,
    raw_moment,
    sample_log_mean,
    sample_mean,
    sample_skewness,
    sample_sum,
    sample_variance,
)

__all__ = [
    "integral",
    # roots
    "SolverResult",
    "find_min",
    "find_root_brent",
    "find_root_newton",
    "find_root_secant",
    # sample statistics
    "central_moment",
    "normalised_moment",
    "raw_moment",
    "sample_log_mean",
    "sample_mean",
    "sample_skewness",
    "sample_sum",
    "sample_variance",
]
