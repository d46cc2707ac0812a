"""
Sample Statistics
=================

Descriptive statistics of one-dimensional observation sequences. Functions
accept any sequence convertible to a float array and return ``nan`` for an
empty sample. Where a mean (or standard deviation) is already known it can
be passed in to avoid a second pass over the data.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import nan, sqrt
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    import numpy.typing as npt

    type SampleLike = Sequence[float] | npt.NDArray[Any]


def as_sample_array(sample: SampleLike) -> npt.NDArray[np.float64]:
    """Flatten ``sample`` into a 1-D float array."""
    return np.asarray(sample, dtype=np.float64).reshape(-1)


def sample_sum(sample: SampleLike) -> float:
    arr = as_sample_array(sample)
    return float(np.sum(arr))


def sample_mean(sample: SampleLike) -> float:
    arr = as_sample_array(sample)
    if arr.size == 0:
        return nan
    return float(np.mean(arr))


def sample_log_mean(sample: SampleLike) -> float:
    """Mean of ``ln x``; ``nan`` if the sample is empty or has non-positive values."""
    arr = as_sample_array(sample)
    if arr.size == 0 or np.any(arr <= 0):
        return nan
    return float(np.mean(np.log(arr)))


def sample_variance(sample: SampleLike, mean: float | None = None) -> float:
    """
    Second central moment (biased variance) of ``sample``.

    Parameters
    ----------
    sample : sequence of float
        Observations.
    mean : float, optional
        Known mean; computed from the sample when omitted.
    """
    arr = as_sample_array(sample)
    if arr.size == 0:
        return nan
    mu = float(np.mean(arr)) if mean is None else mean
    return float(np.mean((arr - mu) ** 2))


def raw_moment(sample: SampleLike, k: int) -> float:
    arr = as_sample_array(sample)
    if arr.size == 0:
        return nan
    return float(np.mean(arr**k))


def central_moment(sample: SampleLike, k: int, mean: float | None = None) -> float:
    arr = as_sample_array(sample)
    if arr.size == 0:
        return nan
    mu = float(np.mean(arr)) if mean is None else mean
    return float(np.mean((arr - mu) ** k))


def normalised_moment(
    sample: SampleLike, k: int, mean: float | None = None, stdev: float | None = None
) -> float:
    """``k``-th central moment divided by ``stdev ** k``."""
    arr = as_sample_array(sample)
    if arr.size == 0:
        return nan
    mu = float(np.mean(arr)) if mean is None else mean
    sigma = sqrt(sample_variance(arr, mu)) if stdev is None else stdev
    if sigma == 0.0:
        return nan
    return central_moment(arr, k, mu) / sigma**k


def sample_skewness(
    sample: SampleLike, mean: float | None = None, stdev: float | None = None
) -> float:
    return normalised_moment(sample, 3, mean, stdev)


__all__ = [
    "as_sample_array",
    "central_moment",
    "normalised_moment",
    "raw_moment",
    "sample_log_mean",
    "sample_mean",
    "sample_skewness",
    "sample_sum",
    "sample_variance",
]
