"""
Uniform Source
==============

Process-wide source of uniform random numbers shared by every variate
generator. The source is a :class:`numpy.random.Generator`; it is created
lazily and can be replaced (:func:`set_uniform_source`) or temporarily
injected (:func:`injected_source`) for reproducible runs.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from contextlib import contextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterator

    type SourceLike = np.random.Generator | int | None

_override: np.random.Generator | None = None


@lru_cache(maxsize=1)
def _default_source() -> np.random.Generator:
    return np.random.default_rng()


def _as_generator(rng_or_seed: SourceLike) -> np.random.Generator:
    if isinstance(rng_or_seed, np.random.Generator):
        return rng_or_seed
    return np.random.default_rng(rng_or_seed)


def get_uniform_source() -> np.random.Generator:
    """Return the generator currently feeding all variate generators."""
    if _override is not None:
        return _override
    return _default_source()


def set_uniform_source(rng_or_seed: SourceLike) -> np.random.Generator:
    """
    Replace the process-wide generator.

    Parameters
    ----------
    rng_or_seed : numpy.random.Generator, int or None
        A generator to use as is, or a seed for :func:`numpy.random.default_rng`.
        ``None`` restores a freshly seeded default generator.

    Returns
    -------
    numpy.random.Generator
        The generator now in use.
    """
    global _override
    if rng_or_seed is None:
        _override = None
        _default_source.cache_clear()
        return _default_source()
    _override = _as_generator(rng_or_seed)
    return _override


@contextmanager
def injected_source(rng_or_seed: SourceLike) -> Iterator[np.random.Generator]:
    """Use ``rng_or_seed`` as the uniform source inside a ``with`` block."""
    global _override
    previous = _override
    _override = _as_generator(rng_or_seed)
    try:
        yield _override
    finally:
        _override = previous


def standard_uniform() -> float:
    """Draw from the open interval ``(0, 1)``."""
    rng = get_uniform_source()
    u = float(rng.random())
    while u == 0.0:
        u = float(rng.random())
    return u


__all__ = [
    "get_uniform_source",
    "injected_source",
    "set_uniform_source",
    "standard_uniform",
]
