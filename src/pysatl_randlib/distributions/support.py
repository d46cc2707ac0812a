from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from math import ceil, floor, inf
from typing import TYPE_CHECKING, Protocol, cast, overload, runtime_checkable

import numpy as np

from pysatl_randlib.types import BoolArray, Interval1D, Number, NumericArray

if TYPE_CHECKING:
    from collections.abc import Iterator


@runtime_checkable
class Support(Protocol):
    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    @property
    def lower(self) -> float: ...
    @property
    def upper(self) -> float: ...


class ContinuousSupport(Interval1D):
    """Interval support of a continuous distribution."""

    @property
    def lower(self) -> float:
        return self.left

    @property
    def upper(self) -> float:
        return self.right


@runtime_checkable
class DiscreteSupport(Support, Protocol):
    def iter_points(self) -> Iterator[int]: ...

    def prev(self, x: Number) -> int | None: ...


@dataclass(frozen=True, slots=True)
class IntegerLatticeDiscreteSupport:
    """
    Integers ``min_k, min_k + 1, ..., max_k``; either bound may be absent.

    Parameters
    ----------
    min_k : int or None
        Smallest support point (``None`` for unbounded below).
    max_k : int or None
        Largest support point (``None`` for unbounded above).
    """

    min_k: int | None = 0
    max_k: int | None = None

    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    def contains(self, x: Number | NumericArray) -> bool | BoolArray:
        xf = np.asarray(x, dtype=float)
        mask = np.isfinite(xf) & (xf == np.floor(xf))
        if self.min_k is not None:
            mask &= xf >= self.min_k
        if self.max_k is not None:
            mask &= xf <= self.max_k

        if np.ndim(xf) == 0:
            return bool(mask)
        return cast(BoolArray, mask)

    def __contains__(self, x: object) -> bool:
        return bool(self.contains(cast(Number, x)))

    @property
    def lower(self) -> float:
        return -inf if self.min_k is None else float(self.min_k)

    @property
    def upper(self) -> float:
        return inf if self.max_k is None else float(self.max_k)

    def clip(self, k: int) -> int:
        """Nearest support point to ``k``."""
        if self.min_k is not None and k < self.min_k:
            return self.min_k
        if self.max_k is not None and k > self.max_k:
            return self.max_k
        return k

    def iter_points(self) -> Iterator[int]:
        if self.min_k is None:
            raise RuntimeError(
                "Cannot iterate points of a left-unbounded IntegerLatticeDiscreteSupport."
            )

        def _gen() -> Iterator[int]:
            current = cast(int, self.min_k)
            while self.max_k is None or current <= self.max_k:
                yield current
                current += 1

        return _gen()

    def prev(self, x: Number) -> int | None:
        """Largest support point strictly below ``x``."""
        target = int(ceil(float(x))) - 1
        if self.max_k is not None and target > self.max_k:
            target = self.max_k
        if self.min_k is not None and target < self.min_k:
            return None
        return target

    def floor_point(self, x: Number) -> int | None:
        """Largest support point ``<= x``."""
        return self.prev(floor(float(x)) + 1)

    __iter__ = iter_points


__all__ = [
    "Support",
    "ContinuousSupport",
    "DiscreteSupport",
    "IntegerLatticeDiscreteSupport",
]
