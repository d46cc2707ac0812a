from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Generator
from typing import Any

import numpy as np
import pytest

from pysatl_randlib.distributions.registry import reset_characteristic_registry
from pysatl_randlib.random import injected_source

pytest.importorskip("scipy")

SEED = 20251019


@pytest.fixture(autouse=True)
def _fresh_registry_and_source() -> Generator[np.random.Generator, Any, None]:
    reset_characteristic_registry()
    with injected_source(SEED) as rng:
        yield rng
