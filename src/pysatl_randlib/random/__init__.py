"""
Random subpackage

Injectable process-wide uniform source (:mod:`.source`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .source import (
    get_uniform_source,
    injected_source,
    set_uniform_source,
    standard_uniform,
)

__all__ = [
    "get_uniform_source",
    "injected_source",
    "set_uniform_source",
    "standard_uniform",
]
