from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math

import pytest

from pysatl_randlib.math.roots import (
    SolverResult,
    find_min,
    find_root_brent,
    find_root_newton,
    find_root_secant,
)


class TestSolverResult:
    def test_truth_value_is_convergence(self) -> None:
        assert SolverResult(1.0, True)
        assert not SolverResult(1.0, False)


class TestNewton:
    def test_square_root_of_two(self) -> None:
        result = find_root_newton(lambda x: x * x - 2.0, lambda x: 2.0 * x, 1.0)
        assert result.converged
        assert result.x == pytest.approx(math.sqrt(2.0), abs=1e-10)

    def test_zero_derivative_fails(self) -> None:
        result = find_root_newton(lambda x: x * x + 1.0, lambda x: 2.0 * x, 0.0)
        assert not result

    def test_non_finite_value_fails(self) -> None:
        result = find_root_newton(lambda x: math.nan, lambda x: 1.0, 0.0)
        assert not result


class TestSecant:
    def test_cubic_root(self) -> None:
        result = find_root_secant(lambda x: x**3 - 27.0, 2.0)
        assert result.converged
        assert result.x == pytest.approx(3.0, abs=1e-9)

    def test_seed_at_zero(self) -> None:
        result = find_root_secant(lambda x: x - 0.5, 0.0)
        assert result.converged
        assert result.x == pytest.approx(0.5, abs=1e-10)

    def test_flat_function_fails(self) -> None:
        assert not find_root_secant(lambda x: 1.0, 0.0)


class TestBrent:
    def test_square_root_of_two_in_bracket(self) -> None:
        result = find_root_brent(lambda x: x * x - 2.0, 0.0, 2.0)
        assert result.converged
        assert abs(result.x - math.sqrt(2.0)) < 1e-10

    def test_endpoint_root_is_returned_directly(self) -> None:
        result = find_root_brent(lambda x: x - 1.0, 1.0, 3.0)
        assert result.converged
        assert result.x == 1.0
        assert result.iterations == 0

    def test_same_sign_bracket_fails(self) -> None:
        result = find_root_brent(lambda x: x * x + 1.0, -1.0, 1.0)
        assert not result
        assert math.isnan(result.x)


class TestFindMin:
    def test_parabola(self) -> None:
        result = find_min(lambda x: (x - 1.5) ** 2 + 3.0, -10.0, 10.0)
        assert result.converged
        assert result.x == pytest.approx(1.5, abs=1e-6)

    def test_reversed_bracket(self) -> None:
        result = find_min(lambda x: (x + 2.0) ** 2, 5.0, -5.0)
        assert result.x == pytest.approx(-2.0, abs=1e-6)
