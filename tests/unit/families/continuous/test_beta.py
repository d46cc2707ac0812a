"""
Tests for Beta Distribution Family
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


import numpy as np
import pytest
from scipy.stats import beta

from pysatl_randlib.families import Beta, ParameterClampWarning
from pysatl_randlib.types import CharacteristicName, FamilyName

from ..base import BaseDistributionTest


class TestBetaFamily(BaseDistributionTest):
    def setup_method(self):
        self.beta_dist_example = Beta(alpha=2.0, beta=5.0)

    def test_family_properties(self):
        assert Beta.family_name == FamilyName.BETA
        support = self.beta_dist_example.support
        assert (support.lower, support.upper) == (0.0, 1.0)

    @pytest.mark.parametrize(
        "char_name, test_data, scipy_func",
        [
            (CharacteristicName.PDF, [-0.1, 0.0, 0.2, 0.5, 0.9, 1.0], beta.pdf),
            (CharacteristicName.CDF, [0.0, 0.2, 0.5, 0.9, 1.0], beta.cdf),
            (CharacteristicName.SF, [0.0, 0.2, 0.5, 0.9, 1.0], beta.sf),
            (CharacteristicName.PPF, [0.0, 0.05, 0.5, 0.95, 1.0], beta.ppf),
        ],
    )
    def test_characteristics_against_scipy(self, char_name, test_data, scipy_func):
        char_func = self.beta_dist_example.query_method(char_name)
        result = np.array([char_func(x) for x in test_data])
        expected = scipy_func(np.array(test_data), 2.0, 5.0)
        self.assert_arrays_almost_equal(result, expected, precision=1e-9)

    def test_moments_against_scipy(self):
        dist = self.beta_dist_example
        mean, var, skew, kurt = beta.stats(2.0, 5.0, moments="mvsk")
        assert dist.mean() == pytest.approx(float(mean), rel=1e-12)
        assert dist.variance() == pytest.approx(float(var), rel=1e-12)
        assert dist.skewness() == pytest.approx(float(skew), rel=1e-12)
        assert dist.excess_kurtosis() == pytest.approx(float(kurt), rel=1e-12)

    def test_mode_through_fallback(self):
        # (α - 1) / (α + β - 2)
        assert self.beta_dist_example.mode() == pytest.approx(0.2, abs=1e-6)

    def test_invalid_shapes_are_replaced(self):
        with pytest.warns(ParameterClampWarning):
            dist = Beta(alpha=-1.0, beta=0.0)
        assert (dist.alpha, dist.beta) == (1.0, 1.0)
        assert dist.density(0.3) == pytest.approx(1.0)

    @pytest.mark.parametrize("a, b", [(2.0, 5.0), (0.5, 0.5), (30.0, 3.0)])
    def test_variates(self, a, b):
        dist = Beta(alpha=a, beta=b)
        sample = self.draw(dist)
        assert np.all((sample >= 0.0) & (sample <= 1.0))
        self.assert_sample_moments(sample, dist)

    @pytest.mark.parametrize("a, b", [(0.001, 0.001), (0.01, 2.0), (0.3, 0.002)])
    def test_tiny_shapes_give_finite_variates(self, a, b):
        dist = Beta(alpha=a, beta=b)
        sample = np.empty(2_000)
        dist.fill_sample(sample)
        assert np.all(np.isfinite(sample))
        assert np.all((sample >= 0.0) & (sample <= 1.0))
        tolerance = self.STANDARD_ERRORS * np.sqrt(dist.variance() / sample.size)
        assert abs(sample.mean() - dist.mean()) <= tolerance
