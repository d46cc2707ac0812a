"""
Tests for Gamma Distribution Family

This module tests the gamma closed forms, the choice of the variate
algorithm from the shape, the estimators and the conjugate rate update.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


import math

import numpy as np
import pytest
from scipy.special import digamma, polygamma
from scipy.stats import gamma

from pysatl_randlib.families import Gamma, GammaRegime, ParameterClampWarning, classify_gamma_regime
from pysatl_randlib.types import CharacteristicName, FamilyName

from ..base import BaseDistributionTest


class TestGammaFamily(BaseDistributionTest):
    """Test suite for Gamma distribution family."""

    def setup_method(self):
        """Setup before each test method."""
        self.gamma_dist_example = Gamma(shape=2.5, rate=2.0)

    def test_family_properties(self):
        assert Gamma.family_name == FamilyName.GAMMA
        assert set(Gamma.parametrizations) == {"shapeRate", "shapeScale"}
        assert Gamma.base_parametrization_name == "shapeRate"

    def test_shape_scale_parametrization(self):
        dist = Gamma()
        dist.set_parameters("shapeScale", shape=3.0, scale=0.5)
        assert (dist.shape, dist.rate, dist.scale) == (3.0, 2.0, 0.5)

    def test_negative_shape_behaves_as_one(self):
        with pytest.warns(ParameterClampWarning, match="shape > 0"):
            dist = Gamma(shape=-1.0, rate=2.0)
        assert dist.shape == 1.0
        assert dist.regime is GammaRegime.INTEGER_SHAPE
        assert dist.density(0.5) == pytest.approx(2.0 * math.exp(-1.0), rel=1e-12)

    def test_shape_close_to_integer_is_snapped(self):
        dist = Gamma(shape=3.0000001, rate=1.0)
        assert dist.shape == 3.0
        assert dist.regime is GammaRegime.INTEGER_SHAPE

    @pytest.mark.parametrize(
        "shape, expected_regime",
        [
            (1.0, GammaRegime.INTEGER_SHAPE),
            (2.0, GammaRegime.INTEGER_SHAPE),
            (4.0, GammaRegime.INTEGER_SHAPE),
            (0.5, GammaRegime.HALF_INTEGER_SHAPE),
            (1.5, GammaRegime.HALF_INTEGER_SHAPE),
            (2.5, GammaRegime.HALF_INTEGER_SHAPE),
            (4.5, GammaRegime.HALF_INTEGER_SHAPE),
            (0.2, GammaRegime.SMALL_SHAPE),
            (0.999, GammaRegime.SMALL_SHAPE),
            (1.2, GammaRegime.MEDIUM_SHAPE),
            (3.0 - 1e-3, GammaRegime.MEDIUM_SHAPE),
            (3.2, GammaRegime.LARGE_SHAPE),
            (5.0, GammaRegime.LARGE_SHAPE),
            (5.5, GammaRegime.LARGE_SHAPE),
            (50.0, GammaRegime.LARGE_SHAPE),
        ],
    )
    def test_regime_selection(self, shape, expected_regime):
        assert classify_gamma_regime(shape) is expected_regime
        assert Gamma(shape=shape).regime is expected_regime

    def test_regime_follows_set_parameters(self):
        dist = Gamma(shape=2.0)
        dist.set_parameters(shape=0.3, rate=1.0)
        assert dist.regime is GammaRegime.SMALL_SHAPE

    @pytest.mark.parametrize(
        "char_name, test_data, scipy_func",
        [
            (CharacteristicName.PDF, [-1.0, 0.0, 0.1, 1.0, 2.5, 6.0], gamma.pdf),
            (CharacteristicName.CDF, [-1.0, 0.0, 0.1, 1.0, 2.5, 6.0], gamma.cdf),
            (CharacteristicName.SF, [-1.0, 0.0, 0.1, 1.0, 2.5, 6.0], gamma.sf),
            (CharacteristicName.PPF, [0.0, 0.01, 0.25, 0.5, 0.75, 0.99], gamma.ppf),
        ],
    )
    def test_characteristics_against_scipy(self, char_name, test_data, scipy_func):
        char_func = self.gamma_dist_example.query_method(char_name)
        result = np.array([char_func(x) for x in test_data])
        expected = scipy_func(np.array(test_data), 2.5, scale=0.5)
        self.assert_arrays_almost_equal(result, expected, precision=1e-9)

    @pytest.mark.parametrize("shape", [0.5, 1.0, 3.0])
    def test_density_at_zero(self, shape):
        dist = Gamma(shape=shape, rate=2.0)
        expected = {0.5: math.inf, 1.0: 2.0, 3.0: 0.0}[shape]
        assert dist.density(0.0) == pytest.approx(expected, rel=1e-12)

    def test_moments(self):
        dist = self.gamma_dist_example
        assert abs(dist.mean() - 1.25) < self.CALCULATION_PRECISION
        assert abs(dist.variance() - 0.625) < self.CALCULATION_PRECISION
        assert abs(dist.mode() - 0.75) < self.CALCULATION_PRECISION
        assert abs(dist.skewness() - 2.0 / math.sqrt(2.5)) < self.CALCULATION_PRECISION
        assert abs(dist.excess_kurtosis() - 2.4) < self.CALCULATION_PRECISION

    def test_mode_is_zero_below_unit_shape(self):
        assert Gamma(shape=0.5).mode() == 0.0

    def test_median_through_fallback(self):
        assert self.gamma_dist_example.median() == pytest.approx(
            gamma.median(2.5, scale=0.5), abs=1e-7
        )

    def test_log_moments(self):
        dist = self.gamma_dist_example
        assert dist.log_mean() == pytest.approx(digamma(2.5) - math.log(2.0), rel=1e-12)
        assert dist.log_variance() == pytest.approx(polygamma(1, 2.5), rel=1e-12)

    @pytest.mark.parametrize("shape", [0.2, 0.5, 1.5, 2.0, 2.2, 4.5, 7.0, 50.0])
    def test_variates_in_every_regime(self, shape):
        dist = Gamma(shape=shape, rate=2.0)
        sample = self.draw(dist)
        assert np.all(sample >= 0.0)
        self.assert_sample_moments(sample, dist)

    @pytest.mark.parametrize(
        "below, above, regimes",
        [
            (0.999, 1.001, (GammaRegime.SMALL_SHAPE, GammaRegime.MEDIUM_SHAPE)),
            (2.999, 3.001, (GammaRegime.MEDIUM_SHAPE, GammaRegime.LARGE_SHAPE)),
            (4.5, 4.6, (GammaRegime.HALF_INTEGER_SHAPE, GammaRegime.LARGE_SHAPE)),
            (4.0, 5.0, (GammaRegime.INTEGER_SHAPE, GammaRegime.LARGE_SHAPE)),
            (4.4, 5.2, (GammaRegime.LARGE_SHAPE, GammaRegime.LARGE_SHAPE)),
        ],
    )
    def test_moments_continuous_across_regime_boundary(self, below, above, regimes):
        lower, upper = Gamma(shape=below, rate=2.0), Gamma(shape=above, rate=2.0)
        assert (lower.regime, upper.regime) == regimes

        lower_sample, upper_sample = self.draw(lower), self.draw(upper)
        self.assert_sample_moments(lower_sample, lower)
        self.assert_sample_moments(upper_sample, upper)

        shift = upper_sample.mean() - lower_sample.mean()
        tolerance = self.STANDARD_ERRORS * math.sqrt(
            (lower.variance() + upper.variance()) / self.SAMPLE_SIZE
        )
        assert abs(shift - (upper.mean() - lower.mean())) < tolerance


class TestGammaEstimators(BaseDistributionTest):
    """Estimators return True on success and leave parameters untouched otherwise."""

    sample = np.array([0.8, 1.7, 2.4, 0.3, 1.1, 3.6, 0.9, 1.4])

    def test_fit_scale_mle(self):
        dist = Gamma(shape=2.0)
        assert dist.fit_scale_mle(self.sample) is True
        assert dist.shape == 2.0
        assert dist.scale == pytest.approx(self.sample.mean() / 2.0, rel=1e-12)

    def test_fit_scale_mm_matches_mle(self):
        mm, mle = Gamma(shape=3.0), Gamma(shape=3.0)
        assert mm.fit_scale_mm(self.sample) and mle.fit_scale_mle(self.sample)
        assert mm.rate == mle.rate

    def test_fit_rate_umvu(self):
        dist = Gamma(shape=2.0)
        assert dist.fit_rate_umvu(self.sample) is True
        expected = (self.sample.size * 2.0 - 1.0) / self.sample.sum()
        assert dist.rate == pytest.approx(expected, rel=1e-12)

    def test_fit_shape_mm(self):
        dist = Gamma(shape=1.0, rate=2.0)
        assert dist.fit_shape_mm(self.sample) is True
        assert dist.rate == 2.0
        assert dist.shape == pytest.approx(self.sample.mean() * 2.0, rel=1e-12)

    def test_fit_shape_and_scale_mm(self):
        dist = Gamma()
        assert dist.fit_shape_and_scale_mm(self.sample) is True
        mean, var = self.sample.mean(), self.sample.var()
        assert dist.shape == pytest.approx(mean * mean / var, rel=1e-10)
        assert dist.rate == pytest.approx(mean / var, rel=1e-10)

    def test_fit_shape_and_scale_mle_matches_scipy(self):
        dist = Gamma()
        assert dist.fit_shape_and_scale_mle(self.sample) is True
        shape, _, scale = gamma.fit(self.sample, floc=0.0)
        assert dist.shape == pytest.approx(shape, rel=1e-4)
        assert dist.scale == pytest.approx(scale, rel=1e-4)

    def test_fit_shape_and_scale_mle_recovers_parameters(self):
        sample = self.draw(Gamma(shape=3.0, rate=0.5))
        dist = Gamma()
        assert dist.fit_shape_and_scale_mle(sample)
        assert dist.shape == pytest.approx(3.0, rel=0.05)
        assert dist.rate == pytest.approx(0.5, rel=0.05)

    @pytest.mark.parametrize(
        "method",
        [
            "fit_scale_mle",
            "fit_scale_mm",
            "fit_rate_umvu",
            "fit_shape_mm",
            "fit_shape_and_scale_mm",
            "fit_shape_and_scale_mle",
        ],
    )
    @pytest.mark.parametrize("bad_sample", [[], [1.0, -0.5, 2.0], [1.0, math.nan], [1.0, math.inf]])
    def test_failed_fit_leaves_parameters(self, method, bad_sample):
        dist = Gamma(shape=2.0, rate=3.0)
        assert getattr(dist, method)(bad_sample) is False
        assert (dist.shape, dist.rate) == (2.0, 3.0)

    def test_shape_mle_rejects_zero_observations(self):
        dist = Gamma(shape=2.0, rate=3.0)
        assert dist.fit_shape_and_scale_mle([0.0, 1.0, 2.0]) is False
        assert (dist.shape, dist.rate) == (2.0, 3.0)

    def test_constant_sample_has_no_moment_fit(self):
        dist = Gamma(shape=2.0, rate=3.0)
        assert dist.fit_shape_and_scale_mm([1.5, 1.5, 1.5]) is False

    def test_fit_rate_bayes(self):
        dist = Gamma(shape=2.0, rate=1.0)
        prior = Gamma(shape=3.0, rate=4.0)
        posterior = dist.fit_rate_bayes(self.sample, prior)

        assert posterior is not None
        assert posterior.shape == pytest.approx(2.0 * self.sample.size + 3.0)
        assert posterior.rate == pytest.approx(self.sample.sum() + 4.0)
        assert dist.shape == 2.0
        assert dist.rate == pytest.approx(posterior.mean(), rel=1e-12)
        assert (prior.shape, prior.rate) == (3.0, 4.0)

    def test_fit_rate_bayes_rejects_invalid_sample(self):
        dist = Gamma(shape=2.0, rate=1.0)
        assert dist.fit_rate_bayes([-1.0], Gamma()) is None
        assert dist.rate == 1.0
