"""
Tests for Binomial Distribution Family

This module tests the binomial closed forms, the choice of the variate
algorithm from ``n`` and ``p``, the estimators and the conjugate update.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


import math

import numpy as np
import pytest
from scipy.stats import binom

from pysatl_randlib.families import (
    Beta,
    Binomial,
    BinomialRegime,
    ParameterClampWarning,
    classify_binomial_regime,
)
from pysatl_randlib.types import CharacteristicName, FamilyName, UnivariateDiscrete

from ..base import BaseDistributionTest


class TestBinomialFamily(BaseDistributionTest):
    def setup_method(self):
        self.binomial_dist_example = Binomial(n=30, p=0.35)

    def test_family_properties(self):
        assert Binomial.family_name == FamilyName.BINOMIAL
        assert Binomial.distribution_type == UnivariateDiscrete
        support = self.binomial_dist_example.support
        assert (support.lower, support.upper) == (0.0, 30.0)

    def test_pmf_sums_to_one(self):
        dist = self.binomial_dist_example
        assert sum(dist.density(k) for k in range(31)) == pytest.approx(1.0, abs=1e-12)

    @pytest.mark.parametrize(
        "char_name, scipy_func",
        [
            (CharacteristicName.PMF, binom.pmf),
            (CharacteristicName.CDF, binom.cdf),
            (CharacteristicName.SF, binom.sf),
        ],
    )
    def test_characteristics_against_scipy(self, char_name, scipy_func):
        test_data = np.array([-1.0, 0.0, 3.0, 7.5, 10.0, 18.0, 30.0, 31.0])
        char_func = self.binomial_dist_example.query_method(char_name)
        result = np.array([char_func(x) for x in test_data])
        self.assert_arrays_almost_equal(result, scipy_func(test_data, 30, 0.35))

    def test_cdf_is_monotone(self):
        dist = self.binomial_dist_example
        values = [dist.cumulative(k) for k in range(-1, 32)]
        assert all(a <= b for a, b in zip(values, values[1:], strict=False))
        assert values[0] == 0.0
        assert values[-1] == 1.0

    @pytest.mark.parametrize("q", [0.01, 0.1, 0.5, 0.9, 0.999])
    def test_quantile_through_fallback(self, q):
        dist = self.binomial_dist_example
        k = dist.quantile(q)
        assert k == binom.ppf(q, 30, 0.35)
        assert dist.cumulative(k) >= q
        assert k == 0 or dist.cumulative(k - 1) < q

    def test_moments_against_scipy(self):
        dist = self.binomial_dist_example
        mean, var, skew, kurt = binom.stats(30, 0.35, moments="mvsk")
        assert dist.mean() == pytest.approx(float(mean), rel=1e-12)
        assert dist.variance() == pytest.approx(float(var), rel=1e-12)
        assert dist.skewness() == pytest.approx(float(skew), rel=1e-12)
        assert dist.excess_kurtosis() == pytest.approx(float(kurt), rel=1e-12)

    @pytest.mark.parametrize(
        "n, p, expected_mode",
        [(10, 0.3, 3.0), (30, 0.35, 10.0), (7, 1.0, 7.0), (7, 0.0, 0.0)],
    )
    def test_mode(self, n, p, expected_mode):
        assert Binomial(n, p).mode() == expected_mode

    @pytest.mark.parametrize("n, p", [(10, 0.3), (20, 0.5), (40, 0.2), (1000, 0.001)])
    def test_median_against_scipy(self, n, p):
        assert Binomial(n, p).median() == binom.median(n, p)

    @pytest.mark.parametrize("p", [0.0, 1.0])
    def test_degenerate_skew_and_kurtosis_are_nan(self, p):
        dist = Binomial(10, p)
        assert math.isnan(dist.skewness())
        assert math.isnan(dist.excess_kurtosis())

    def test_logpmf_outside_support(self):
        dist = self.binomial_dist_example
        assert dist.logpmf(-1) == -math.inf
        assert dist.logpmf(2.5) == -math.inf
        assert dist.logpmf(31) == -math.inf

    @pytest.mark.parametrize(
        "n, p, repaired",
        [
            (0, 0.5, (1, 0.5)),
            (5.6, 0.5, (6, 0.5)),
            (10, -0.1, (10, 0.0)),
            (10, 1.5, (10, 1.0)),
            (10, math.nan, (10, 0.5)),
        ],
    )
    def test_invalid_parameters_are_repaired(self, n, p, repaired):
        with pytest.warns(ParameterClampWarning):
            dist = Binomial(n, p)
        assert (dist.n, dist.p) == repaired

    def test_strict_rejects_invalid_probability(self):
        dist = Binomial(10, 0.3)
        with pytest.raises(ValueError, match="0 <= p <= 1"):
            dist.set_parameters(n=10, p=2.0, strict=True)
        assert (dist.n, dist.p) == (10, 0.3)


class TestBinomialVariates(BaseDistributionTest):
    @pytest.mark.parametrize(
        "n, p, expected_regime",
        [
            (3, 0.01, BinomialRegime.BERNOULLI_SUM),
            (5, 0.5, BinomialRegime.BERNOULLI_SUM),
            (6, 0.4, BinomialRegime.BERNOULLI_SUM),
            (12, 0.4, BinomialRegime.WAITING),
            (150, 0.5, BinomialRegime.BERNOULLI_SUM),
            (12, 0.05, BinomialRegime.WAITING),
            (1000, 0.001, BinomialRegime.WAITING),
            (1000, 0.012, BinomialRegime.WAITING),
            (1000, 0.0165, BinomialRegime.WAITING),
            (1000, 0.017, BinomialRegime.REJECTION),
            (1000, 0.3, BinomialRegime.REJECTION),
            (1000, 0.3137, BinomialRegime.REJECTION),
            (1000, 0.7, BinomialRegime.REJECTION),
            (20, 0.0, BinomialRegime.DEGENERATE),
            (20, 1.0, BinomialRegime.DEGENERATE),
        ],
    )
    def test_regime_selection(self, n, p, expected_regime):
        assert classify_binomial_regime(n, p) is expected_regime
        assert Binomial(n, p).regime is expected_regime

    def test_regime_follows_set_parameters(self):
        dist = Binomial(5, 0.5)
        dist.set_parameters(n=1000, p=0.3)
        assert dist.regime is BinomialRegime.REJECTION
        assert dist.support.upper == 1000.0

    @pytest.mark.parametrize(
        "n, p",
        [
            (5, 0.5),
            (12, 0.4),
            (150, 0.5),
            (1000, 0.001),
            (100, 0.95),
            (1000, 0.3),
            (1000, 0.3137),
            (1000, 0.7),
            (5000, 0.9),
        ],
    )
    def test_variates_match_moments(self, n, p):
        dist = Binomial(n, p)
        sample = self.draw(dist)
        assert np.all((sample >= 0) & (sample <= n))
        assert np.all(sample == np.floor(sample))
        self.assert_sample_moments(sample, dist)

    @pytest.mark.parametrize(
        "below, above, regimes",
        [
            ((13, 0.48), (14, 0.48), (BinomialRegime.BERNOULLI_SUM, BinomialRegime.WAITING)),
            ((1000, 0.01699), (1000, 0.01701), (BinomialRegime.WAITING, BinomialRegime.REJECTION)),
            ((51, 0.25), (52, 0.25), (BinomialRegime.WAITING, BinomialRegime.REJECTION)),
            ((1000, 0.0129), (1000, 0.0131), (BinomialRegime.WAITING, BinomialRegime.WAITING)),
        ],
    )
    def test_moments_continuous_across_regime_boundary(self, below, above, regimes):
        lower, upper = Binomial(*below), Binomial(*above)
        assert (lower.regime, upper.regime) == regimes

        lower_sample, upper_sample = self.draw(lower), self.draw(upper)
        self.assert_sample_moments(lower_sample, lower)
        self.assert_sample_moments(upper_sample, upper)

        shift = upper_sample.mean() - lower_sample.mean()
        tolerance = self.STANDARD_ERRORS * math.sqrt(
            (lower.variance() + upper.variance()) / self.SAMPLE_SIZE
        )
        assert abs(shift - (upper.mean() - lower.mean())) < tolerance

    @pytest.mark.parametrize("n, p", [(1000, 0.3), (1000, 0.3137), (1000, 0.7)])
    def test_rejection_frequencies_near_mode(self, n, p):
        dist = Binomial(n, p)
        sample = self.draw(dist)
        size = sample.size
        mode = int(dist.mode())
        for k in range(mode - 10, mode + 11):
            expected = dist.density(k)
            observed = float(np.mean(sample == k))
            tolerance = self.STANDARD_ERRORS * math.sqrt(expected * (1.0 - expected) / size)
            assert abs(observed - expected) < tolerance

    @pytest.mark.parametrize("p, expected", [(0.0, 0.0), (1.0, 20.0)])
    def test_degenerate_variates(self, p, expected):
        sample = self.draw(Binomial(20, p), n=100)
        assert np.all(sample == expected)

    def test_variate_with(self):
        draws = [Binomial.variate_with(10, 0.3) for _ in range(2000)]
        assert all(0 <= k <= 10 for k in draws)
        assert abs(np.mean(draws) - 3.0) < self.STANDARD_ERRORS * math.sqrt(2.1 / 2000)


class TestBinomialEstimators:
    sample = [2, 3, 5, 4, 1]

    def test_fit_probability_mle(self):
        dist = Binomial(10, 0.5)
        assert dist.fit_probability_mle(self.sample) is True
        assert dist.n == 10
        assert dist.p == pytest.approx(0.3, rel=1e-12)

    def test_fit_probability_mm_matches_mle(self):
        dist = Binomial(10, 0.5)
        assert dist.fit_probability_mm(np.array(self.sample, dtype=float)) is True
        assert dist.p == pytest.approx(0.3, rel=1e-12)

    @pytest.mark.parametrize("bad_sample", [[], [1, 11], [-1, 2], [1, math.nan]])
    def test_failed_fit_leaves_parameters(self, bad_sample):
        dist = Binomial(10, 0.7)
        assert dist.fit_probability_mle(bad_sample) is False
        assert dist.fit_probability_mm(bad_sample) is False
        assert dist.fit_probability_bayes(bad_sample, Beta(2.0, 2.0)) is None
        assert (dist.n, dist.p) == (10, 0.7)
        assert dist.regime is BinomialRegime.WAITING

    def test_fit_probability_bayes(self):
        dist = Binomial(10, 0.5)
        prior = Beta(alpha=2.0, beta=3.0)
        posterior = dist.fit_probability_bayes(self.sample, prior)

        assert posterior is not None
        # Σx = 15 over 5 observations of 10 trials each
        assert posterior.alpha == pytest.approx(17.0)
        assert posterior.beta == pytest.approx(38.0)
        assert dist.p == pytest.approx(17.0 / 55.0, rel=1e-12)
        assert (prior.alpha, prior.beta) == (2.0, 3.0)
