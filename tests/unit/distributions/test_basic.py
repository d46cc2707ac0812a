from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from collections.abc import Callable
from typing import Any, cast

from mypy_extensions import KwArg
from scipy import stats

from pysatl_randlib.distributions.computation import AnalyticalComputation
from pysatl_randlib.distributions.support import (
    ContinuousSupport,
    IntegerLatticeDiscreteSupport,
)
from pysatl_randlib.types import Kind
from tests.utils.mocks import (
    StandaloneEuclideanUnivariateDistribution,
    analytical,
)


class DistributionTestBase:
    PDF = "pdf"
    CDF = "cdf"
    PPF = "ppf"
    PMF = "pmf"

    def make_uniform_ppf_distribution(
        self,
    ) -> StandaloneEuclideanUnivariateDistribution:
        ppf_func = cast(Callable[[float, KwArg(Any)], float], lambda q, **kwargs: q)
        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=[
                AnalyticalComputation[float, float](target=self.PPF, func=ppf_func),
            ],
            support=ContinuousSupport(0, 1),
        )

    def make_uniform_pdf_distribution(
        self,
    ) -> StandaloneEuclideanUnivariateDistribution:
        def pdf(x: float) -> float:
            return 1.0 if 0.0 <= x <= 1.0 else 0.0

        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=analytical(pdf=pdf),
            support=ContinuousSupport(0, 1),
        )

    def make_normal_distribution(
        self, mu: float = 0.0, sigma: float = 1.0
    ) -> StandaloneEuclideanUnivariateDistribution:
        """Normal distribution providing only pdf, cdf, mean and variance."""

        def pdf(x: float) -> float:
            z = (x - mu) / sigma
            return math.exp(-0.5 * z * z) / (sigma * math.sqrt(2.0 * math.pi))

        def cdf(x: float) -> float:
            return 0.5 * math.erfc(-(x - mu) / (sigma * math.sqrt(2.0)))

        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=analytical(
                pdf=pdf, cdf=cdf, mean=lambda _: mu, var=lambda _: sigma * sigma
            ),
            support=ContinuousSupport(),
        )

    def make_poisson_distribution(
        self, lam: float = 3.0
    ) -> StandaloneEuclideanUnivariateDistribution:
        """Poisson distribution providing only pmf, cdf, mean and variance."""
        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.DISCRETE,
            analytical_computations=analytical(
                pmf=lambda k: float(stats.poisson.pmf(k, lam)),
                cdf=lambda k: float(stats.poisson.cdf(k, lam)),
                mean=lambda _: lam,
                var=lambda _: lam,
            ),
            support=IntegerLatticeDiscreteSupport(min_k=0),
        )
