__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import warnings

import numpy as np
import pytest

from pysatl_randlib.families import (
    Exponential,
    Gamma,
    Normal,
    ParameterClampWarning,
    Parametrization,
    ParametricDistribution,
    Uniform,
    constraint,
    parametrization,
)


class TestConstraints:
    def test_constraints_are_collected_in_declaration_order(self):
        params_cls = Gamma.get_parametrization("shapeRate")
        descriptions = [c.description for c in params_cls(shape=1.0, rate=1.0).constraints]
        assert descriptions == ["shape > 0", "rate > 0"]

    def test_validate_raises_on_violation(self):
        params = Gamma.get_parametrization("shapeRate")(shape=-1.0, rate=1.0)
        with pytest.raises(ValueError, match="shape > 0"):
            params.validate()

    def test_repaired_returns_self_when_valid(self):
        params = Gamma.get_parametrization("shapeRate")(shape=2.0, rate=3.0)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert params.repaired() is params

    def test_repaired_clamps_each_violation_with_warning(self):
        params = Gamma.get_parametrization("shapeRate")(shape=-1.0, rate=0.0)
        with pytest.warns(ParameterClampWarning) as record:
            fixed = params.repaired()
        assert len(record) == 2
        assert fixed.parameters == {"shape": 1.0, "rate": 1.0}

    def test_constraint_on_non_method_is_rejected(self):
        with pytest.raises(TypeError, match="instance method"):

            class _Broken(ParametricDistribution[object]):
                pass

            @parametrization(family=_Broken, name="broken")
            class _BrokenParams(Parametrization):
                value: float

                check = staticmethod(constraint(description="never")(lambda: True))


class TestConfiguration:
    def test_clamped_parameters_are_applied(self):
        with pytest.warns(ParameterClampWarning, match="sigma > 0"):
            dist = Normal(mu=1.0, sigma=-2.0)
        assert dist.parameters.parameters == {"mu": 1.0, "sigma": 1.0}

    def test_clamping_applies_with_warning_ignored_under_error_filter(self):
        dist = Gamma(shape=2.0, rate=3.0)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            warnings.simplefilter("ignore", ParameterClampWarning)
            dist.set_parameters(shape=-4.0, rate=3.0)
        assert (dist.shape, dist.rate) == (1.0, 3.0)

    def test_clamp_warning_escalated_to_error_keeps_previous_parameters(self):
        dist = Gamma(shape=2.0, rate=3.0)
        with warnings.catch_warnings():
            warnings.simplefilter("error", ParameterClampWarning)
            with pytest.raises(ParameterClampWarning, match="shape > 0"):
                dist.set_parameters(shape=-4.0, rate=3.0)
        assert (dist.shape, dist.rate) == (2.0, 3.0)

    def test_strict_rejects_and_keeps_previous_parameters(self):
        dist = Gamma(shape=2.0, rate=3.0)
        with pytest.raises(ValueError, match="rate > 0"):
            dist.set_parameters(shape=4.0, rate=-1.0, strict=True)
        assert (dist.shape, dist.rate) == (2.0, 3.0)
        assert dist.mean() == pytest.approx(2.0 / 3.0)

    def test_set_parameters_through_alternative_parametrization(self):
        dist = Exponential()
        dist.set_parameters("scale", beta=4.0)
        assert dist.parameters.parameters == {"lambda_": 0.25}
        assert dist.mean() == pytest.approx(4.0)

    def test_alternative_parametrization_is_repaired_before_transform(self):
        dist = Uniform()
        with pytest.warns(ParameterClampWarning, match="width > 0"):
            dist.set_parameters("meanWidth", mean=3.0, width=-1.0)
        assert dist.parameters.parameters == {"lower_bound": 2.5, "upper_bound": 3.5}

    def test_unknown_parametrization_raises(self):
        with pytest.raises(KeyError, match="Unknown parametrization"):
            Gamma().set_parameters("nonexistent", shape=1.0)

    def test_duplicate_registration_raises(self):
        with pytest.raises(ValueError, match="already registered"):
            Gamma.register_parametrization("shapeRate", Gamma.get_parametrization("shapeRate"))

    def test_parametrizations_are_per_family(self):
        assert set(Gamma.parametrizations) == {"shapeRate", "shapeScale"}
        assert set(Exponential.parametrizations) == {"rate", "scale"}


class TestVariateBuffer:
    def test_fill_sample_rejects_non_flat_buffer(self):
        with pytest.raises(ValueError, match="1-D"):
            Normal().fill_sample(np.empty((3, 2)))

    def test_fill_sample_writes_in_place(self):
        out = np.full(5, np.nan)
        Uniform(2.0, 3.0).fill_sample(out)
        assert np.all((out > 2.0) & (out < 3.0))

    def test_sample_goes_through_variate_generator(self):
        sample = Exponential(2.0).sample(10)
        assert sample.shape == (10, 1)
        assert np.all(sample.array >= 0.0)

    def test_repr_mentions_family_and_parameters(self):
        text = repr(Gamma(shape=2.0, rate=3.0))
        assert text.startswith("Gamma(")
        assert "rate=3.0" in text
