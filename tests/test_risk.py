"""
Unit tests for risk module.
"""

import numpy as np
import pytest

from curvekit.conventions import ValueType
from curvekit.curves import (
    ExponentialExtrapolator,
    InterpolatedNodalCurve,
    LogLinearInterpolator,
    NaturalCubicSplineInterpolator,
    create_flat_curve,
)
from curvekit.errors import ValidationError
from curvekit.perturbation import ParallelShift, PointShift
from curvekit.risk import BumpEngine, BumpResult, curve_sensitivity_report


@pytest.fixture
def sample_curve():
    """Discount curve with exponential extrapolation on both sides."""
    return InterpolatedNodalCurve.of(
        "USD-DSC",
        [0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
        [0.9875, 0.975, 0.951, 0.905, 0.78, 0.61],
        interpolator=LogLinearInterpolator(),
        extrapolator_left=ExponentialExtrapolator(),
        extrapolator_right=ExponentialExtrapolator(),
        value_type=ValueType.DISCOUNT_FACTOR,
    )


class TestBumpEngine:
    """Tests for bump engine."""

    def test_parameter_bump(self, sample_curve):
        bumped = BumpEngine(sample_curve).parameter_bump(2, 0.001)
        assert bumped.get_parameter(2) == pytest.approx(0.952)
        assert sample_curve.get_parameter(2) == 0.951

    def test_parallel_bump(self, sample_curve):
        bumped = BumpEngine(sample_curve).parallel_bump(-0.01)
        np.testing.assert_allclose(bumped.y_values, sample_curve.y_values - 0.01)

    def test_bump_and_reval(self, sample_curve):
        engine = BumpEngine(sample_curve)
        result = engine.bump_and_reval(lambda c: c.y_value(3.0), PointShift(4, 0.01), "5Y up")
        assert isinstance(result, BumpResult)
        assert result.scenario == "5Y up"
        assert result.original_pv == pytest.approx(sample_curve.y_value(3.0))
        assert result.delta_pv == pytest.approx(result.bumped_pv - result.original_pv)
        assert result.delta_pv > 0

    def test_bump_and_reval_default_name(self, sample_curve):
        result = BumpEngine(sample_curve).bump_and_reval(lambda c: c.y_value(1.0), ParallelShift(0.0))
        assert result.scenario == repr(ParallelShift(0.0))
        assert result.delta_pv == 0.0

    @pytest.mark.parametrize("x", [0.1, 0.75, 3.0, 10.0, 15.0])
    def test_parameter_sensitivities_match_analytic(self, sample_curve, x):
        engine = BumpEngine(sample_curve)
        numeric = engine.parameter_sensitivities(lambda c: c.y_value(x))
        np.testing.assert_allclose(numeric, sample_curve.y_value_parameter_sensitivity(x), atol=1e-6)

    def test_forward_differences(self):
        curve = create_flat_curve(0.04)
        engine = BumpEngine(curve)
        numeric = engine.parameter_sensitivities(lambda c: c.y_value(3.0), shift=1e-6, central=False)
        np.testing.assert_allclose(numeric, curve.y_value_parameter_sensitivity(3.0), atol=1e-6)

    def test_parallel_sensitivity_is_one_for_rates(self):
        curve = InterpolatedNodalCurve.of(
            "ZR", [1.0, 2.0, 5.0], [0.03, 0.035, 0.04], interpolator=NaturalCubicSplineInterpolator()
        )
        assert BumpEngine(curve).parallel_sensitivity(lambda c: c.y_value(3.3)) == pytest.approx(1.0)

    def test_invalid_shift(self, sample_curve):
        engine = BumpEngine(sample_curve)
        with pytest.raises(ValidationError):
            engine.parameter_sensitivities(lambda c: c.y_value(1.0), shift=0.0)
        with pytest.raises(ValidationError):
            engine.parallel_sensitivity(lambda c: c.y_value(1.0), shift=-1e-4)

    def test_none_base(self):
        with pytest.raises(ValidationError):
            BumpEngine(None)


class TestSensitivityReport:
    """Tests for curve sensitivity reports."""

    def test_report_columns(self, sample_curve):
        report = curve_sensitivity_report(sample_curve, 3.0)
        assert list(report.columns) == ["label", "analytic", "finite_difference", "difference"]
        assert list(report["label"]) == ["0.25", "0.5", "1", "2", "5", "10"]

    @pytest.mark.parametrize("x", [0.1, 3.0, 12.0])
    def test_report_agrees(self, sample_curve, x):
        report = curve_sensitivity_report(sample_curve, x)
        assert np.max(np.abs(report["difference"])) < 1e-6

    def test_exponential_report_only_boundary_node(self, sample_curve):
        report = curve_sensitivity_report(sample_curve, 12.0)
        nonzero = report.loc[report["analytic"] != 0.0, "label"].tolist()
        assert nonzero == ["10"]
