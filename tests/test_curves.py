"""
Unit tests for curves module: bundle, interpolators and nodal curves.
"""

import math
import numpy as np
import pytest

from curvekit.conventions import CompoundingConvention, ValueType
from curvekit.curves import (
    DataBundle,
    InterpolatedNodalCurve,
    LinearInterpolator,
    LogLinearInterpolator,
    NaturalCubicSplineInterpolator,
    ExponentialExtrapolator,
    LinearExtrapolator,
    create_flat_curve,
    create_interpolator,
)
from curvekit.errors import DomainError, NumericDomainError, ValidationError
from curvekit.perturbation import LabelledShifts, ParallelShift, ParameterMetadata, PointShift


INTERPOLATORS = [LinearInterpolator(), LogLinearInterpolator(), NaturalCubicSplineInterpolator()]


@pytest.fixture
def bundle():
    """Discount-factor-like knots."""
    return DataBundle.of([0.5, 1.0, 2.0, 5.0, 10.0], [0.98, 0.96, 0.92, 0.80, 0.62])


def central_difference(f, x, h=1e-6):
    return (f(x + h) - f(x - h)) / (2 * h)


class TestDataBundle:
    """Tests for DataBundle."""

    def test_sorts_keys_with_values(self):
        b = DataBundle.of([3.0, 1.0, 2.0], [30.0, 10.0, 20.0])
        assert b.keys == (1.0, 2.0, 3.0)
        assert b.values == (10.0, 20.0, 30.0)

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValidationError):
            DataBundle.of([1.0, 1.0], [1.0, 2.0])

    def test_length_mismatch_rejected(self):
        with pytest.raises(ValidationError):
            DataBundle.of([1.0, 2.0], [1.0])

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            DataBundle.of([], [])

    def test_nan_key_rejected(self):
        with pytest.raises(ValidationError):
            DataBundle.of([1.0, float("nan")], [1.0, 2.0])

    def test_structural_equality(self):
        a = DataBundle.of([1.0, 2.0], [3.0, 4.0])
        b = DataBundle.from_pairs([(2.0, 4.0), (1.0, 3.0)])
        assert a == b
        assert hash(a) == hash(b)

    def test_with_value_is_copy(self, bundle):
        bumped = bundle.with_value(2, 0.5)
        assert bundle.values[2] == 0.92
        assert bumped.values[2] == 0.5

    def test_with_value_bad_index(self, bundle):
        with pytest.raises(ValidationError):
            bundle.with_value(5, 1.0)

    def test_lower_bound_index(self, bundle):
        assert bundle.lower_bound_index(0.5) == 0
        assert bundle.lower_bound_index(1.5) == 1
        assert bundle.lower_bound_index(2.0) == 2
        assert bundle.lower_bound_index(10.0) == 3


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.mark.parametrize("interp", INTERPOLATORS, ids=lambda i: i.name)
    def test_reproduces_knots(self, interp, bundle):
        for k, v in bundle:
            assert interp.value_at(bundle, k) == pytest.approx(v, abs=1e-12)

    @pytest.mark.parametrize("interp", INTERPOLATORS, ids=lambda i: i.name)
    def test_derivative_matches_finite_difference(self, interp, bundle):
        for x in [0.7, 1.5, 3.3, 7.0]:
            fd = central_difference(lambda t: interp.value_at(bundle, t), x)
            assert interp.first_derivative_at(bundle, x) == pytest.approx(fd, rel=1e-6)

    @pytest.mark.parametrize("interp", INTERPOLATORS, ids=lambda i: i.name)
    def test_node_sensitivities_match_bump(self, interp, bundle):
        eps = 1e-7
        for x in [0.7, 1.5, 3.3, 7.0]:
            sens = interp.node_sensitivities_at(bundle, x)
            for i in range(bundle.size):
                up = interp.value_at(bundle.with_value(i, bundle.values[i] + eps), x)
                down = interp.value_at(bundle.with_value(i, bundle.values[i] - eps), x)
                assert sens[i] == pytest.approx((up - down) / (2 * eps), abs=1e-6)

    @pytest.mark.parametrize("interp", INTERPOLATORS, ids=lambda i: i.name)
    def test_derivative_sensitivities_match_bump(self, interp, bundle):
        eps = 1e-7
        x = 3.3
        sens = interp.first_derivative_node_sensitivities_at(bundle, x)
        for i in range(bundle.size):
            up = interp.first_derivative_at(bundle.with_value(i, bundle.values[i] + eps), x)
            down = interp.first_derivative_at(bundle.with_value(i, bundle.values[i] - eps), x)
            assert sens[i] == pytest.approx((up - down) / (2 * eps), abs=1e-5)

    @pytest.mark.parametrize("interp", INTERPOLATORS, ids=lambda i: i.name)
    def test_outside_range_is_domain_error(self, interp, bundle):
        with pytest.raises(DomainError):
            interp.value_at(bundle, 0.25)
        with pytest.raises(DomainError):
            interp.first_derivative_at(bundle, 10.5)
        with pytest.raises(DomainError):
            interp.node_sensitivities_at(bundle, 11.0)

    def test_linear_weights(self, bundle):
        sens = LinearInterpolator().node_sensitivities_at(bundle, 1.25)
        np.testing.assert_allclose(sens, [0.0, 0.75, 0.25, 0.0, 0.0])

    def test_log_linear_is_geometric(self):
        b = DataBundle.of([1.0, 2.0], [1.0, 4.0])
        assert LogLinearInterpolator().value_at(b, 1.5) == pytest.approx(2.0)

    def test_log_linear_needs_positive_values(self):
        b = DataBundle.of([1.0, 2.0], [1.0, -1.0])
        with pytest.raises(NumericDomainError):
            LogLinearInterpolator().value_at(b, 1.5)

    def test_spline_with_two_knots_is_linear(self):
        b = DataBundle.of([0.0, 2.0], [1.0, 3.0])
        spline = NaturalCubicSplineInterpolator()
        assert spline.value_at(b, 0.5) == pytest.approx(1.5)
        np.testing.assert_allclose(spline.node_sensitivities_at(b, 0.5), [0.75, 0.25])

    def test_spline_natural_end_conditions(self, bundle):
        spline = NaturalCubicSplineInterpolator()
        assert spline.second_derivative_at(bundle, 0.5) == pytest.approx(0.0, abs=1e-12)
        assert spline.second_derivative_at(bundle, 10.0) == pytest.approx(0.0, abs=1e-12)

    def test_spline_shares_grid_between_bundles(self, bundle):
        spline = NaturalCubicSplineInterpolator()
        first = spline.value_at(bundle, 3.3)
        bumped = bundle.with_value(2, bundle.values[2] + 0.01)
        sens = spline.node_sensitivities_at(bundle, 3.3)
        assert spline.value_at(bumped, 3.3) == pytest.approx(first + 0.01 * sens[2], abs=1e-12)
        assert spline.value_at(bundle, 3.3) == first

    def test_single_knot(self):
        b = DataBundle.of([1.0], [0.03])
        interp = LinearInterpolator()
        assert interp.value_at(b, 1.0) == 0.03
        assert interp.first_derivative_at(b, 1.0) == 0.0
        np.testing.assert_allclose(interp.node_sensitivities_at(b, 1.0), [1.0])

    def test_factory(self):
        assert isinstance(create_interpolator("linear"), LinearInterpolator)
        assert isinstance(create_interpolator("Log-Linear"), LogLinearInterpolator)
        assert isinstance(create_interpolator("cubic_spline"), NaturalCubicSplineInterpolator)
        with pytest.raises(ValidationError):
            create_interpolator("akima")


class TestInterpolatedNodalCurve:
    """Tests for InterpolatedNodalCurve."""

    @pytest.fixture
    def curve(self, bundle):
        return InterpolatedNodalCurve(
            name="USD-DSC",
            bundle=bundle,
            interpolator=LogLinearInterpolator(),
            extrapolator_left=ExponentialExtrapolator(),
            extrapolator_right=ExponentialExtrapolator(),
            value_type=ValueType.DISCOUNT_FACTOR,
        )

    def test_interior_and_exterior_dispatch(self, curve, bundle):
        assert curve.y_value(3.0) == pytest.approx(LogLinearInterpolator().value_at(bundle, 3.0))
        assert curve.y_value(12.0) == pytest.approx(ExponentialExtrapolator().value_at(bundle, 12.0))
        assert curve(0.25) == pytest.approx(math.exp(math.log(0.98) / 0.5 * 0.25))

    def test_sensitivities_have_curve_length(self, curve):
        for x in [0.1, 3.0, 15.0]:
            assert len(curve.y_value_parameter_sensitivity(x)) == curve.parameter_count

    def test_first_derivative_outside(self, curve):
        x = 12.0
        fd = central_difference(curve.y_value, x)
        assert curve.first_derivative(x) == pytest.approx(fd, rel=1e-6)

    def test_default_metadata_labels(self, curve):
        assert curve.get_parameter_metadata(0).label == "0.5"
        assert curve.get_parameter_metadata(4).label == "10"

    def test_metadata_length_checked(self, bundle):
        with pytest.raises(ValidationError):
            InterpolatedNodalCurve("X", bundle, parameter_metadata=(ParameterMetadata("a"),))

    def test_with_parameter_is_copy_on_write(self, curve):
        bumped = curve.with_parameter(2, 0.9)
        assert curve.get_parameter(2) == 0.92
        assert bumped.get_parameter(2) == 0.9
        for i in [0, 1, 3, 4]:
            assert bumped.get_parameter(i) == curve.get_parameter(i)
        assert bumped.interpolator == curve.interpolator
        assert bumped.name == curve.name

    def test_with_parameter_bad_index(self, curve):
        with pytest.raises(ValidationError):
            curve.with_parameter(5, 1.0)
        with pytest.raises(ValidationError):
            curve.get_parameter(-1)

    def test_with_perturbation(self, curve):
        shifted = curve.with_perturbation(ParallelShift(0.01))
        np.testing.assert_allclose(shifted.y_values, curve.y_values + 0.01)
        point = curve.with_perturbation(PointShift(1, -0.01))
        assert point.get_parameter(1) == pytest.approx(0.95)
        assert point.get_parameter(0) == curve.get_parameter(0)

    def test_labelled_shift(self, curve):
        bumped = curve.with_perturbation(LabelledShifts.of({"2": 0.001, "missing": 1.0}))
        assert bumped.get_parameter(2) == pytest.approx(0.921)
        assert bumped.get_parameter(3) == curve.get_parameter(3)

    def test_equality_and_hash(self, curve):
        same = curve.with_y_values(list(curve.y_values))
        assert same == curve
        assert hash(same) == hash(curve)

    def test_discount_factor_and_zero_rate(self, curve):
        assert curve.discount_factor(2.0) == pytest.approx(0.92)
        assert curve.zero_rate(2.0) == pytest.approx(-math.log(0.92) / 2.0)
        annual = curve.zero_rate(2.0, CompoundingConvention.ANNUAL)
        assert (1 + annual) ** 2 == pytest.approx(1 / 0.92)

    def test_forward_rate(self, curve):
        fwd = curve.forward_rate(1.0, 2.0)
        assert fwd == pytest.approx(0.96 / 0.92 - 1)
        with pytest.raises(ValidationError):
            curve.forward_rate(2.0, 1.0)

    def test_to_frame(self, curve):
        df = curve.to_frame()
        assert list(df.columns) == ["label", "x", "y"]
        assert len(df) == 5

    def test_unsorted_x_keeps_labels_on_their_knots(self):
        curve = InterpolatedNodalCurve.of(
            "C",
            [2.0, 1.0],
            [20.0, 10.0],
            parameter_metadata=[ParameterMetadata("2Y"), ParameterMetadata("1Y")],
        )
        assert curve.get_parameter(0) == 10.0
        assert curve.get_parameter_metadata(0).label == "1Y"
        assert curve.get_parameter_metadata(1).label == "2Y"
        bumped = curve.with_perturbation(LabelledShifts.of({"2Y": 1.0}))
        assert bumped.y_value(2.0) == pytest.approx(21.0)
        assert bumped.y_value(1.0) == pytest.approx(10.0)
        assert list(curve.to_frame()["label"]) == ["1Y", "2Y"]

    def test_linear_extrapolator_follows_spline_tangent(self, bundle):
        curve = InterpolatedNodalCurve.of(
            "SPLINE",
            bundle.keys,
            bundle.values,
            interpolator=NaturalCubicSplineInterpolator(),
            extrapolator_right=LinearExtrapolator(),
        )
        slope = curve.first_derivative(10.0)
        assert curve.y_value(12.0) == pytest.approx(0.62 + 2.0 * slope)
        eps = 1e-7
        sens = curve.y_value_parameter_sensitivity(12.0)
        for i in range(curve.parameter_count):
            up = curve.with_parameter(i, curve.get_parameter(i) + eps).y_value(12.0)
            down = curve.with_parameter(i, curve.get_parameter(i) - eps).y_value(12.0)
            assert sens[i] == pytest.approx((up - down) / (2 * eps), abs=1e-5)


class TestFlatCurve:
    """Tests for create_flat_curve."""

    def test_flat_zero_rate(self):
        curve = create_flat_curve(0.05)
        assert curve.value_type == ValueType.ZERO_RATE
        for t in [0.1, 1.0, 7.0, 40.0]:
            assert curve.zero_rate(t) == pytest.approx(0.05)
        assert curve.discount_factor(2.0) == pytest.approx(math.exp(-0.10))

    def test_short_max_tenor(self):
        curve = create_flat_curve(0.03, max_tenor_years=1.0)
        assert curve.x_values[-1] == 1.0
        assert curve.parameter_count == 3
