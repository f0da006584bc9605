import pytest

from decimal import Decimal

from launch_curve.common.enums import CurveShapeType, ThresholdUnit
from launch_curve.common.math import decimal_rel_close
from launch_curve.curves import presets
from launch_curve.curves.shapes.factory import build_shape


def test_meme_power_curve_is_calibrated():
    params = presets.meme_power_curve()
    assert params.shape_type == CurveShapeType.THRESHOLD_POWER
    assert params.normalized_threshold == Decimal("0.69")
    assert params.amplitude > 0

    shape = build_shape(params)
    raised = shape.integral(Decimal("0"), Decimal("1")) * params.total_supply
    assert decimal_rel_close(raised, Decimal("84"), Decimal("1e-9"))


def test_meme_power_curve_custom_target():
    low = presets.meme_power_curve(Decimal("50"))
    high = presets.meme_power_curve(Decimal("100"))
    assert low.amplitude < high.amplitude


def test_late_surge_doubles_by_full_supply():
    shape = build_shape(presets.late_surge_power_curve())
    assert shape.price(Decimal("0.7")) == Decimal("1e-8")
    assert decimal_rel_close(shape.price(Decimal("1")), Decimal("2e-8"), Decimal("1e-12"))


@pytest.mark.parametrize("smoothness", [Decimal("2"), Decimal("5"), Decimal("15")])
def test_late_surge_smoothness_keeps_endpoints(smoothness):
    shape = build_shape(presets.late_surge_power_curve(smoothness))
    assert decimal_rel_close(shape.price(Decimal("1")), Decimal("2e-8"), Decimal("1e-12"))


def test_late_surge_higher_smoothness_is_flatter_midway():
    gentle = build_shape(presets.late_surge_power_curve(Decimal("15")))
    quick = build_shape(presets.late_surge_power_curve(Decimal("2")))
    assert gentle.price(Decimal("0.85")) < quick.price(Decimal("0.85"))


def test_smooth_logistic_curve():
    params = presets.smooth_logistic_curve()
    assert params.threshold_unit == ThresholdUnit.PROGRESS
    shape = build_shape(params)
    assert shape.price(Decimal("0")) < shape.price(Decimal("0.7")) < shape.price(Decimal("1"))


@pytest.mark.parametrize("smooth_phase1", [False, True])
def test_multi_phase_curve_reaches_final_price(smooth_phase1):
    params = presets.multi_phase_curve(smooth_phase1)
    assert params.threshold_unit == ThresholdUnit.PERCENT
    assert params.normalized_phase1_threshold == Decimal("0.69")
    shape = build_shape(params)
    assert decimal_rel_close(shape.price(Decimal("1")), Decimal("2.33e-7"), Decimal("1e-12"))
