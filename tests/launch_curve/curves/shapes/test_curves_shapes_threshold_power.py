import pytest

from decimal import Decimal

from launch_curve.common.enums import CurveShapeType, ThresholdUnit
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.math import decimal_approx_equal
from launch_curve.common.model import CurveParameters
from launch_curve.curves.shapes.threshold_power import ThresholdPowerShape


@pytest.fixture
def power_shape():
    """
    base=1, amplitude=3, b=50% of a 100-token supply, k=2.
    """
    params = CurveParameters(
        shape_type=CurveShapeType.THRESHOLD_POWER,
        total_supply=Decimal("100"),
        base_price=Decimal("1"),
        amplitude=Decimal("3"),
        threshold=Decimal("50"),
        exponent=Decimal("2"),
    )
    return ThresholdPowerShape(params)


@pytest.mark.parametrize(
    "progress, expected",
    [
        (Decimal("0"), Decimal("1")),
        (Decimal("0.3"), Decimal("1")),
        (Decimal("0.5"), Decimal("1")),      # exactly at the threshold => flat price
        (Decimal("0.7"), Decimal("1.12")),
        (Decimal("1"), Decimal("1.75")),
    ]
)
def test_price(power_shape, progress, expected):
    assert decimal_approx_equal(power_shape.price(progress), expected)


def test_threshold_is_normalized(power_shape):
    assert power_shape.threshold == Decimal("0.5")
    assert power_shape.breakpoints() == [Decimal("0.5")]


def test_price_at_supply(power_shape):
    assert power_shape.price_at_supply(Decimal("70")) == power_shape.price(Decimal("0.7"))


def test_closed_form_integral(power_shape):
    assert power_shape.supports_closed_form is True
    assert decimal_approx_equal(power_shape.integral(Decimal("0.25"), Decimal("1")), Decimal("0.875"))


def test_sample_spacing(power_shape):
    samples = power_shape.sample(5)
    assert [p for p, _ in samples] == [
        Decimal("0"), Decimal("0.25"), Decimal("0.5"), Decimal("0.75"), Decimal("1"),
    ]
    assert samples[-1][1] == power_shape.price(Decimal("1"))


def test_sample_requires_two_points(power_shape):
    with pytest.raises(ValueError, match="At least two sample points"):
        power_shape.sample(1)


def test_wrong_parameter_family_rejected():
    params = CurveParameters(
        shape_type=CurveShapeType.LOGISTIC_BLEND,
        total_supply=Decimal("100"),
        threshold=Decimal("0.5"),
        threshold_unit=ThresholdUnit.PROGRESS,
    )
    with pytest.raises(CurveConfigError, match="cannot be built from LOGISTIC_BLEND"):
        ThresholdPowerShape(params)
