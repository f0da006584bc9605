import pytest

from decimal import Decimal

from pydantic import ValidationError

from launch_curve.common.enums import CurveShapeType, ThresholdUnit
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.math import decimal_rel_close
from launch_curve.config.settings import (
    LogisticBlendConfig,
    MarketConfig,
    PiecewiseExponentialConfig,
    load_market,
)
from launch_curve.curves.integrator import Integrator


@pytest.fixture
def power_config():
    """
    Slider values for the meme power-law launch, as a UI would post them.
    """
    return {
        "curve": {
            "shape": "threshold_power",
            "total_supply": "7e9",
            "base_price": "1e-9",
            "threshold": "4.83e9",
            "exponent": "4.5",
        },
        "target_raise": "84",
    }


@pytest.fixture
def piecewise_config():
    return {
        "curve": {
            "shape": "piecewise_exponential",
            "total_supply": "7.9e9",
            "threshold_unit": "percent",
            "phase1_price": "1e-8",
            "phase1_threshold": "69",
            "segments": [
                {"threshold": "70", "average_price": "7.7e-8"},
                {"threshold": "80", "average_price": "1.25e-7"},
                {"threshold": "90", "average_price": "1.75e-7"},
                {"threshold": "100", "average_price": "2.33e-7"},
            ],
        },
    }


def test_load_power_market_calibrates(power_config):
    market = load_market(power_config)
    assert market.params.shape_type == CurveShapeType.THRESHOLD_POWER
    assert market.params.amplitude > 0
    assert decimal_rel_close(market.total_raise_at_full_sale(), Decimal("84"), Decimal("1e-9"))


def test_load_power_market_without_target(power_config):
    del power_config["target_raise"]
    power_config["curve"]["amplitude"] = "1e-7"
    market = load_market(power_config)
    assert market.params.amplitude == Decimal("1e-7")


def test_load_piecewise_market(piecewise_config):
    market = load_market(piecewise_config)
    assert market.params.threshold_unit == ThresholdUnit.PERCENT
    assert len(market.params.segments) == 4
    price = market.shape.price(Decimal("0.695"))
    assert Decimal("1e-8") < price < Decimal("7.7e-8")


def test_market_options_are_forwarded(piecewise_config):
    piecewise_config["sold_tokens"] = "1e9"
    piecewise_config["clamp_oversized"] = False
    market = load_market(piecewise_config)
    assert market.sold_tokens == Decimal("1e9")
    assert market.options["clamp_oversized"] is False


def test_quadrature_tolerance_reaches_integrator(power_config):
    power_config["quadrature_tolerance"] = "1e-6"
    config = MarketConfig.model_validate(power_config)
    assert config.integrator().tolerance == Decimal("1e-6")
    assert config.build_market().integrator.tolerance == Decimal("1e-6")


def test_logistic_defaults():
    config = LogisticBlendConfig(
        total_supply=Decimal("7e9"),
        threshold_unit="progress",
        base_price=Decimal("1e-8"),
        amplitude=Decimal("1e-8"),
        threshold=Decimal("0.7"),
    )
    params = config.to_parameters()
    assert params.shape_type == CurveShapeType.LOGISTIC_BLEND
    assert params.smoothing_left == Decimal("0.2")
    assert params.smoothing_right == Decimal("0.01")
    assert params.transition_width == Decimal("0.03")
    assert params.normalized_threshold == Decimal("0.7")


@pytest.mark.parametrize(
    "field, value",
    [
        ("total_supply", "-1"),
        ("exponent", "1"),
        ("base_price", "-1e-9"),
        ("threshold_unit", "basis_points"),
    ]
)
def test_field_constraints(power_config, field, value):
    power_config["curve"][field] = value
    with pytest.raises(ValidationError):
        load_market(power_config)


def test_unknown_shape_is_rejected(power_config):
    power_config["curve"]["shape"] = "linear"
    with pytest.raises(ValidationError):
        load_market(power_config)


def test_piecewise_requires_segments(piecewise_config):
    piecewise_config["curve"]["segments"] = []
    with pytest.raises(ValidationError):
        MarketConfig.model_validate(piecewise_config)


def test_threshold_beyond_supply(power_config):
    power_config["curve"]["threshold"] = "8e9"
    with pytest.raises(CurveConfigError, match="outside the supply range"):
        load_market(power_config)


def test_decreasing_segments(piecewise_config):
    piecewise_config["curve"]["segments"][2]["average_price"] = "1e-7"
    with pytest.raises(CurveConfigError, match="would decrease"):
        load_market(piecewise_config)


def test_piecewise_target_raise_is_rejected(piecewise_config):
    piecewise_config["target_raise"] = "100"
    with pytest.raises(CurveConfigError, match="no amplitude to calibrate"):
        load_market(piecewise_config)


def test_piecewise_config_builds_parameters():
    config = PiecewiseExponentialConfig(
        total_supply=Decimal("100"),
        phase1_price=Decimal("1"),
        phase1_threshold=Decimal("50"),
        segments=[{"threshold": "100", "average_price": "2"}],
        smooth_phase1=True,
    )
    params = config.to_parameters()
    assert params.base_price == Decimal("1")
    assert params.smooth_phase1 is True
    assert params.normalized_phase1_threshold == Decimal("0.5")


def test_default_quadrature_tolerance_matches_integrator(power_config):
    config = MarketConfig.model_validate(power_config)
    assert config.quadrature_tolerance == Integrator().tolerance
