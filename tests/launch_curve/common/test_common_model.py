import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

from launch_curve.common.enums import CurveShapeType, OrderSide, ThresholdUnit
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.model import (
    CurveParameters,
    MarketState,
    PhaseSegment,
    Quote,
    TradeRequest,
)


@pytest.fixture
def phase_segments():
    return [
        PhaseSegment(Decimal("70"), Decimal("7.7e-8")),
        PhaseSegment(Decimal("80"), Decimal("1.25e-7")),
        PhaseSegment(Decimal("90"), Decimal("1.75e-7")),
        PhaseSegment(Decimal("100"), Decimal("2.33e-7")),
    ]


def piecewise_params(segments, /, **overrides):
    fields = dict(
        shape_type=CurveShapeType.PIECEWISE_EXPONENTIAL,
        total_supply=Decimal("7.9e9"),
        base_price=Decimal("1e-8"),
        phase1_threshold=Decimal("69"),
        segments=segments,
        threshold_unit=ThresholdUnit.PERCENT,
    )
    fields.update(overrides)
    return CurveParameters(**fields)


class TestCurveParameters:
    def test_threshold_power_valid(self):
        params = CurveParameters(
            shape_type=CurveShapeType.THRESHOLD_POWER,
            total_supply=Decimal("7e9"),
            base_price=Decimal("1e-9"),
            threshold=Decimal("4.83e9"),
            exponent=Decimal("4.5"),
        )
        assert params.threshold_unit == ThresholdUnit.TOKENS
        assert params.normalized_threshold == Decimal("0.69")

    def test_parameters_are_frozen(self):
        params = CurveParameters(shape_type=CurveShapeType.THRESHOLD_POWER, total_supply=Decimal("100"))
        with pytest.raises(FrozenInstanceError):
            params.amplitude = Decimal("1")

    @pytest.mark.parametrize(
        "overrides, expected_error_msg",
        [
            ({"total_supply": Decimal("0")}, "Total supply must be positive"),
            ({"base_price": Decimal("-1")}, "Base price must be non-negative"),
            ({"amplitude": Decimal("-0.1")}, "Amplitude must be non-negative"),
            ({"exponent": Decimal("1")}, "exponent must be greater than 1"),
            ({"threshold": Decimal("101")}, "outside the supply range"),
        ]
    )
    def test_threshold_power_invalid(self, overrides, expected_error_msg):
        fields = dict(
            shape_type=CurveShapeType.THRESHOLD_POWER,
            total_supply=Decimal("100"),
            threshold=Decimal("50"),
            exponent=Decimal("2"),
        )
        fields.update(overrides)
        with pytest.raises(CurveConfigError, match=expected_error_msg):
            CurveParameters(**fields)

    @pytest.mark.parametrize(
        "overrides, expected_error_msg",
        [
            ({"smoothing_left": Decimal("0")}, "Smoothing coefficients must be positive"),
            ({"smoothing_right": Decimal("-0.01")}, "Smoothing coefficients must be positive"),
            ({"transition_width": Decimal("-0.03")}, "Transition width must be non-negative"),
            ({"threshold": Decimal("1.2")}, "outside the supply range"),
        ]
    )
    def test_logistic_invalid(self, overrides, expected_error_msg):
        fields = dict(
            shape_type=CurveShapeType.LOGISTIC_BLEND,
            total_supply=Decimal("7e9"),
            threshold=Decimal("0.7"),
            threshold_unit=ThresholdUnit.PROGRESS,
        )
        fields.update(overrides)
        with pytest.raises(CurveConfigError, match=expected_error_msg):
            CurveParameters(**fields)

    def test_logistic_zero_width_is_accepted(self):
        params = CurveParameters(
            shape_type=CurveShapeType.LOGISTIC_BLEND,
            total_supply=Decimal("7e9"),
            threshold=Decimal("0.7"),
            transition_width=Decimal("0"),
            threshold_unit=ThresholdUnit.PROGRESS,
        )
        assert params.transition_width == Decimal("0")

    def test_piecewise_valid_and_segments_become_tuple(self, phase_segments):
        params = piecewise_params(phase_segments)
        assert isinstance(params.segments, tuple)
        assert params.normalized_phase1_threshold == Decimal("0.69")
        assert params.normalize(Decimal("100")) == Decimal("1")

    def test_piecewise_decreasing_thresholds_rejected(self, phase_segments):
        phase_segments[1], phase_segments[2] = phase_segments[2], phase_segments[1]
        with pytest.raises(CurveConfigError, match="strictly increasing"):
            piecewise_params(phase_segments)

    def test_piecewise_zero_width_segment_rejected(self, phase_segments):
        phase_segments[1] = PhaseSegment(Decimal("70"), Decimal("1.25e-7"))
        with pytest.raises(CurveConfigError, match="degenerate"):
            piecewise_params(phase_segments)

    def test_piecewise_segment_on_phase1_threshold_rejected(self, phase_segments):
        with pytest.raises(CurveConfigError, match="degenerate"):
            piecewise_params(phase_segments, phase1_threshold=Decimal("70"))

    def test_piecewise_falling_price_rejected(self, phase_segments):
        phase_segments[2] = PhaseSegment(Decimal("90"), Decimal("1e-7"))
        with pytest.raises(CurveConfigError, match="curve would decrease"):
            piecewise_params(phase_segments)

    def test_piecewise_threshold_beyond_supply_rejected(self, phase_segments):
        phase_segments.append(PhaseSegment(Decimal("110"), Decimal("3e-7")))
        with pytest.raises(CurveConfigError, match="outside the supply range"):
            piecewise_params(phase_segments)

    @pytest.mark.parametrize(
        "overrides, expected_error_msg",
        [
            ({"phase1_threshold": None}, "requires a phase-1 threshold"),
            ({"segments": ()}, "at least one phase-2 segment"),
            ({"base_price": Decimal("0")}, "Phase-1 price must be positive"),
            ({"phase1_threshold": Decimal("0")}, "Phase-1 threshold must be positive"),
        ]
    )
    def test_piecewise_missing_pieces(self, phase_segments, overrides, expected_error_msg):
        with pytest.raises(CurveConfigError, match=expected_error_msg):
            piecewise_params(phase_segments, **overrides)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            CurveParameters(shape_type=CurveShapeType.THRESHOLD_POWER, total_supply=Decimal("-5"))


class TestQuote:
    def test_average_price(self):
        quote = Quote(token_amount=Decimal("4"), sol_amount=Decimal("2"), resulting_supply=Decimal("10"))
        assert quote.average_price == Decimal("0.5")

    def test_average_price_of_empty_quote(self):
        quote = Quote(Decimal("0"), Decimal("0"), Decimal("10"))
        assert quote.average_price == Decimal("0")

    def test_quote_is_immutable(self):
        quote = Quote(Decimal("1"), Decimal("1"), Decimal("1"))
        with pytest.raises(FrozenInstanceError):
            quote.sol_amount = Decimal("2")


def test_market_state_defaults():
    state = MarketState()
    assert state.sold_tokens == Decimal("0")
    state.sold_tokens = Decimal("5")
    assert state.sold_tokens == Decimal("5")


def test_trade_request_defaults():
    request = TradeRequest(order_type=OrderSide.BUY)
    assert request.amount == Decimal("0")
    assert request.order_type == OrderSide.BUY


def test_trade_request_carries_only_side_and_amount():
    with pytest.raises(TypeError):
        TradeRequest(OrderSide.SELL, Decimal("1"), "user-1")
