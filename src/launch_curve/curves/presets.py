"""
Ready-made curve configurations for the launch shapes the pricing tool ships with.
"""
from decimal import Decimal

from launch_curve.calibration.calibration import CalibrationHelper
from launch_curve.common.enums import CurveShapeType, ThresholdUnit
from launch_curve.common.model import CurveParameters, PhaseSegment


def meme_power_curve(target_raise: Decimal = Decimal("84")) -> CurveParameters:
    """
    7B supply at a 1e-9 floor until 4.83B tokens (69%), then a k=4.5 power surge
    calibrated so selling out raises `target_raise`.
    """
    params = CurveParameters(
        shape_type=CurveShapeType.THRESHOLD_POWER,
        total_supply=Decimal("7e9"),
        base_price=Decimal("1e-9"),
        threshold=Decimal("4.83e9"),
        exponent=Decimal("4.5"),
        threshold_unit=ThresholdUnit.TOKENS,
    )
    return CalibrationHelper.calibrate(params, target_raise)


def late_surge_power_curve(smoothness: Decimal = Decimal("15")) -> CurveParameters:
    """
    price = base * (1 + ((x - 0.7) / 0.3)^c), i.e. flat for the first 70% and
    doubling by full supply. Higher `smoothness` keeps the curve flatter for longer
    after 70%.
    """
    base = Decimal("1e-8")
    threshold = Decimal("0.7")
    return CurveParameters(
        shape_type=CurveShapeType.THRESHOLD_POWER,
        total_supply=Decimal("7.75e9"),
        base_price=base,
        amplitude=base / (Decimal("1") - threshold) ** smoothness,
        threshold=threshold,
        exponent=smoothness,
        threshold_unit=ThresholdUnit.PROGRESS,
    )


def smooth_logistic_curve() -> CurveParameters:
    """Nearly flat up to 70%, steep afterwards, with a 3% logistic transition."""
    return CurveParameters(
        shape_type=CurveShapeType.LOGISTIC_BLEND,
        total_supply=Decimal("7e9"),
        base_price=Decimal("1e-8"),
        amplitude=Decimal("1e-8"),
        threshold=Decimal("0.7"),
        smoothing_left=Decimal("0.2"),
        smoothing_right=Decimal("0.01"),
        transition_width=Decimal("0.03"),
        threshold_unit=ThresholdUnit.PROGRESS,
    )


def multi_phase_curve(smooth_phase1: bool = False) -> CurveParameters:
    """
    Phase 1 at 1e-8 up to 69%, then four exponential legs reaching
    7.7e-8, 1.25e-7, 1.75e-7 and 2.33e-7 at 70/80/90/100%.
    """
    return CurveParameters(
        shape_type=CurveShapeType.PIECEWISE_EXPONENTIAL,
        total_supply=Decimal("7.9e9"),
        base_price=Decimal("1e-8"),
        phase1_threshold=Decimal("69"),
        segments=(
            PhaseSegment(Decimal("70"), Decimal("7.7e-8")),
            PhaseSegment(Decimal("80"), Decimal("1.25e-7")),
            PhaseSegment(Decimal("90"), Decimal("1.75e-7")),
            PhaseSegment(Decimal("100"), Decimal("2.33e-7")),
        ),
        smooth_phase1=smooth_phase1,
        threshold_unit=ThresholdUnit.PERCENT,
    )
