from launch_curve.common.enums import CurveShapeType
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.model import CurveParameters
from launch_curve.curves.shapes.base import CurveShape
from launch_curve.curves.shapes.logistic_blend import LogisticBlendShape
from launch_curve.curves.shapes.piecewise_exponential import PiecewiseExponentialShape
from launch_curve.curves.shapes.threshold_power import ThresholdPowerShape
from launch_curve.validation.curve_validator import CurveValidator


SHAPES = {
    CurveShapeType.THRESHOLD_POWER: ThresholdPowerShape,
    CurveShapeType.LOGISTIC_BLEND: LogisticBlendShape,
    CurveShapeType.PIECEWISE_EXPONENTIAL: PiecewiseExponentialShape,
}


def build_shape(params: CurveParameters, check_monotonic: bool = True) -> CurveShape:
    """
    Builds the CurveShape for `params.shape_type` and rejects it if sampled prices
    decrease or go negative anywhere on [0, 1].

    :raises CurveConfigError: unknown shape type or a non-monotonic parameter set
    """
    shape_cls = SHAPES.get(params.shape_type)
    if shape_cls is None:
        raise CurveConfigError(f"No curve shape registered for {params.shape_type}.")

    shape = shape_cls(params)
    if check_monotonic:
        result = CurveValidator.monotonicity_check(shape)
        if result["errors"]:
            raise CurveConfigError("; ".join(result["errors"]))
    return shape
