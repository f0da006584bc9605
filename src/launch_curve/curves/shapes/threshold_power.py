from decimal import Decimal
from typing import List

from launch_curve.common.enums import CurveShapeType
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.model import CurveParameters
from launch_curve.curves.shapes.base import CurveShape
from launch_curve.curves.helpers.power import PowerCurveHelper as power_helper


class ThresholdPowerShape(CurveShape):
    """
    A flat launch price followed by a power-law surge:
        price(x) = base                          for x <= b
        price(x) = base + amplitude * (x - b)^k  for x > b

    with x and b in normalized progress and k > 1. The integral is closed form,
    so trade costs carry no quadrature error.
    """

    supports_closed_form = True

    def __init__(self, params: CurveParameters):
        if params.shape_type != CurveShapeType.THRESHOLD_POWER:
            raise CurveConfigError(f"ThresholdPowerShape cannot be built from {params.shape_type} parameters.")
        super().__init__(params)
        self._base = params.base_price
        self._amplitude = params.amplitude
        self._threshold = params.normalized_threshold
        self._exponent = params.exponent

    @property
    def threshold(self) -> Decimal:
        return self._threshold

    def price(self, progress: Decimal) -> Decimal:
        return self._base + self._amplitude * power_helper.excess_power(progress, self._threshold, self._exponent)

    def integral(self, start: Decimal, end: Decimal) -> Decimal:
        return power_helper.cost_between(
            start,
            end,
            self._base,
            self._amplitude,
            self._threshold,
            self._exponent,
        )

    def breakpoints(self) -> List[Decimal]:
        return [self._threshold]
