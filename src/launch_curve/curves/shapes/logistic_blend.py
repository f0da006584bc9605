from decimal import Decimal
from typing import List

from launch_curve.common.enums import CurveShapeType
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.math import logistic
from launch_curve.common.model import CurveParameters
from launch_curve.curves.shapes.base import CurveShape

# Lower clamp on the transition width.
MIN_TRANSITION_WIDTH = Decimal("1e-9")


class LogisticBlendShape(CurveShape):
    """
    A curve that stays nearly flat before the inflection point b and turns steep after it:

        t    = (x - b) / max(w, 1e-9)
        c(x) = c_left + (c_right - c_left) * logistic(t)
        price(x) = base + amplitude * ((x - b) / sqrt(c(x) + (x - b)^2) + 1)

    c_left controls how gentle the approach to b is (larger => flatter), c_right how
    sharp the rise after b is (smaller => steeper), and w the width of the blend
    between the two. There is no closed-form antiderivative; the Integrator uses
    quadrature.
    """

    def __init__(self, params: CurveParameters):
        if params.shape_type != CurveShapeType.LOGISTIC_BLEND:
            raise CurveConfigError(f"LogisticBlendShape cannot be built from {params.shape_type} parameters.")
        super().__init__(params)
        self._base = params.base_price
        self._amplitude = params.amplitude
        self._threshold = params.normalized_threshold
        self._c_left = params.smoothing_left
        self._c_right = params.smoothing_right
        self._width = max(params.transition_width, MIN_TRANSITION_WIDTH)

    @property
    def threshold(self) -> Decimal:
        return self._threshold

    def smoothing_at(self, progress: Decimal) -> Decimal:
        """The blended smoothing coefficient c(x)."""
        blend = logistic((progress - self._threshold) / self._width)
        return self._c_left + (self._c_right - self._c_left) * blend

    def shape_factor(self, progress: Decimal) -> Decimal:
        """The unit-amplitude part of the price, in [0, 2]."""
        dx = progress - self._threshold
        c = self.smoothing_at(progress)
        return dx / (c + dx * dx).sqrt() + Decimal("1")

    def price(self, progress: Decimal) -> Decimal:
        return self._base + self._amplitude * self.shape_factor(progress)

    def breakpoints(self) -> List[Decimal]:
        return [self._threshold]
