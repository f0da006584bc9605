from bisect import bisect_left
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from launch_curve.common.enums import CurveShapeType
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.model import CurveParameters
from launch_curve.curves.shapes.base import CurveShape
from launch_curve.curves.helpers.exponential import ExponentialCurveHelper as exponential_helper


@dataclass(frozen=True)
class ExponentialSegment:
    """
    One closed-right interval (start, end] of normalized progress priced as
    start_price * rate^(x - start), capped at end_price.
    """
    start: Decimal
    end: Decimal
    start_price: Decimal
    end_price: Decimal
    rate: Decimal

    def price(self, x: Decimal) -> Decimal:
        return min(exponential_helper.segment_price(self.start_price, self.rate, self.start, x), self.end_price)

    def integral(self, xa: Decimal, xb: Decimal) -> Decimal:
        return exponential_helper.segment_integral(self.start_price, self.rate, self.start, xa, xb)


class PiecewiseExponentialShape(CurveShape):
    """
    A multi-phase curve:
      - Phase 1, [0, phase1_threshold]: flat at the phase-1 average price, or, with
        smooth_phase1, growing exponentially from it to the first phase-2 price.
      - Phase 2: one exponential segment per PhaseSegment. Each segment starts from
        the curve's price at its left edge and reaches the configured average price
        at its right edge.
      - Past the last threshold the terminal price is held constant.

    A progress value exactly on a threshold belongs to the segment ending there.
    """

    supports_closed_form = True

    def __init__(self, params: CurveParameters):
        if params.shape_type != CurveShapeType.PIECEWISE_EXPONENTIAL:
            raise CurveConfigError(
                f"PiecewiseExponentialShape cannot be built from {params.shape_type} parameters."
            )
        super().__init__(params)
        self._segments = self._build_segments(params)
        self._ends = [segment.end for segment in self._segments]

    @staticmethod
    def _build_segments(params: CurveParameters) -> List[ExponentialSegment]:
        phase1_end = params.normalized_phase1_threshold
        phase1_price = params.base_price
        first_target = params.segments[0].average_price

        try:
            if params.smooth_phase1:
                phase1_target = first_target
                phase1_rate = exponential_helper.growth_rate(phase1_price, first_target, phase1_end)
            else:
                phase1_target = phase1_price
                phase1_rate = Decimal("1")
            segments = [ExponentialSegment(Decimal("0"), phase1_end, phase1_price, phase1_target, phase1_rate)]

            prev_end = phase1_end
            prev_price = phase1_target
            for phase in params.segments:
                end = params.normalize(phase.threshold)
                rate = exponential_helper.growth_rate(prev_price, phase.average_price, end - prev_end)
                segments.append(ExponentialSegment(prev_end, end, prev_price, phase.average_price, rate))
                prev_end = end
                prev_price = phase.average_price
        except ValueError as e:
            raise CurveConfigError(str(e)) from e

        if prev_end < Decimal("1"):
            segments.append(ExponentialSegment(prev_end, Decimal("1"), prev_price, prev_price, Decimal("1")))
        return segments

    @property
    def segments(self) -> List[ExponentialSegment]:
        return list(self._segments)

    def _segment_index(self, progress: Decimal) -> int:
        idx = bisect_left(self._ends, progress)
        return min(idx, len(self._segments) - 1)

    def price(self, progress: Decimal) -> Decimal:
        if progress <= Decimal("0"):
            return self._segments[0].start_price
        segment = self._segments[self._segment_index(progress)]
        if progress > segment.end:
            progress = segment.end
        return segment.price(progress)

    def integral(self, start: Decimal, end: Decimal) -> Decimal:
        """
        Sums the closed-form integral of every segment overlapped by [start, end].
        """
        total = Decimal("0")
        if end <= start:
            return total
        for segment in self._segments[self._segment_index(start):]:
            if segment.start >= end:
                break
            xa = max(start, segment.start)
            xb = min(end, segment.end)
            total += segment.integral(xa, xb)
        return total

    def breakpoints(self) -> List[Decimal]:
        return list(self._ends)
