from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from launch_curve.common.enums import CurveShapeType, OrderSide, ThresholdUnit
from launch_curve.common.errors import CurveConfigError


@dataclass(frozen=True)
class PhaseSegment:
    """Right edge of a phase-2 segment and the average price the curve reaches there."""
    threshold: Decimal
    average_price: Decimal


@dataclass(frozen=True)
class CurveParameters:
    """
    Immutable parameters for one curve shape.

    Only the fields relevant to `shape_type` are read:
      - THRESHOLD_POWER: base_price, amplitude, threshold, exponent
      - LOGISTIC_BLEND: base_price, amplitude, threshold, smoothing_left,
        smoothing_right, transition_width
      - PIECEWISE_EXPONENTIAL: base_price (phase-1 average price), phase1_threshold,
        segments, smooth_phase1

    Thresholds are expressed in `threshold_unit` and converted to normalized
    progress with `normalize()`.
    """
    shape_type: CurveShapeType
    total_supply: Decimal
    base_price: Decimal = Decimal("0")
    amplitude: Decimal = Decimal("0")
    threshold: Decimal = Decimal("0")
    exponent: Decimal = Decimal("2")
    smoothing_left: Decimal = Decimal("0.2")
    smoothing_right: Decimal = Decimal("0.01")
    transition_width: Decimal = Decimal("0.03")
    phase1_threshold: Optional[Decimal] = None
    segments: Tuple[PhaseSegment, ...] = ()
    smooth_phase1: bool = False
    threshold_unit: ThresholdUnit = ThresholdUnit.TOKENS

    def __post_init__(self):
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

        if self.total_supply <= Decimal("0"):
            raise CurveConfigError("Total supply must be positive.")
        if self.base_price < Decimal("0"):
            raise CurveConfigError("Base price must be non-negative.")
        if self.amplitude < Decimal("0"):
            raise CurveConfigError("Amplitude must be non-negative.")

        if self.shape_type == CurveShapeType.THRESHOLD_POWER:
            self._check_progress_bound("threshold", self.threshold)
            if self.exponent <= Decimal("1"):
                raise CurveConfigError("Power-law exponent must be greater than 1.")
        elif self.shape_type == CurveShapeType.LOGISTIC_BLEND:
            self._check_progress_bound("threshold", self.threshold)
            if self.smoothing_left <= Decimal("0") or self.smoothing_right <= Decimal("0"):
                raise CurveConfigError("Smoothing coefficients must be positive.")
            if self.transition_width < Decimal("0"):
                raise CurveConfigError("Transition width must be non-negative.")
        elif self.shape_type == CurveShapeType.PIECEWISE_EXPONENTIAL:
            self._validate_phases()
        else:
            raise CurveConfigError(f"Unsupported curve shape {self.shape_type}.")

    def _validate_phases(self):
        if self.base_price <= Decimal("0"):
            raise CurveConfigError("Phase-1 price must be positive.")
        if self.phase1_threshold is None:
            raise CurveConfigError("Piecewise curve requires a phase-1 threshold.")
        if not self.segments:
            raise CurveConfigError("Piecewise curve requires at least one phase-2 segment.")

        self._check_progress_bound("phase1_threshold", self.phase1_threshold)
        if self.phase1_threshold <= Decimal("0"):
            raise CurveConfigError("Phase-1 threshold must be positive.")

        prev_threshold = self.phase1_threshold
        prev_price = self.base_price
        for i, segment in enumerate(self.segments):
            if segment.threshold == prev_threshold:
                raise CurveConfigError(f"Segment {i} is degenerate: zero width at threshold {segment.threshold}.")
            if segment.threshold < prev_threshold:
                raise CurveConfigError(
                    f"Thresholds must be strictly increasing. Segment {i} threshold "
                    f"{segment.threshold} < previous {prev_threshold}"
                )
            self._check_progress_bound(f"segment {i} threshold", segment.threshold)
            if segment.average_price <= Decimal("0"):
                raise CurveConfigError(f"Segment {i} has non-positive average price {segment.average_price}.")
            if segment.average_price < prev_price:
                raise CurveConfigError(
                    f"Segment {i} average price {segment.average_price} is below the previous "
                    f"price {prev_price}; the curve would decrease."
                )
            prev_threshold = segment.threshold
            prev_price = segment.average_price

    def _check_progress_bound(self, name: str, value: Decimal):
        progress = self.normalize(value)
        if progress < Decimal("0") or progress > Decimal("1"):
            raise CurveConfigError(f"{name} {value} is outside the supply range for unit {self.threshold_unit}.")

    def normalize(self, value: Decimal) -> Decimal:
        """Converts a threshold in `threshold_unit` to normalized progress."""
        if self.threshold_unit == ThresholdUnit.TOKENS:
            return value / self.total_supply
        if self.threshold_unit == ThresholdUnit.PERCENT:
            return value / Decimal("100")
        return value

    @property
    def normalized_threshold(self) -> Decimal:
        return self.normalize(self.threshold)

    @property
    def normalized_phase1_threshold(self) -> Decimal:
        return self.normalize(self.phase1_threshold)


@dataclass
class MarketState:
    """Mutable supply state owned by a single Market."""
    sold_tokens: Decimal = Decimal("0")


@dataclass(frozen=True)
class Quote:
    """A priced trade. Produced by quotes and by commits; never mutated."""
    token_amount: Decimal
    sol_amount: Decimal
    resulting_supply: Decimal

    @property
    def average_price(self) -> Decimal:
        if self.token_amount == 0:
            return Decimal("0")
        return self.sol_amount / self.token_amount


@dataclass
class TradeRequest:
    """Represents a discrete purchase or sale request."""
    order_type: OrderSide
    amount: Decimal = Decimal("0")
