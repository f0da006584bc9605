import logging
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from launch_curve.calibration.calibration import CalibrationHelper
from launch_curve.common.enums import CurveShapeType, ThresholdUnit
from launch_curve.common.model import CurveParameters, MarketState, PhaseSegment
from launch_curve.curves.integrator import Integrator
from launch_curve.market.market import Market

logger = logging.getLogger(__name__)


class CurveConfigBase(BaseModel):
    total_supply: Decimal = Field(gt=0, description="Total token supply")
    threshold_unit: Literal["tokens", "percent", "progress"] = Field(
        "tokens", description="Unit every threshold in this config is expressed in"
    )

    def _unit(self) -> ThresholdUnit:
        return ThresholdUnit.from_str(self.threshold_unit)


class ThresholdPowerConfig(CurveConfigBase):
    shape: Literal["threshold_power"] = "threshold_power"
    base_price: Decimal = Field(ge=0, description="Flat price until the threshold")
    amplitude: Decimal = Field(Decimal("0"), ge=0, description="Scale of the power-law surge")
    threshold: Decimal = Field(ge=0, description="Where the surge starts")
    exponent: Decimal = Field(gt=1, description="Power-law exponent k")

    def to_parameters(self) -> CurveParameters:
        return CurveParameters(
            shape_type=CurveShapeType.THRESHOLD_POWER,
            total_supply=self.total_supply,
            base_price=self.base_price,
            amplitude=self.amplitude,
            threshold=self.threshold,
            exponent=self.exponent,
            threshold_unit=self._unit(),
        )


class LogisticBlendConfig(CurveConfigBase):
    shape: Literal["logistic_blend"] = "logistic_blend"
    base_price: Decimal = Field(ge=0, description="Price floor")
    amplitude: Decimal = Field(ge=0, description="Curve amplitude a")
    threshold: Decimal = Field(ge=0, description="Inflection point b")
    smoothing_left: Decimal = Field(Decimal("0.2"), gt=0, description="Smoothness before b; larger is flatter")
    smoothing_right: Decimal = Field(Decimal("0.01"), gt=0, description="Smoothness after b; smaller is steeper")
    transition_width: Decimal = Field(Decimal("0.03"), ge=0, description="Width of the blend around b")

    def to_parameters(self) -> CurveParameters:
        return CurveParameters(
            shape_type=CurveShapeType.LOGISTIC_BLEND,
            total_supply=self.total_supply,
            base_price=self.base_price,
            amplitude=self.amplitude,
            threshold=self.threshold,
            smoothing_left=self.smoothing_left,
            smoothing_right=self.smoothing_right,
            transition_width=self.transition_width,
            threshold_unit=self._unit(),
        )


class PhaseSegmentConfig(BaseModel):
    threshold: Decimal = Field(gt=0, description="Right edge of the segment")
    average_price: Decimal = Field(gt=0, description="Price reached at the right edge")


class PiecewiseExponentialConfig(CurveConfigBase):
    shape: Literal["piecewise_exponential"] = "piecewise_exponential"
    phase1_price: Decimal = Field(gt=0, description="Phase-1 average price")
    phase1_threshold: Decimal = Field(gt=0, description="End of phase 1")
    segments: List[PhaseSegmentConfig] = Field(min_length=1, description="Phase-2 segments in ascending order")
    smooth_phase1: bool = Field(False, description="Grow exponentially through phase 1 instead of staying flat")

    def to_parameters(self) -> CurveParameters:
        return CurveParameters(
            shape_type=CurveShapeType.PIECEWISE_EXPONENTIAL,
            total_supply=self.total_supply,
            base_price=self.phase1_price,
            phase1_threshold=self.phase1_threshold,
            segments=tuple(PhaseSegment(s.threshold, s.average_price) for s in self.segments),
            smooth_phase1=self.smooth_phase1,
            threshold_unit=self._unit(),
        )


CurveConfig = Union[ThresholdPowerConfig, LogisticBlendConfig, PiecewiseExponentialConfig]


class MarketConfig(BaseModel):
    curve: CurveConfig = Field(discriminator="shape", description="Curve shape and its parameters")
    sold_tokens: Decimal = Field(Decimal("0"), ge=0, description="Tokens already sold")
    target_raise: Optional[Decimal] = Field(
        None, gt=0, description="If set, the amplitude is calibrated so a full sale raises this amount"
    )
    clamp_oversized: bool = Field(True, description="Clamp over-sized trades instead of rejecting them")
    quadrature_tolerance: Decimal = Field(Decimal("1e-12"), gt=0, description="Relative quadrature tolerance")

    def integrator(self) -> Integrator:
        return Integrator(tolerance=self.quadrature_tolerance)

    def to_parameters(self) -> CurveParameters:
        params = self.curve.to_parameters()
        if self.target_raise is not None:
            params = CalibrationHelper.calibrate(params, self.target_raise, self.integrator())
        return params

    def build_market(self) -> Market:
        market = Market.from_parameters(
            self.to_parameters(),
            MarketState(sold_tokens=self.sold_tokens),
            self.integrator(),
            clamp_oversized=self.clamp_oversized,
        )
        logger.debug("Built %s market at %s sold tokens", self.curve.shape, self.sold_tokens)
        return market


def load_market(config: Dict[str, Any]) -> Market:
    """Validates a raw config mapping (e.g. UI slider values) and builds the Market."""
    return MarketConfig.model_validate(config).build_market()
