import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from launch_curve.common.enums import CurveShapeType
from launch_curve.common.errors import CurveConfigError
from launch_curve.common.model import CurveParameters
from launch_curve.curves.helpers.power import PowerCurveHelper as power_helper
from launch_curve.curves.integrator import Integrator
from launch_curve.curves.shapes.logistic_blend import LogisticBlendShape

logger = logging.getLogger(__name__)


class CalibrationHelper:
    """
    Solves for a curve amplitude from a target total raise at full sale.

    Both supported families are `base + amplitude * g(x)`, so the full-sale raise
        R = base * S + amplitude * S * integral_0^1 g(x) dx
    is linear in the amplitude and a single division solves it.
    """

    @staticmethod
    def power_tail_integral(threshold: Decimal, exponent: Decimal) -> Decimal:
        """integral over [b, 1] of (x - b)^k = (1 - b)^(k+1) / (k+1)"""
        if exponent + Decimal("1") <= 0:
            raise CurveConfigError(f"Exponent {exponent} gives a non-positive k + 1.")
        return power_helper.tail_integral(threshold, exponent)

    @staticmethod
    def solve_linear_amplitude(
        target_raise: Decimal,
        base_price: Decimal,
        total_supply: Decimal,
        unit_integral: Decimal,
    ) -> Decimal:
        """
        amplitude = (R - P0 * S) / (unit_integral * S)

        :raises CurveConfigError: the denominator is not positive, or R is below
            the floor revenue P0 * S every sale of the whole supply collects.
        """
        denominator = unit_integral * total_supply
        if denominator <= 0:
            raise CurveConfigError(
                "Calibration denominator is not positive; the threshold/exponent choice leaves no surge region."
            )
        floor_revenue = base_price * total_supply
        if target_raise < floor_revenue:
            raise CurveConfigError(
                f"Target raise {target_raise} is below the floor revenue {floor_revenue} of the base price."
            )
        return (target_raise - floor_revenue) / denominator

    @staticmethod
    def solve_power_amplitude(
        target_raise: Decimal,
        base_price: Decimal,
        total_supply: Decimal,
        threshold: Decimal,
        exponent: Decimal,
    ) -> Decimal:
        """
        Closed-form amplitude for price = P0 + amplitude * (x - b)^k above b.
        `threshold` is normalized progress.
        """
        tail = CalibrationHelper.power_tail_integral(threshold, exponent)
        return CalibrationHelper.solve_linear_amplitude(target_raise, base_price, total_supply, tail)

    @staticmethod
    def solve_logistic_amplitude(
        params: CurveParameters,
        target_raise: Decimal,
        integrator: Optional[Integrator] = None,
    ) -> Decimal:
        """
        Integrates the unit-amplitude logistic shape factor once and solves the same
        linear equation as the power family.
        """
        integrator = integrator or Integrator()
        unit_shape = LogisticBlendShape(replace(params, base_price=Decimal("0"), amplitude=Decimal("1")))
        # integrate() scales by S; solve_linear_amplitude wants the unscaled area
        unit_integral = integrator.integrate(unit_shape, Decimal("0"), Decimal("1")) / params.total_supply
        return CalibrationHelper.solve_linear_amplitude(
            target_raise, params.base_price, params.total_supply, unit_integral
        )

    @staticmethod
    def calibrate(
        params: CurveParameters,
        target_raise: Decimal,
        integrator: Optional[Integrator] = None,
    ) -> CurveParameters:
        """
        Returns a copy of `params` whose amplitude makes the full-sale raise equal
        `target_raise`.
        """
        if params.shape_type == CurveShapeType.THRESHOLD_POWER:
            amplitude = CalibrationHelper.solve_power_amplitude(
                target_raise,
                params.base_price,
                params.total_supply,
                params.normalized_threshold,
                params.exponent,
            )
        elif params.shape_type == CurveShapeType.LOGISTIC_BLEND:
            amplitude = CalibrationHelper.solve_logistic_amplitude(params, target_raise, integrator)
        else:
            raise CurveConfigError(f"{params.shape_type} curves have no amplitude to calibrate.")

        logger.debug("Calibrated %s amplitude %s for target raise %s", params.shape_type, amplitude, target_raise)
        return replace(params, amplitude=amplitude)
