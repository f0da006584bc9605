from decimal import Decimal
from typing import Any, Dict, List

from launch_curve.common.enums import CurveShapeType, OrderSide
from launch_curve.common.math import decimal_rel_close
from launch_curve.common.model import CurveParameters, MarketState, TradeRequest
from launch_curve.curves.shapes.base import CurveShape


class CurveValidator:
    """
    Validator for curve shapes and markets. Performs:
      1) Parameter summaries and soft warnings
      2) Monotonicity sampling (the hard gate used by build_shape)
      3) Boundary tests (negative prices, full-sale consistency)
      4) Scenario tests (a small buy/sell sequence on a scratch copy of the market)

    Every check returns a dict with keys: errors, warnings, info.
    """

    @staticmethod
    def validate_params(curve_params: "CurveParameters") -> Dict[str, Any]:
        """
        Hard domain checks already ran in CurveParameters.__post_init__; this adds
        the soft ones that are legal but usually a mistake.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        shape_type = curve_params.shape_type
        if shape_type in (CurveShapeType.THRESHOLD_POWER, CurveShapeType.LOGISTIC_BLEND):
            if curve_params.amplitude == 0:
                warnings.append(f"{shape_type}: amplitude is 0, the curve is flat at the base price.")
            if curve_params.normalized_threshold >= Decimal("1"):
                warnings.append(f"{shape_type}: threshold is at full supply, the surge region is empty.")

        if shape_type == CurveShapeType.LOGISTIC_BLEND and curve_params.transition_width < Decimal("1e-9"):
            warnings.append("LogisticBlend: transition_width is below 1e-9 and will be clamped.")

        if shape_type == CurveShapeType.PIECEWISE_EXPONENTIAL:
            last = curve_params.normalize(curve_params.segments[-1].threshold)
            if last < Decimal("1"):
                warnings.append("PiecewiseExponential: last segment ends before full supply; terminal price is held.")

        info["param_summary"] = {
            "shape_type": str(shape_type),
            "total_supply": str(curve_params.total_supply),
            "base_price": str(curve_params.base_price),
            "amplitude": str(curve_params.amplitude),
            "threshold": str(curve_params.threshold),
            "threshold_unit": str(curve_params.threshold_unit),
            "num_segments": len(curve_params.segments),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def monotonicity_check(shape: "CurveShape", samples: int = 1000) -> Dict[str, Any]:
        """
        Samples price() at `samples` + 1 evenly spaced points plus every breakpoint,
        and reports an error if any price is negative or lower than its predecessor.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        step = Decimal("1") / Decimal(samples)
        grid = {step * i for i in range(samples)}
        grid.add(Decimal("1"))
        for bp in shape.breakpoints():
            if Decimal("0") <= bp <= Decimal("1"):
                grid.add(bp)

        prev_x = None
        prev_price = None
        for x in sorted(grid):
            price = shape.price(x)
            if price < 0:
                errors.append(f"Price is negative ({price}) at progress {x}.")
                break
            if prev_price is not None and price < prev_price:
                errors.append(
                    f"Price decreases from {prev_price} at progress {prev_x} to {price} at progress {x}."
                )
                break
            prev_x, prev_price = x, price

        info["monotonicity_samples"] = len(grid)
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def boundary_tests(market: "Market") -> Dict[str, Any]:
        """
        Calls a few boundary conditions on the market:
          - spot price at 0 and at full supply
          - quoting the full remaining supply vs the closed interval total
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        shape = market.shape
        price_at_zero = shape.price(Decimal("0"))
        if price_at_zero < 0:
            errors.append("Spot price is negative at progress=0.")
        price_at_full = shape.price(Decimal("1"))
        if price_at_full < price_at_zero:
            errors.append("Spot price at full supply is below the launch price.")

        remaining = market.remaining_supply
        if remaining > 0:
            full_quote = market.quote_buy(remaining)
            expected = market.integrator.integrate(shape, market.progress, Decimal("1"))
            if not decimal_rel_close(full_quote.sol_amount, expected, Decimal("1e-9")):
                errors.append(
                    f"Quote for the remaining supply ({full_quote.sol_amount}) does not match "
                    f"the integral to full sale ({expected})."
                )
            info["remaining_cost"] = str(full_quote.sol_amount)
        else:
            warnings.append("Market is sold out; buy-side boundary tests skipped.")

        info["total_raise_at_full_sale"] = str(market.total_raise_at_full_sale())
        info["boundary_tests_run"] = True
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def scenario_tests(market: "Market") -> Dict[str, Any]:
        """
        Runs a small scenario on a scratch market at the same supply:
          1) buy 1% of total supply
          2) buy for half the cost of step 1
          3) sell everything bought
        Checks costs are non-negative and supply returns to where it started.
        """
        from launch_curve.market.market import Market
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        scratch = Market(
            market.shape,
            MarketState(sold_tokens=market.sold_tokens),
            integrator=market.integrator,
            clamp_oversized=True,
        )
        start_supply = scratch.sold_tokens
        if scratch.is_sold_out:
            warnings.append("Market is sold out; scenario starts with a sell.")
            sell_amount = min(start_supply, scratch.total_supply / Decimal("100"))
            scratch.execute(TradeRequest(OrderSide.SELL, sell_amount))
            start_supply = scratch.sold_tokens

        first = scratch.execute(TradeRequest(OrderSide.BUY, scratch.total_supply / Decimal("100")))
        if first.sol_amount < 0:
            errors.append("buy(1%) => negative cost.")

        bought = first.token_amount
        if first.sol_amount > 0 and not scratch.is_sold_out:
            second = scratch.buy_with_budget(first.sol_amount / Decimal("2"))
            if second.sol_amount > first.sol_amount / Decimal("2"):
                errors.append("buy_with_budget spent more than its budget.")
            bought += second.token_amount

        refund = scratch.execute(TradeRequest(OrderSide.SELL, bought))
        if refund.sol_amount < 0:
            errors.append("sell => negative proceeds.")
        if scratch.sold_tokens != start_supply:
            errors.append(
                f"Supply did not return to {start_supply} after selling what was bought "
                f"(got {scratch.sold_tokens})."
            )

        info["final_supply_after_scenario"] = str(scratch.sold_tokens)
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def run_all_validations(market: "Market") -> Dict[str, Any]:
        """
        Aggregates:
          - param check
          - monotonicity check
          - boundary tests
          - scenario tests
        Returns a dict with keys: errors, warnings, info
        """
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        for check in (
            CurveValidator.validate_params(market.shape.params),
            CurveValidator.monotonicity_check(market.shape),
            CurveValidator.boundary_tests(market),
            CurveValidator.scenario_tests(market),
        ):
            results["errors"].extend(check["errors"])
            results["warnings"].extend(check["warnings"])
            results["info"].update(check["info"])

        return results
