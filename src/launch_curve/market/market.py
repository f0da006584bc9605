import logging
from dataclasses import replace
from decimal import ROUND_DOWN, Decimal
from typing import List, Optional, Tuple

from launch_curve.common.enums import OrderSide
from launch_curve.common.errors import (
    CurveConfigError,
    InfeasibleTradeError,
    InvalidAmountError,
    TradeError,
)
from launch_curve.common.math import to_decimal
from launch_curve.common.model import CurveParameters, MarketState, Quote, TradeRequest
from launch_curve.curves.integrator import Integrator
from launch_curve.curves.shapes.base import CurveShape
from launch_curve.curves.shapes.factory import build_shape

logger = logging.getLogger(__name__)


class Market:
    """
    Owns the sold-token supply of one bonding curve and prices trades against it.

    Quotes (quote_buy, quote_sell, buy_for_budget) never touch state. Commits
    (buy, sell, buy_with_budget, execute) price the trade with the matching quote
    and then advance sold_tokens in one step.

    The market is Active while sold_tokens < total_supply and SoldOut at
    total_supply; sells from SoldOut return it to Active.
    """

    def __init__(
        self,
        shape: CurveShape,
        state: Optional[MarketState] = None,
        integrator: Optional[Integrator] = None,
        **kwargs
    ):
        """
        :param shape: validated CurveShape (see build_shape)
        :param state: starting MarketState (copied; the market owns its own), or None => nothing sold yet
        :param integrator: Integrator to price trades with, or None => defaults
        :param kwargs: advanced options such as:
          - allow_buy, allow_sell
          - clamp_oversized (bool) clamp over-sized trades/budgets instead of raising
          - token_resolution: bisection bracket width for buy_for_budget; budget
            fills are rounded down to a tenth of its leading decimal place
          - max_bisection_iterations
        """
        self._shape = shape
        self._state = replace(state) if state is not None else MarketState()
        self.integrator = integrator or Integrator()

        self.options = {
            "allow_buy": True,
            "allow_sell": True,
            "clamp_oversized": True,
            "token_resolution": None,
            "max_bisection_iterations": 200,
        }
        for k, v in kwargs.items():
            if k in self.options:
                self.options[k] = v
            else:
                if not hasattr(self, "custom_options"):
                    self.custom_options = {}
                self.custom_options[k] = v

        if self.options["token_resolution"] is None:
            self.options["token_resolution"] = self.total_supply * Decimal("1e-9")
        self.options["token_resolution"] = to_decimal(self.options["token_resolution"])
        if self.options["token_resolution"] <= 0:
            raise CurveConfigError("token_resolution must be positive.")
        self._token_quantum = Decimal("1").scaleb(self.options["token_resolution"].adjusted() - 1)

        sold = self._state.sold_tokens
        if sold < 0 or sold > self.total_supply:
            raise CurveConfigError(f"Sold tokens {sold} outside [0, {self.total_supply}].")

    @classmethod
    def from_parameters(
        cls,
        params: CurveParameters,
        state: Optional[MarketState] = None,
        integrator: Optional[Integrator] = None,
        **kwargs
    ) -> "Market":
        return cls(build_shape(params), state, integrator, **kwargs)

    @property
    def shape(self) -> CurveShape:
        return self._shape

    @property
    def params(self) -> CurveParameters:
        return self._shape.params

    @property
    def total_supply(self) -> Decimal:
        return self._shape.total_supply

    @property
    def sold_tokens(self) -> Decimal:
        return self._state.sold_tokens

    @property
    def remaining_supply(self) -> Decimal:
        return self.total_supply - self._state.sold_tokens

    @property
    def progress(self) -> Decimal:
        return self._progress_of(self._state.sold_tokens)

    @property
    def is_sold_out(self) -> bool:
        return self._state.sold_tokens >= self.total_supply

    def _progress_of(self, supply: Decimal) -> Decimal:
        if supply >= self.total_supply:
            return Decimal("1")
        return supply / self.total_supply

    @property
    def token_quantum(self) -> Decimal:
        """Grid that budget fills are rounded down to, so supply sums stay exact."""
        return self._token_quantum

    def _amount_between(self, supply_from: Decimal, supply_to: Decimal) -> Decimal:
        return self.integrator.integrate(self._shape, self._progress_of(supply_from), self._progress_of(supply_to))

    def _clamp(self, tokens: Decimal, available: Decimal, side: OrderSide) -> Decimal:
        if tokens <= 0:
            raise InvalidAmountError(f"{side} amount must be positive, got {tokens}.")
        if tokens > available:
            if not self.options["clamp_oversized"]:
                raise InfeasibleTradeError(
                    f"Requested {side} of {tokens} tokens exceeds the {available} available."
                )
            return available
        return tokens

    def spot_price(self, supply: Optional[Decimal] = None) -> Decimal:
        """Unit price at `supply` (defaults to the current sold supply)."""
        if supply is None:
            supply = self._state.sold_tokens
        return self._shape.price(self._progress_of(to_decimal(supply)))

    def quote_buy(self, tokens) -> Quote:
        """
        Prices buying `tokens` from the current supply without committing.
        Amounts above the remaining supply are clamped (or rejected when
        clamp_oversized is off).
        """
        sold = self._state.sold_tokens
        remaining = self.remaining_supply
        clamped = self._clamp(to_decimal(tokens), remaining, OrderSide.BUY)
        if clamped == 0:
            return Quote(Decimal("0"), Decimal("0"), sold)

        resulting = self.total_supply if clamped == remaining else sold + clamped
        cost = self._amount_between(sold, resulting)
        return Quote(clamped, cost, resulting)

    def quote_sell(self, tokens) -> Quote:
        """
        Prices selling `tokens` back into the curve without committing.
        Amounts above the sold supply are clamped (or rejected when
        clamp_oversized is off).
        """
        sold = self._state.sold_tokens
        clamped = self._clamp(to_decimal(tokens), sold, OrderSide.SELL)
        if clamped == 0:
            return Quote(Decimal("0"), Decimal("0"), sold)

        resulting = Decimal("0") if clamped == sold else sold - clamped
        proceeds = self._amount_between(resulting, sold)
        return Quote(clamped, proceeds, resulting)

    def buy(self, tokens) -> Quote:
        if not self.options["allow_buy"]:
            raise TradeError("Buys are disabled on this market.")
        quote = self.quote_buy(tokens)
        self._commit(quote, OrderSide.BUY)
        return quote

    def sell(self, tokens) -> Quote:
        if not self.options["allow_sell"]:
            raise TradeError("Sells are disabled on this market.")
        quote = self.quote_sell(tokens)
        self._commit(quote, OrderSide.SELL)
        return quote

    def buy_for_budget(self, sol_budget) -> Quote:
        """
        Inverts cost -> tokens: the largest token amount whose cost does not exceed
        `sol_budget`, found by bisection over [0, remaining supply]. Bisection stops
        once the bracket is narrower than token_resolution (or after
        max_bisection_iterations halvings). Midpoints are rounded down to
        token_quantum.

        The returned quote's sol_amount is the actual cost, always <= sol_budget.
        """
        budget = to_decimal(sol_budget)
        if budget <= 0:
            raise InvalidAmountError(f"Budget must be positive, got {budget}.")

        sold = self._state.sold_tokens
        remaining = self.remaining_supply
        if remaining <= 0:
            if not self.options["clamp_oversized"]:
                raise InfeasibleTradeError("Market is sold out; no tokens left to buy.")
            return Quote(Decimal("0"), Decimal("0"), sold)

        full = self.quote_buy(remaining)
        if full.sol_amount <= budget:
            if full.sol_amount < budget and not self.options["clamp_oversized"]:
                raise InfeasibleTradeError(
                    f"Budget {budget} exceeds the {full.sol_amount} cost of the remaining supply."
                )
            return full

        low = Decimal("0")
        high = remaining
        low_cost = Decimal("0")
        resolution = self.options["token_resolution"]
        iterations = 0
        while high - low > resolution and iterations < self.options["max_bisection_iterations"]:
            mid = ((low + high) / Decimal("2")).quantize(self._token_quantum, rounding=ROUND_DOWN)
            cost = self._amount_between(sold, sold + mid)
            if cost > budget:
                high = mid
            else:
                low = mid
                low_cost = cost
            iterations += 1

        return Quote(low, low_cost, sold + low)

    def buy_with_budget(self, sol_budget) -> Quote:
        """Commits buy_for_budget: spends at most `sol_budget`."""
        if not self.options["allow_buy"]:
            raise TradeError("Buys are disabled on this market.")
        quote = self.buy_for_budget(sol_budget)
        self._commit(quote, OrderSide.BUY)
        return quote

    def execute(self, request: TradeRequest) -> Quote:
        """Dispatches a TradeRequest to buy or sell."""
        if request.order_type == OrderSide.BUY:
            return self.buy(request.amount)
        elif request.order_type == OrderSide.SELL:
            return self.sell(request.amount)
        raise TradeError(f"Unsupported order side {request.order_type}.")

    def total_raise_at_full_sale(self) -> Decimal:
        """Currency raised by selling the whole supply from zero."""
        return self.integrator.integrate(self._shape, Decimal("0"), Decimal("1"))

    def curve_points(self, points: int = 101) -> List[Tuple[Decimal, Decimal]]:
        return self._shape.sample(points)

    def _commit(self, quote: Quote, side: OrderSide):
        self._state.sold_tokens = quote.resulting_supply
        logger.debug(
            "%s %s tokens for %s; sold supply now %s",
            side, quote.token_amount, quote.sol_amount, quote.resulting_supply,
        )
