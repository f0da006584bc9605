from decimal import Decimal


class ExponentialCurveHelper:
    """
    A helper class for piecewise-exponential segment logic, including:
      - Growth-rate derivation between two anchor prices
      - Spot price inside a segment
      - Closed-form integral over part of a segment
    """

    @staticmethod
    def validate_segment_prices(start_price: Decimal, end_price: Decimal, width: Decimal):
        """
        Validates that:
          - both anchor prices > 0 (ln is undefined otherwise)
          - end_price >= start_price (a falling segment breaks monotonicity)
          - width > 0
        Raises ValueError if invalid.
        """
        if start_price <= Decimal("0") or end_price <= Decimal("0"):
            raise ValueError("Exponential segment requires positive anchor prices.")
        if end_price < start_price:
            raise ValueError("Decreasing exponential segments are not supported.")
        if width <= Decimal("0"):
            raise ValueError("Exponential segment requires a positive width.")

    @staticmethod
    def growth_rate(start_price: Decimal, end_price: Decimal, width: Decimal) -> Decimal:
        """
        r such that start_price * r^width == end_price:
            r = (end_price / start_price)^(1 / width)
        """
        ExponentialCurveHelper.validate_segment_prices(start_price, end_price, width)
        if end_price == start_price:
            return Decimal("1")
        return (end_price / start_price) ** (Decimal("1") / width)

    @staticmethod
    def segment_price(start_price: Decimal, rate: Decimal, segment_start: Decimal, x: Decimal) -> Decimal:
        """price(x) = start_price * r^(x - segment_start)"""
        if rate == 1:
            return start_price
        return start_price * rate ** (x - segment_start)

    @staticmethod
    def segment_integral(
        start_price: Decimal,
        rate: Decimal,
        segment_start: Decimal,
        xa: Decimal,
        xb: Decimal,
    ) -> Decimal:
        """
        Computes the integral from xa..xb of start_price * r^(x - segment_start) dx.
        If r != 1:
          area = (A / ln r) * [ r^xb - r^xa ],  A = start_price * r^(-segment_start)
        evaluated with exponents shifted by segment_start so r^x never overflows.
        If r == 1:
          area = start_price * (xb - xa)  (constant price)
        """
        if xb <= xa:
            return Decimal("0")
        if rate == 1:
            return start_price * (xb - xa)
        upper = rate ** (xb - segment_start)
        lower = rate ** (xa - segment_start)
        return start_price * (upper - lower) / rate.ln()
