from decimal import Decimal


class PowerCurveHelper:
    """A helper class for the threshold power-law: price(x) = base + amplitude * max(0, x - b)^k."""

    @staticmethod
    def excess_power(x: Decimal, threshold: Decimal, exponent: Decimal) -> Decimal:
        """(x - b)^k above the threshold, 0 at or below it."""
        if x <= threshold:
            return Decimal("0")
        return (x - threshold) ** exponent

    @staticmethod
    def cost_between(
        start: Decimal,
        end: Decimal,
        base: Decimal,
        amplitude: Decimal,
        threshold: Decimal,
        exponent: Decimal,
    ) -> Decimal:
        """
        Computes the integral of the power-law price function from 'start' to 'end':
            cost = base*(end - start) + amplitude/(k+1) * [(end-b)^(k+1) - (start-b)^(k+1)]
        where both (x - b) terms are clamped at 0, so the flat region below b only
        contributes base*(end - start).
        """
        if end <= start:
            return Decimal("0")
        k1 = exponent + Decimal("1")
        upper = PowerCurveHelper.excess_power(end, threshold, k1)
        lower = PowerCurveHelper.excess_power(start, threshold, k1)
        return base * (end - start) + (amplitude / k1) * (upper - lower)

    @staticmethod
    def tail_integral(threshold: Decimal, exponent: Decimal) -> Decimal:
        """
        Definite integral of (x - b)^k over [b, 1]:
            (1 - b)^(k+1) / (k+1)
        """
        k1 = exponent + Decimal("1")
        if threshold >= Decimal("1"):
            return Decimal("0")
        return (Decimal("1") - threshold) ** k1 / k1
