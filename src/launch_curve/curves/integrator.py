from decimal import Decimal

from launch_curve.curves.shapes.base import CurveShape


class Integrator:
    """
    Integrates a CurveShape over an interval of normalized progress and scales the
    area by total supply, converting price-per-progress into a currency amount.

    Results are signed: integrate(shape, a, b) == -integrate(shape, b, a).

    Strategy:
      - shapes with supports_closed_form use their analytic integral()
      - everything else uses the midpoint rule, doubling the number of
        sub-intervals and Richardson-extrapolating each pair of midpoint sums,
        until two consecutive extrapolated estimates agree within `tolerance`
        (relative, or absolute when the estimate is 0), up to `max_steps`
    """

    def __init__(
        self,
        tolerance: Decimal = Decimal("1e-12"),
        initial_steps: int = 64,
        max_steps: int = 2 ** 16,
    ):
        if tolerance <= 0:
            raise ValueError("Quadrature tolerance must be positive.")
        if initial_steps < 1 or max_steps < initial_steps:
            raise ValueError("Quadrature step bounds must satisfy 1 <= initial_steps <= max_steps.")
        self.tolerance = tolerance
        self.initial_steps = initial_steps
        self.max_steps = max_steps

    def integrate(self, shape: CurveShape, progress_from: Decimal, progress_to: Decimal) -> Decimal:
        for progress in (progress_from, progress_to):
            if progress < 0 or progress > 1:
                raise ValueError(f"Progress {progress} is outside [0, 1].")

        if progress_from == progress_to:
            return Decimal("0")
        sign = Decimal("1")
        start, end = progress_from, progress_to
        if end < start:
            start, end = end, start
            sign = Decimal("-1")

        if shape.supports_closed_form:
            area = shape.integral(start, end)
        else:
            area = self.quadrature(shape, start, end)
        return sign * area * shape.total_supply

    def quadrature(self, shape: CurveShape, start: Decimal, end: Decimal) -> Decimal:
        """Unscaled integral of shape.price over [start, end] by extrapolated midpoint sums."""
        steps = self.initial_steps
        coarse = self.midpoint_sum(shape, start, end, steps)
        estimate = None
        while steps < self.max_steps:
            steps *= 2
            fine = self.midpoint_sum(shape, start, end, steps)
            refined = self.richardson(coarse, fine)
            if estimate is not None and self._converged(estimate, refined):
                return refined
            estimate, coarse = refined, fine
        return coarse if estimate is None else estimate

    def _converged(self, previous: Decimal, current: Decimal) -> bool:
        scale = abs(current)
        if scale == 0:
            return abs(current - previous) <= self.tolerance
        return abs(current - previous) <= self.tolerance * scale

    @staticmethod
    def richardson(coarse: Decimal, fine: Decimal) -> Decimal:
        """
        Cancels the h^2 error term of the midpoint rule:
            (4 * M(2n) - M(n)) / 3
        """
        return (Decimal("4") * fine - coarse) / Decimal("3")

    @staticmethod
    def midpoint_sum(shape: CurveShape, start: Decimal, end: Decimal, steps: int) -> Decimal:
        dx = (end - start) / Decimal(steps)
        half = Decimal("0.5")
        total = Decimal("0")
        for i in range(steps):
            total += shape.price(start + dx * (i + half))
        return total * dx
