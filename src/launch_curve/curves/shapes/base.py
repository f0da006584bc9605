from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Tuple

from launch_curve.common.model import CurveParameters


class CurveShape(ABC):
    """Abstract base class defining the interface for any curve shape implementation."""

    # True when integral() is implemented analytically; the Integrator falls back to quadrature otherwise.
    supports_closed_form = False

    def __init__(self, params: 'CurveParameters'):
        """
        Initializes the shape with validated parameters.

        :param params: CurveParameters - defines curve configuration
        """
        self._params = params

    @property
    def params(self) -> 'CurveParameters':
        """Returns the curve parameters."""
        return self._params

    @property
    def total_supply(self) -> Decimal:
        return self._params.total_supply

    @abstractmethod
    def price(self, progress: Decimal) -> Decimal:
        """
        Returns the unit price at a given normalized progress.

        :param progress: Decimal - tokens sold / total supply, in [0, 1].
        :return: Decimal: The price at given progress.
        """
        pass

    def integral(self, start: Decimal, end: Decimal) -> Decimal:
        """
        Closed-form integral of price() over normalized progress [start, end], start <= end.
        Not scaled by total supply.
        """
        raise NotImplementedError(f"{type(self).__name__} has no closed-form integral.")

    def breakpoints(self) -> List[Decimal]:
        """Progress values where the formula changes branch (thresholds)."""
        return []

    def price_at_supply(self, supply: Decimal) -> Decimal:
        return self.price(supply / self.total_supply)

    def sample(self, points: int = 101) -> List[Tuple[Decimal, Decimal]]:
        """
        Evenly spaced (progress, price) pairs over [0, 1], endpoints included.
        Used by chart collaborators to plot the curve.
        """
        if points < 2:
            raise ValueError("At least two sample points are required.")
        step = Decimal("1") / Decimal(points - 1)
        samples = []
        for i in range(points):
            progress = Decimal("1") if i == points - 1 else step * i
            samples.append((progress, self.price(progress)))
        return samples
