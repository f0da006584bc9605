from decimal import Decimal
from typing import Union


def decimal_approx_equal(a: Decimal, b: Decimal, tol: Decimal = Decimal("1e-12")) -> bool:
    return abs(a - b) < tol


def decimal_rel_close(a: Decimal, b: Decimal, rel_tol: Decimal = Decimal("1e-9")) -> bool:
    """True when a and b agree to rel_tol relative to the larger magnitude (exact match for zeros)."""
    scale = max(abs(a), abs(b))
    if scale == 0:
        return True
    return abs(a - b) <= rel_tol * scale


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """
    Converts a UI-supplied number to Decimal.
    Floats go through str() so 1e-9 becomes Decimal('1E-9') rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def logistic(t: Decimal) -> Decimal:
    """
    1 / (1 + e^(-t)), evaluated through e^(-|t|) so large |t| underflows to 0
    instead of overflowing.
    """
    if t >= 0:
        return Decimal("1") / (Decimal("1") + (-t).exp())
    e = t.exp()
    return e / (Decimal("1") + e)
