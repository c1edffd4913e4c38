"""Low-level numeric utilities for the finance engine.

This module provides:
- Converting logged seconds to decimal hours
- Rounding money to whole units and hours to 2 decimal places
- Guarded ratio computation

Rounding is applied only where a value leaves the engine; intermediate
accumulation keeps full Decimal precision.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

SECONDS_PER_HOUR = Decimal("3600")

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
Q0 = Decimal("1")
Q2 = Decimal("0.01")


def seconds_to_hours(seconds: Optional[int]) -> Decimal:
    """Convert a logged duration in seconds to unrounded decimal hours.

    Args:
        seconds: Duration in seconds (None counts as zero)

    Returns:
        Decimal hours

    Example:
        >>> seconds_to_hours(5400)
        Decimal('1.5')
    """
    if not seconds:
        return ZERO
    return Decimal(seconds) / SECONDS_PER_HOUR


def round_money(value: Decimal) -> Decimal:
    """Round a monetary value to the nearest whole unit.

    Example:
        >>> round_money(Decimal("1234.5"))
        Decimal('1235')
    """
    return Decimal(value).quantize(Q0, rounding=ROUND_HALF_UP)


def round_optional_money(value: Optional[Decimal]) -> Optional[Decimal]:
    """Round a monetary value, passing None through."""
    return None if value is None else round_money(value)


def round_2(value: Decimal) -> Decimal:
    """Round hours, percentages and ratios to 2 decimal places.

    Example:
        >>> round_2(Decimal("10") / Decimal("3"))
        Decimal('3.33')
    """
    return Decimal(value).quantize(Q2, rounding=ROUND_HALF_UP)


def round_optional_2(value: Optional[Decimal]) -> Optional[Decimal]:
    """Round to 2 decimal places, passing None through."""
    return None if value is None else round_2(value)


def safe_ratio(numerator: Decimal, denominator: Optional[Decimal]) -> Decimal:
    """Divide with a guarded denominator.

    Args:
        numerator: Dividend
        denominator: Divisor; None, zero or negative yields zero

    Returns:
        numerator / denominator, or 0 when the denominator is unusable

    Example:
        >>> safe_ratio(Decimal("50"), Decimal("200"))
        Decimal('0.25')
        >>> safe_ratio(Decimal("50"), Decimal("0"))
        Decimal('0')
    """
    if denominator is None or denominator <= ZERO:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def safe_percent(numerator: Decimal, denominator: Optional[Decimal]) -> Decimal:
    """Percentage with a guarded denominator (0 when unusable)."""
    return safe_ratio(numerator, denominator) * HUNDRED
