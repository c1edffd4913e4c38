"""Compensation model: monthly salary to hourly cost rate.

The divisor assumes a Monday-Friday 8-hour schedule plus a 4-hour
Saturday (44 hours a week) over 4 weeks. It is the single conversion point
between compensation and time-based cost.
"""

from decimal import Decimal
from typing import Optional

from agency_finance.calculators.money_utils import ZERO

HOURS_PER_WEEKDAY = 8
WEEKDAYS = 5
SATURDAY_HOURS = 4
WEEKS_PER_MONTH = 4

WORKING_HOURS_PER_MONTH = Decimal(
    (HOURS_PER_WEEKDAY * WEEKDAYS + SATURDAY_HOURS) * WEEKS_PER_MONTH
)


def hourly_rate(monthly_salary: Optional[Decimal]) -> Decimal:
    """Derive an hourly cost rate from a monthly salary.

    Workers without a salary (None or 0) cost nothing.

    Args:
        monthly_salary: Salary in base currency per month

    Returns:
        Base currency per hour, unrounded

    Example:
        >>> hourly_rate(Decimal("176"))
        Decimal('1')
        >>> hourly_rate(None)
        Decimal('0')
    """
    if not monthly_salary:
        return ZERO
    return Decimal(monthly_salary) / WORKING_HOURS_PER_MONTH
