"""Platform fee calculator.

A marketplace keeps a percentage of what the client pays. The same fee
percentage (configured on the project) is applied in two independent
places:

- to the nominal project budget, giving the payable amount of the contract
- to a single milestone's gross amount when it is released, giving the net
  revenue recognized for that payment
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from agency_finance.calculators.money_utils import HUNDRED, ZERO


@dataclass
class FeeBreakdown:
    """Fee deducted from a gross amount and what remains.

    Attributes:
        fee_amount: Amount kept by the platform (None when gross is None)
        net_amount: Gross minus fee (None when gross is None)

    Example:
        >>> FeeBreakdown(fee_amount=Decimal("50"), net_amount=Decimal("450"))
        FeeBreakdown(fee_amount=Decimal('50'), net_amount=Decimal('450'))
    """

    fee_amount: Optional[Decimal]
    net_amount: Optional[Decimal]


def apply_platform_fee(
    gross_amount: Optional[Decimal], fee_percent: Optional[Decimal]
) -> FeeBreakdown:
    """Split a gross amount into platform fee and net amount.

    Args:
        gross_amount: Amount before fees (None propagates to both outputs)
        fee_percent: Fee percentage 0-100; None or 0 means no fee

    Returns:
        FeeBreakdown with fee and net amounts, unrounded

    Example:
        >>> apply_platform_fee(Decimal("500"), Decimal("10"))
        FeeBreakdown(fee_amount=Decimal('50.0'), net_amount=Decimal('450.0'))
        >>> apply_platform_fee(Decimal("500"), None)
        FeeBreakdown(fee_amount=Decimal('0'), net_amount=Decimal('500'))
    """
    if gross_amount is None:
        return FeeBreakdown(fee_amount=None, net_amount=None)

    gross = Decimal(gross_amount)
    if fee_percent:
        fee = gross * (Decimal(fee_percent) / HUNDRED)
    else:
        fee = ZERO
    return FeeBreakdown(fee_amount=fee, net_amount=gross - fee)
