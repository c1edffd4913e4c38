"""Milestone classification by payment status.

Revenue is recognized from a milestone's payment status only, never from
its workflow status:
- RELEASED milestones are realised revenue
- CANCELLED milestones are excluded from both released and pending
- everything else is pending
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from agency_finance.calculators.currency import CurrencyNormalizer
from agency_finance.calculators.money_utils import ZERO
from agency_finance.models.milestone import Milestone, PaymentStatus
from agency_finance.models.project import Project

logger = logging.getLogger(__name__)


@dataclass
class MilestoneSummary:
    """Released and pending milestones with their summed amounts.

    Attributes:
        released: Milestones with payment status RELEASED
        pending: Milestones neither released nor cancelled
        released_amount: Sum of released amounts
        pending_amount: Sum of pending amounts
        total_amount: Sum over every milestone, cancelled included
        total: Number of milestones classified
    """

    released: List[Milestone] = field(default_factory=list)
    pending: List[Milestone] = field(default_factory=list)
    released_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    total: int = 0

    @property
    def released_count(self) -> int:
        return len(self.released)

    @property
    def pending_count(self) -> int:
        return len(self.pending)


def classify_milestones(
    milestones: Iterable[Milestone],
    normalizer: Optional[CurrencyNormalizer] = None,
    project: Optional[Project] = None,
) -> MilestoneSummary:
    """Split milestones into released and pending and sum their amounts.

    Args:
        milestones: Milestones to classify
        normalizer: When given, amounts are converted to base currency
        project: Owning project, whose resolved rate converts amounts
            expressed in the project currency

    Returns:
        MilestoneSummary with unrounded amounts

    Example:
        >>> summary = classify_milestones([released_1000, pending_500])
        >>> summary.released_amount, summary.pending_amount, summary.total_amount
        (Decimal('1000'), Decimal('500'), Decimal('1500'))
    """
    summary = MilestoneSummary()

    for milestone in milestones:
        amount = milestone.amount
        if normalizer is not None:
            amount = normalizer.milestone_to_base(milestone, project)

        summary.total += 1
        summary.total_amount += amount

        if milestone.payment_status == PaymentStatus.RELEASED:
            summary.released.append(milestone)
            summary.released_amount += amount
        elif milestone.payment_status.is_pending:
            summary.pending.append(milestone)
            summary.pending_amount += amount

    logger.debug(
        f"Classified {summary.total} milestones: "
        f"{summary.released_count} released, {summary.pending_count} pending"
    )
    return summary
