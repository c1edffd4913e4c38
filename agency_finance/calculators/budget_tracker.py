"""Budget tracking against a project's reference budget.

The reference budget is the single base-currency amount that actual cost is
compared against. It is resolved by priority:

1. the project's working budget, converted to base currency
2. the fee-adjusted payable amount, converted to base currency
3. the raw nominal budget, converted at the resolved exchange rate

Every conversion uses the project's resolved exchange rate (custom rate,
then the rate table, then the fallback rate).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from agency_finance.calculators.currency import CurrencyNormalizer
from agency_finance.calculators.money_utils import ZERO, safe_percent
from agency_finance.calculators.platform_fee import apply_platform_fee
from agency_finance.models.project import Project


@dataclass
class ProjectBudgetView:
    """Budget-level financial configuration of a project, unrounded.

    Attributes:
        budget: Nominal budget in project currency
        currency: Project currency
        platform_fee_percent: Configured fee percentage
        platform_fee_amount: Fee on the nominal budget (project currency)
        payable_amount: Budget minus fee (project currency)
        payable_amount_base: Payable amount in base currency
        working_budget: Working budget in project currency
        working_budget_base: Working budget in base currency
        exchange_rate: Resolved rate to the base currency
    """

    budget: Optional[Decimal]
    currency: str
    platform_fee_percent: Optional[Decimal]
    platform_fee_amount: Optional[Decimal]
    payable_amount: Optional[Decimal]
    payable_amount_base: Optional[Decimal]
    working_budget: Optional[Decimal]
    working_budget_base: Optional[Decimal]
    exchange_rate: Decimal

    @property
    def budget_base(self) -> Optional[Decimal]:
        """Raw nominal budget converted at the resolved rate."""
        if self.budget is None:
            return None
        return self.budget * self.exchange_rate

    @property
    def reference_budget(self) -> Optional[Decimal]:
        """First available of working budget, payable amount, raw budget."""
        if self.working_budget_base is not None:
            return self.working_budget_base
        if self.payable_amount_base is not None:
            return self.payable_amount_base
        return self.budget_base


@dataclass
class BudgetConsumption:
    """How much of the reference budget has been consumed.

    Attributes:
        reference_budget: Base-currency budget compared against (or None)
        consumed_percent: total_cost / reference_budget * 100, 0 if unusable
        remaining: reference_budget - total_cost, 0 if no reference
        is_over_budget: True only when a reference exists and is exceeded
    """

    reference_budget: Optional[Decimal]
    consumed_percent: Decimal
    remaining: Decimal
    is_over_budget: bool


class BudgetTracker:
    """Compares aggregated cost against a project's reference budget.

    Example:
        >>> tracker = BudgetTracker(CurrencyNormalizer())
        >>> project = Project(id="p", name="P", currency="USD",
        ...                   budget=Decimal("1000"), client_id="c")
        >>> tracker.consumption(Decimal("28000"), project).consumed_percent
        Decimal('10.0')
    """

    def __init__(self, normalizer: CurrencyNormalizer):
        self.normalizer = normalizer

    def project_budget_view(self, project: Project) -> ProjectBudgetView:
        """Derive payable amount, working budget and rate for a project."""
        rate = self.normalizer.resolve_project_rate(project)
        fee = apply_platform_fee(project.budget, project.platform_fee_percent)

        payable_base = None
        if fee.net_amount is not None:
            payable_base = fee.net_amount * rate

        working_base = None
        if project.working_budget is not None:
            working_base = project.working_budget * rate

        return ProjectBudgetView(
            budget=project.budget,
            currency=project.currency,
            platform_fee_percent=project.platform_fee_percent,
            platform_fee_amount=fee.fee_amount,
            payable_amount=fee.net_amount,
            payable_amount_base=payable_base,
            working_budget=project.working_budget,
            working_budget_base=working_base,
            exchange_rate=rate,
        )

    def consumption(self, total_cost: Decimal, project: Project) -> BudgetConsumption:
        """Measure cost against the project's reference budget.

        Args:
            total_cost: Aggregated cost in base currency
            project: Project whose budget configuration applies

        Returns:
            BudgetConsumption, unrounded
        """
        reference = self.project_budget_view(project).reference_budget
        return self.consumption_against(total_cost, reference)

    @staticmethod
    def consumption_against(
        total_cost: Decimal, reference_budget: Optional[Decimal]
    ) -> BudgetConsumption:
        """Measure cost against an already resolved reference budget."""
        return BudgetConsumption(
            reference_budget=reference_budget,
            consumed_percent=safe_percent(total_cost, reference_budget),
            remaining=(
                reference_budget - total_cost if reference_budget is not None else ZERO
            ),
            is_over_budget=reference_budget is not None and total_cost > reference_budget,
        )
