"""Calculator modules for the finance engine."""

from agency_finance.calculators.budget_tracker import (
    BudgetConsumption,
    BudgetTracker,
    ProjectBudgetView,
)
from agency_finance.calculators.compensation import WORKING_HOURS_PER_MONTH, hourly_rate
from agency_finance.calculators.currency import (
    BASE_CURRENCY,
    DEFAULT_RATES,
    FALLBACK_EXCHANGE_RATE,
    CurrencyNormalizer,
    CurrencyRateProvider,
    StaticRateProvider,
)
from agency_finance.calculators.money_utils import (
    round_2,
    round_money,
    safe_percent,
    safe_ratio,
    seconds_to_hours,
)
from agency_finance.calculators.platform_fee import FeeBreakdown, apply_platform_fee

__all__ = [
    # budget_tracker
    "BudgetConsumption",
    "BudgetTracker",
    "ProjectBudgetView",
    # compensation
    "WORKING_HOURS_PER_MONTH",
    "hourly_rate",
    # currency
    "BASE_CURRENCY",
    "DEFAULT_RATES",
    "FALLBACK_EXCHANGE_RATE",
    "CurrencyNormalizer",
    "CurrencyRateProvider",
    "StaticRateProvider",
    # money_utils
    "round_2",
    "round_money",
    "safe_percent",
    "safe_ratio",
    "seconds_to_hours",
    # platform_fee
    "FeeBreakdown",
    "apply_platform_fee",
]
