"""Monthly revenue and cost trend.

This module buckets realised revenue and labour cost into a trailing series
of calendar months. Each month is computed from its own store queries, so
months share no state and can be queried concurrently.
"""

import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

import pandas as pd

from agency_finance.aggregators.cost_aggregator import CostAggregator
from agency_finance.calculators.currency import CurrencyNormalizer
from agency_finance.calculators.money_utils import ZERO, round_2, round_money
from agency_finance.models.milestone import Milestone

if TYPE_CHECKING:
    from agency_finance.services.finance_store import InMemoryFinanceStore

logger = logging.getLogger(__name__)


@dataclass
class TrendPoint:
    """Revenue, cost and hours of one calendar month (rounded).

    Attributes:
        month: Label such as "Mar 2026"
        month_start: First day of the month
        revenue: Base-currency amount of milestones released in the month
        costs: Labour cost of time entries started in the month
        profit: revenue - costs
        hours_worked: Hours of time entries started in the month
    """

    month: str
    month_start: dt.date
    revenue: Decimal
    costs: Decimal
    profit: Decimal
    hours_worked: Decimal


def add_months(month_start: dt.date, months: int) -> dt.date:
    """Shift a first-of-month date by a number of months.

    Example:
        >>> add_months(dt.date(2026, 1, 1), -2)
        datetime.date(2025, 11, 1)
    """
    index = month_start.year * 12 + (month_start.month - 1) + months
    return dt.date(index // 12, index % 12 + 1, 1)


def trailing_month_starts(n: int, today: dt.date) -> List[dt.date]:
    """First days of the last ``n`` months including today's, oldest first.

    Example:
        >>> trailing_month_starts(3, dt.date(2026, 2, 14))
        [datetime.date(2025, 12, 1), datetime.date(2026, 1, 1), datetime.date(2026, 2, 1)]
    """
    current = today.replace(day=1)
    return [add_months(current, -offset) for offset in range(n - 1, -1, -1)]


class TrendAnalyzer:
    """Builds a trailing monthly series of revenue, cost and profit.

    Attributes:
        store: Source of milestones, time entries and workers
        normalizer: Converts milestone amounts to base currency
        max_workers: Months queried concurrently when greater than 1

    Example:
        >>> analyzer = TrendAnalyzer(store, CurrencyNormalizer())
        >>> [p.month for p in analyzer.trailing_months(2, dt.date(2026, 3, 5))]
        ['Feb 2026', 'Mar 2026']
    """

    def __init__(
        self,
        store: "InMemoryFinanceStore",
        normalizer: CurrencyNormalizer,
        max_workers: int = 1,
    ):
        self.store = store
        self.normalizer = normalizer
        self.max_workers = max(1, max_workers)

    def _revenue_in_base(self, milestone: Milestone) -> Decimal:
        project = self.store.get_project(milestone.project_id)
        return self.normalizer.milestone_to_base(milestone, project)

    def month_point(self, month_start: dt.date) -> TrendPoint:
        """Compute a single month independently of any other month."""
        start = dt.datetime.combine(month_start, dt.time.min)
        end = dt.datetime.combine(add_months(month_start, 1), dt.time.min)

        revenue = ZERO
        for milestone in self.store.released_milestones_between(start, end):
            revenue += self._revenue_in_base(milestone)

        entries = self.store.time_entries_started_between(start, end)
        hours, costs = CostAggregator(self.store.workers_by_id()).entries_cost(entries)

        return TrendPoint(
            month=month_start.strftime("%b %Y"),
            month_start=month_start,
            revenue=round_money(revenue),
            costs=round_money(costs),
            profit=round_money(revenue - costs),
            hours_worked=round_2(hours),
        )

    def trailing_months(
        self, n: int = 6, today: Optional[dt.date] = None
    ) -> List[TrendPoint]:
        """Series for the most recent ``n`` months, oldest first.

        Args:
            n: Number of months including the current one
            today: Reference date (defaults to the current date)

        Returns:
            List of TrendPoint, one per month
        """
        if n <= 0:
            return []
        today = today or dt.date.today()
        month_starts = trailing_month_starts(n, today)
        logger.info(f"Building {n}-month trend ending {month_starts[-1]:%b %Y}")

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(self.month_point, month_starts))
        return [self.month_point(start) for start in month_starts]

    @staticmethod
    def to_dataframe(points: List[TrendPoint]) -> pd.DataFrame:
        """Tabulate a trend series with one row per month.

        Example:
            >>> df = TrendAnalyzer.to_dataframe(points)
            >>> list(df.columns)
            ['month', 'revenue', 'costs', 'profit', 'hours_worked']
        """
        columns = ["month", "revenue", "costs", "profit", "hours_worked"]
        if not points:
            return pd.DataFrame(columns=columns)
        rows = [asdict(point) for point in points]
        return pd.DataFrame(rows, columns=columns)
