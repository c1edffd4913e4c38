"""Aggregator modules that combine entity snapshots into financial figures."""

from agency_finance.aggregators.cost_aggregator import (
    AssigneeInfo,
    CostAggregation,
    CostAggregator,
    RoleCost,
    RoleMemberCost,
    TaskCost,
)
from agency_finance.aggregators.milestone_ledger import (
    MilestoneSummary,
    classify_milestones,
)
from agency_finance.aggregators.trend_analyzer import (
    TrendAnalyzer,
    TrendPoint,
    trailing_month_starts,
)

__all__ = [
    "AssigneeInfo",
    "CostAggregation",
    "CostAggregator",
    "MilestoneSummary",
    "RoleCost",
    "RoleMemberCost",
    "TaskCost",
    "TrendAnalyzer",
    "TrendPoint",
    "classify_milestones",
    "trailing_month_starts",
]
