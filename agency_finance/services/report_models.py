"""Report structures returned by the accounts service.

Every numeric leaf is already rounded for display: base-currency money to
whole units, project-currency money, hours and percentages to 2 decimals.
"""

import datetime as dt
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from agency_finance.aggregators.cost_aggregator import RoleCost, TaskCost
from agency_finance.aggregators.trend_analyzer import TrendPoint


def report_to_dict(report: Any) -> Dict[str, Any]:
    """Convert a report dataclass into plain nested dictionaries."""
    return asdict(report)


@dataclass
class ClientInfo:
    id: str
    name: str
    client_kind: str


@dataclass
class MilestoneStats:
    """Milestone counts and amounts of one project (project currency)."""

    total: int
    released: int
    pending: int
    total_amount: Decimal
    released_amount: Decimal
    pending_amount: Decimal


# ---------- Accounts overview ----------
@dataclass
class OverviewSummary:
    """Agency-wide totals in base currency.

    Attributes:
        total_revenue: Released milestone amounts
        total_milestones_released: Count of released milestones
        total_milestones_pending: Count of pending milestones
        total_labor_cost: Cost of logged time on active projects
        total_profit: total_revenue - total_labor_cost
        profit_margin: total_profit / total_revenue * 100 (0 without revenue)
        total_hours_tracked: Hours logged on active projects
        average_hourly_rate: total_labor_cost / total_hours_tracked
    """

    total_revenue: Decimal
    total_milestones_released: int
    total_milestones_pending: int
    total_labor_cost: Decimal
    total_profit: Decimal
    profit_margin: Decimal
    total_hours_tracked: Decimal
    average_hourly_rate: Decimal


@dataclass
class ProjectOverviewRow:
    """One active project in the overview.

    ``budget`` and ``spent`` are in base currency; ``budget_original``,
    ``gross_amount``, ``fee_amount`` and ``net_amount`` are in the project's
    currency, the last three applying the platform fee to released
    milestones.
    """

    id: str
    name: str
    client: str
    currency: str
    budget: Optional[Decimal]
    budget_original: Optional[Decimal]
    spent: Decimal
    milestones_released: int
    total_milestones: int
    hours_worked: Decimal
    status: str
    platform_fee_percent: Decimal
    gross_amount: Decimal
    fee_amount: Decimal
    net_amount: Decimal


@dataclass
class DeveloperCostRow:
    id: str
    name: str
    monthly_salary: Optional[Decimal]
    hourly_rate: Decimal
    hours_worked: Decimal
    cost: Decimal
    projects_count: int


@dataclass
class AccountsOverview:
    summary: OverviewSummary
    project_breakdown: List[ProjectOverviewRow]
    developer_costs: List[DeveloperCostRow]
    monthly_trend: List[TrendPoint]


# ---------- Project financials ----------
@dataclass
class ProjectFinancialInfo:
    """Budget configuration of a project.

    Amounts without a suffix are in the project currency; ``*_base``
    amounts are in base currency.
    """

    id: str
    name: str
    status: str
    budget: Optional[Decimal]
    currency: str
    platform_fee_percent: Optional[Decimal]
    platform_fee_amount: Optional[Decimal]
    payable_amount: Optional[Decimal]
    payable_amount_base: Optional[Decimal]
    working_budget: Optional[Decimal]
    working_budget_base: Optional[Decimal]
    exchange_rate: Decimal


@dataclass
class CostBreakdown:
    """Labour cost of a project against its reference budget (base currency)."""

    total_cost: Decimal
    developer_cost: Decimal
    qc_cost: Decimal
    pm_cost: Decimal
    designer_cost: Decimal
    total_hours: Decimal
    reference_budget: Optional[Decimal]
    budget_consumed_percent: Decimal
    remaining_budget: Decimal
    is_over_budget: bool


@dataclass
class ProjectFinancials:
    project: ProjectFinancialInfo
    client: ClientInfo
    cost_breakdown: CostBreakdown
    task_costs: List[TaskCost]
    role_breakdown: List[RoleCost]
    milestones: MilestoneStats


# ---------- Project account summary ----------
@dataclass
class ProjectAccountInfo:
    id: str
    name: str
    status: str
    budget: Optional[Decimal]
    currency: str
    budget_base: Optional[Decimal]


@dataclass
class MemberCost:
    """A project member's logged time and cost (base currency)."""

    id: str
    name: str
    role: str
    employment_kind: str
    monthly_salary: Optional[Decimal]
    hourly_rate: Decimal
    hours_worked: Decimal
    cost: Decimal


@dataclass
class TimeTracking:
    """Hours logged on a project.

    ``efficiency`` is estimated / actual hours * 100, or 100 when nothing
    was estimated or no time was logged.
    """

    total_hours: Decimal
    billable_hours: Decimal
    non_billable_hours: Decimal
    estimated_hours: Decimal
    efficiency: Decimal


@dataclass
class LaborCosts:
    """Labour cost of a project in base currency.

    ``profit_margin`` is computed on released revenue and is None while
    nothing has been released.
    """

    total_labor_cost: Decimal
    estimated_labor_cost: Decimal
    cost_variance: Decimal
    profit_margin: Optional[Decimal]


@dataclass
class TaskStatusCounts:
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    in_review: int = 0
    todo: int = 0
    blocked: int = 0


@dataclass
class ProjectAccountSummary:
    project: ProjectAccountInfo
    client: ClientInfo
    milestones: MilestoneStats
    developers: List[MemberCost]
    time_tracking: TimeTracking
    costs: LaborCosts
    tasks: TaskStatusCounts


# ---------- Developer account summary ----------
@dataclass
class DeveloperProjectRow:
    id: str
    name: str
    hours_worked: Decimal = Decimal("0")
    tasks_completed: int = 0
    tasks_assigned: int = 0


@dataclass
class DeveloperAccountSummary:
    """Hours, earnings and task throughput of one worker.

    ``productivity`` is completed tasks per logged hour (0 without hours).
    """

    id: str
    name: str
    email: Optional[str]
    role: str
    employment_kind: str
    monthly_salary: Optional[Decimal]
    hourly_rate: Decimal
    projects: List[DeveloperProjectRow]
    total_hours_worked: Decimal
    total_earnings: Decimal
    tasks_completed: int
    tasks_assigned: int
    productivity: Decimal


# ---------- Listings ----------
@dataclass
class MilestoneListing:
    id: str
    title: str
    description: Optional[str]
    amount: Decimal
    amount_base: Decimal
    currency: str
    status: str
    payment_status: str
    due_date: Optional[dt.date]
    released_at: Optional[dt.datetime]
    project_id: str
    project_name: Optional[str]
    client_name: Optional[str]


@dataclass
class WorkerHours:
    id: str
    name: Optional[str]
    hours: Decimal


@dataclass
class TaskTimeBreakdown:
    id: str
    title: str
    status: str
    estimated_hours: Optional[Decimal]
    total_hours: Decimal
    by_worker: List[WorkerHours] = field(default_factory=list)


@dataclass
class ProjectTimeBreakdown:
    id: str
    name: str
    total_hours: Decimal
    tasks: List[TaskTimeBreakdown] = field(default_factory=list)
