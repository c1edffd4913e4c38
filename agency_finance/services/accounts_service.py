"""Report composers for the accounts dashboard.

The accounts service assembles calculators and aggregators into the report
structures consumed by the UI:
- agency-wide overview with a monthly trend
- per-project financials (budget, cost breakdown, task and role costs)
- per-project account summary (members, time tracking, labour cost)
- per-developer account summary
- milestone listing and time breakdown by project

Each report is computed from the store as it is at call time; a report
whose primary entity does not exist raises NotFoundError instead of
returning partial data.
"""

import datetime as dt
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from agency_finance.aggregators.cost_aggregator import CostAggregation, CostAggregator
from agency_finance.aggregators.milestone_ledger import MilestoneSummary, classify_milestones
from agency_finance.aggregators.trend_analyzer import TrendAnalyzer
from agency_finance.calculators.budget_tracker import BudgetTracker
from agency_finance.calculators.compensation import hourly_rate
from agency_finance.calculators.currency import CurrencyNormalizer
from agency_finance.calculators.money_utils import (
    HUNDRED,
    ZERO,
    round_2,
    round_money,
    round_optional_2,
    round_optional_money,
    safe_percent,
    safe_ratio,
    seconds_to_hours,
)
from agency_finance.calculators.platform_fee import apply_platform_fee
from agency_finance.config.settings import FinanceEngineConfig
from agency_finance.exceptions import NotFoundError, ValidationError
from agency_finance.models.project import Client, Project, TaskStatus
from agency_finance.models.worker import DELIVERY_ROLES, Role, Worker
from agency_finance.services.finance_store import InMemoryFinanceStore
from agency_finance.services.report_models import (
    AccountsOverview,
    ClientInfo,
    CostBreakdown,
    DeveloperAccountSummary,
    DeveloperCostRow,
    DeveloperProjectRow,
    LaborCosts,
    MemberCost,
    MilestoneListing,
    MilestoneStats,
    OverviewSummary,
    ProjectAccountInfo,
    ProjectAccountSummary,
    ProjectFinancialInfo,
    ProjectFinancials,
    ProjectOverviewRow,
    ProjectTimeBreakdown,
    TaskStatusCounts,
    TaskTimeBreakdown,
    TimeTracking,
    WorkerHours,
)
from agency_finance.utils.logging_utils import LogContext, log_function_call

logger = logging.getLogger(__name__)

FINANCIAL_FIELDS = {"platform_fee_percent", "working_budget", "exchange_rate"}


def _milestone_stats(summary: MilestoneSummary) -> MilestoneStats:
    return MilestoneStats(
        total=summary.total,
        released=summary.released_count,
        pending=summary.pending_count,
        total_amount=round_2(summary.total_amount),
        released_amount=round_2(summary.released_amount),
        pending_amount=round_2(summary.pending_amount),
    )


def _client_info(client: Optional[Client], client_id: str) -> ClientInfo:
    if client is None:
        return ClientInfo(id=client_id, name="Unknown", client_kind="")
    return ClientInfo(id=client.id, name=client.name, client_kind=client.client_kind.value)


class AccountsService:
    """Composes financial reports from a finance store.

    Attributes:
        store: Source of entity snapshots
        normalizer: Currency conversion to the base currency
        budget_tracker: Reference budget resolution and consumption
        trend_months: Length of the overview's monthly trend
        trend_max_workers: Months of the trend queried concurrently
        today: Source of the current date for the trend

    Example:
        >>> service = AccountsService(store)
        >>> report = service.project_financials("p-1")
        >>> report.cost_breakdown.total_cost
        Decimal('1')
    """

    def __init__(
        self,
        store: InMemoryFinanceStore,
        normalizer: Optional[CurrencyNormalizer] = None,
        trend_months: int = 6,
        trend_max_workers: int = 1,
        today: Callable[[], dt.date] = dt.date.today,
    ):
        self.store = store
        self.normalizer = normalizer or CurrencyNormalizer()
        self.budget_tracker = BudgetTracker(self.normalizer)
        self.trend_months = trend_months
        self.trend_max_workers = trend_max_workers
        self.today = today

    @classmethod
    def from_config(
        cls, store: InMemoryFinanceStore, config: FinanceEngineConfig
    ) -> "AccountsService":
        """Build a service whose rates and trend settings come from config."""
        return cls(
            store,
            normalizer=config.build_normalizer(),
            trend_months=config.trend_months,
            trend_max_workers=config.trend_max_workers,
        )

    # ---------- Lookups ----------
    def _require_project(self, project_id: str) -> Project:
        project = self.store.get_project(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def _aggregate_project(self, project: Project) -> CostAggregation:
        aggregator = CostAggregator(self.store.workers_by_id())
        return aggregator.aggregate(
            self.store.tasks_for_project(project.id),
            self.store.entries_by_task(project.id),
        )

    # ---------- Overview ----------
    @log_function_call(level="INFO")
    def accounts_overview(self, today: Optional[dt.date] = None) -> AccountsOverview:
        """Agency-wide revenue, labour cost, per-project and per-developer view.

        Args:
            today: Reference date for the monthly trend (defaults to today)

        Returns:
            AccountsOverview report
        """
        total_revenue = ZERO
        total_labor_cost = ZERO
        total_hours = ZERO
        released_count = 0
        pending_count = 0
        rows: List[ProjectOverviewRow] = []

        for project in self.store.list_projects(active_only=True):
            milestones = self.store.list_milestones(project.id)
            raw = classify_milestones(milestones)
            in_base = classify_milestones(milestones, self.normalizer, project)
            aggregation = self._aggregate_project(project)
            budget_view = self.budget_tracker.project_budget_view(project)

            total_revenue += in_base.released_amount
            released_count += raw.released_count
            pending_count += raw.pending_count
            total_labor_cost += aggregation.total_cost
            total_hours += aggregation.total_hours

            fee_percent = project.platform_fee_percent or ZERO
            fee = apply_platform_fee(raw.released_amount, fee_percent)
            client = self.store.get_client(project.client_id)

            rows.append(
                ProjectOverviewRow(
                    id=project.id,
                    name=project.name,
                    client=client.name if client else "Unknown",
                    currency=project.currency,
                    budget=round_optional_money(budget_view.budget_base),
                    budget_original=project.budget,
                    spent=round_money(aggregation.total_cost),
                    milestones_released=raw.released_count,
                    total_milestones=raw.total,
                    hours_worked=round_2(aggregation.total_hours),
                    status=project.status,
                    platform_fee_percent=fee_percent,
                    gross_amount=round_2(raw.released_amount),
                    fee_amount=round_2(fee.fee_amount),
                    net_amount=round_2(fee.net_amount),
                )
            )

        total_profit = total_revenue - total_labor_cost
        summary = OverviewSummary(
            total_revenue=round_money(total_revenue),
            total_milestones_released=released_count,
            total_milestones_pending=pending_count,
            total_labor_cost=round_money(total_labor_cost),
            total_profit=round_money(total_profit),
            profit_margin=round_2(safe_percent(total_profit, total_revenue)),
            total_hours_tracked=round_2(total_hours),
            average_hourly_rate=round_money(safe_ratio(total_labor_cost, total_hours)),
        )

        trend = TrendAnalyzer(self.store, self.normalizer, self.trend_max_workers)
        return AccountsOverview(
            summary=summary,
            project_breakdown=rows,
            developer_costs=self._developer_costs(),
            monthly_trend=trend.trailing_months(self.trend_months, today or self.today()),
        )

    def _developer_costs(self) -> List[DeveloperCostRow]:
        membership_counts: Dict[str, int] = {}
        for project in self.store.list_projects():
            for member in project.members:
                membership_counts[member.worker_id] = (
                    membership_counts.get(member.worker_id, 0) + 1
                )

        rows = []
        for worker in self.store.list_workers():
            if not worker.is_active or worker.role not in DELIVERY_ROLES:
                continue
            hours, cost = self._worker_hours_and_cost(worker)
            rows.append(
                DeveloperCostRow(
                    id=worker.id,
                    name=worker.name,
                    monthly_salary=worker.monthly_salary,
                    hourly_rate=round_2(hourly_rate(worker.monthly_salary)),
                    hours_worked=round_2(hours),
                    cost=round_money(cost),
                    projects_count=membership_counts.get(worker.id, 0),
                )
            )
        return rows

    def _worker_hours_and_cost(self, worker: Worker) -> Tuple[Decimal, Decimal]:
        aggregator = CostAggregator({worker.id: worker})
        return aggregator.entries_cost(self.store.time_entries_for_worker(worker.id))

    # ---------- Project financials ----------
    @log_function_call
    def project_financials(self, project_id: str) -> ProjectFinancials:
        """Budget, cost breakdown, task costs and role costs of a project.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self._require_project(project_id)
        with LogContext(project_id=project_id):
            aggregation = self._aggregate_project(project)
            budget_view = self.budget_tracker.project_budget_view(project)
            consumption = self.budget_tracker.consumption_against(
                aggregation.total_cost, budget_view.reference_budget
            )
            milestones = classify_milestones(self.store.list_milestones(project.id))

            if consumption.is_over_budget:
                logger.warning(
                    f"Project {project_id} is over budget: "
                    f"{round_money(aggregation.total_cost)} of "
                    f"{round_money(consumption.reference_budget)}"
                )

            return ProjectFinancials(
                project=ProjectFinancialInfo(
                    id=project.id,
                    name=project.name,
                    status=project.status,
                    budget=project.budget,
                    currency=project.currency,
                    platform_fee_percent=project.platform_fee_percent,
                    platform_fee_amount=round_optional_2(budget_view.platform_fee_amount),
                    payable_amount=round_optional_2(budget_view.payable_amount),
                    payable_amount_base=round_optional_money(
                        budget_view.payable_amount_base
                    ),
                    working_budget=project.working_budget,
                    working_budget_base=round_optional_money(
                        budget_view.working_budget_base
                    ),
                    exchange_rate=budget_view.exchange_rate,
                ),
                client=_client_info(self.store.get_client(project.client_id), project.client_id),
                cost_breakdown=CostBreakdown(
                    total_cost=round_money(aggregation.total_cost),
                    developer_cost=round_money(aggregation.role_cost(Role.DEVELOPER)),
                    qc_cost=round_money(aggregation.role_cost(Role.QC)),
                    pm_cost=round_money(aggregation.role_cost(Role.PROJECT_MANAGER)),
                    designer_cost=round_money(aggregation.role_cost(Role.DESIGNER)),
                    total_hours=round_2(aggregation.total_hours),
                    reference_budget=round_optional_money(consumption.reference_budget),
                    budget_consumed_percent=round_2(consumption.consumed_percent),
                    remaining_budget=round_money(consumption.remaining),
                    is_over_budget=consumption.is_over_budget,
                ),
                task_costs=aggregation.task_costs(),
                role_breakdown=aggregation.role_breakdown(),
                milestones=_milestone_stats(milestones),
            )

    # ---------- Project account summary ----------
    @log_function_call
    def project_account_summary(self, project_id: str) -> ProjectAccountSummary:
        """Members, time tracking, labour cost and task counts of a project.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self._require_project(project_id)
        with LogContext(project_id=project_id):
            milestones = self.store.list_milestones(project.id)
            raw = classify_milestones(milestones)
            in_base = classify_milestones(milestones, self.normalizer, project)
            aggregation = self._aggregate_project(project)
            tasks = self.store.tasks_for_project(project.id)

            members = []
            member_rates = []
            for member in project.members:
                worker = self.store.get_worker(member.worker_id)
                if worker is None:
                    logger.debug(f"Skipping unknown member {member.worker_id}")
                    continue
                rate = hourly_rate(worker.monthly_salary)
                if rate > ZERO:
                    member_rates.append(rate)
                members.append(
                    MemberCost(
                        id=worker.id,
                        name=worker.name,
                        role=member.role,
                        employment_kind=worker.employment_kind.value,
                        monthly_salary=worker.monthly_salary,
                        hourly_rate=round_2(rate),
                        hours_worked=round_2(aggregation.worker_hours(worker.id)),
                        cost=round_money(aggregation.worker_cost(worker.id)),
                    )
                )

            if aggregation.estimated_hours > ZERO and aggregation.total_hours > ZERO:
                efficiency = aggregation.estimated_hours / aggregation.total_hours * HUNDRED
            else:
                efficiency = HUNDRED

            average_rate = safe_ratio(sum(member_rates, ZERO), Decimal(len(member_rates)))
            estimated_labor_cost = aggregation.estimated_hours * average_rate

            profit_margin = None
            if in_base.released_amount > ZERO:
                profit_margin = round_2(
                    safe_percent(
                        in_base.released_amount - aggregation.total_cost,
                        in_base.released_amount,
                    )
                )

            counts = TaskStatusCounts(total=len(tasks))
            for task in tasks:
                if task.status == TaskStatus.COMPLETED:
                    counts.completed += 1
                elif task.status == TaskStatus.IN_PROGRESS:
                    counts.in_progress += 1
                elif task.status == TaskStatus.IN_REVIEW:
                    counts.in_review += 1
                elif task.status == TaskStatus.TODO:
                    counts.todo += 1
                elif task.status == TaskStatus.BLOCKED:
                    counts.blocked += 1

            budget_view = self.budget_tracker.project_budget_view(project)
            return ProjectAccountSummary(
                project=ProjectAccountInfo(
                    id=project.id,
                    name=project.name,
                    status=project.status,
                    budget=project.budget,
                    currency=project.currency,
                    budget_base=round_optional_money(budget_view.budget_base),
                ),
                client=_client_info(self.store.get_client(project.client_id), project.client_id),
                milestones=_milestone_stats(raw),
                developers=members,
                time_tracking=TimeTracking(
                    total_hours=round_2(aggregation.total_hours),
                    billable_hours=round_2(aggregation.billable_hours),
                    non_billable_hours=round_2(aggregation.non_billable_hours),
                    estimated_hours=round_2(aggregation.estimated_hours),
                    efficiency=round_2(efficiency),
                ),
                costs=LaborCosts(
                    total_labor_cost=round_money(aggregation.total_cost),
                    estimated_labor_cost=round_money(estimated_labor_cost),
                    cost_variance=round_money(aggregation.total_cost - estimated_labor_cost),
                    profit_margin=profit_margin,
                ),
                tasks=counts,
            )

    # ---------- Developer account summary ----------
    @log_function_call
    def developer_account_summary(self, worker_id: str) -> DeveloperAccountSummary:
        """Hours per project, earnings and task throughput of a worker.

        Raises:
            NotFoundError: If the worker does not exist
        """
        worker = self.store.get_worker(worker_id)
        if worker is None:
            raise NotFoundError("Developer", worker_id)

        rows: Dict[str, DeveloperProjectRow] = OrderedDict()

        def row_for(project_id: str) -> Optional[DeveloperProjectRow]:
            if project_id not in rows:
                project = self.store.get_project(project_id)
                if project is None:
                    return None
                rows[project_id] = DeveloperProjectRow(id=project.id, name=project.name)
            return rows[project_id]

        total_hours = ZERO
        project_hours: Dict[str, Decimal] = {}
        for entry in self.store.time_entries_for_worker(worker.id):
            hours = seconds_to_hours(entry.duration_seconds)
            total_hours += hours
            task = self.store.get_task(entry.task_id)
            if task is None or row_for(task.project_id) is None:
                continue
            project_hours[task.project_id] = project_hours.get(task.project_id, ZERO) + hours

        assigned = self.store.tasks_assigned_to(worker.id)
        completed = 0
        for task in assigned:
            is_completed = task.status == TaskStatus.COMPLETED
            completed += int(is_completed)
            row = row_for(task.project_id)
            if row is None:
                continue
            row.tasks_assigned += 1
            row.tasks_completed += int(is_completed)

        for project_id, hours in project_hours.items():
            rows[project_id].hours_worked = round_2(hours)

        rate = hourly_rate(worker.monthly_salary)
        return DeveloperAccountSummary(
            id=worker.id,
            name=worker.name,
            email=worker.email,
            role=worker.role.value,
            employment_kind=worker.employment_kind.value,
            monthly_salary=worker.monthly_salary,
            hourly_rate=round_2(rate),
            projects=list(rows.values()),
            total_hours_worked=round_2(total_hours),
            total_earnings=round_money(total_hours * rate),
            tasks_completed=completed,
            tasks_assigned=len(assigned),
            productivity=round_2(safe_ratio(Decimal(completed), total_hours)),
        )

    # ---------- Listings ----------
    def list_milestones(self, project_id: Optional[str] = None) -> List[MilestoneListing]:
        """Milestones, newest first, optionally limited to one project.

        Raises:
            NotFoundError: If a project filter names an unknown project
        """
        if project_id is not None:
            self._require_project(project_id)

        milestones = sorted(
            self.store.list_milestones(project_id),
            key=lambda m: m.created_at or dt.datetime.min,
            reverse=True,
        )

        listings = []
        for milestone in milestones:
            project = self.store.get_project(milestone.project_id)
            client = self.store.get_client(project.client_id) if project else None
            currency = milestone.effective_currency(
                project.currency if project else self.normalizer.base_currency
            )
            listings.append(
                MilestoneListing(
                    id=milestone.id,
                    title=milestone.title,
                    description=milestone.description,
                    amount=milestone.amount,
                    amount_base=round_money(
                        self.normalizer.milestone_to_base(milestone, project)
                    ),
                    currency=currency,
                    status=milestone.status.value,
                    payment_status=milestone.payment_status.value,
                    due_date=milestone.due_date,
                    released_at=milestone.released_at,
                    project_id=milestone.project_id,
                    project_name=project.name if project else None,
                    client_name=client.name if client else None,
                )
            )
        return listings

    def time_breakdown_by_project(self) -> List[ProjectTimeBreakdown]:
        """Hours per task and per worker for every active project."""
        result = []
        for project in self.store.list_projects(active_only=True):
            entries_by_task = self.store.entries_by_task(project.id)
            project_hours = ZERO
            tasks = []
            for task in self.store.tasks_for_project(project.id):
                by_worker: Dict[str, Decimal] = OrderedDict()
                task_hours = ZERO
                for entry in entries_by_task.get(task.id, []):
                    hours = seconds_to_hours(entry.duration_seconds)
                    task_hours += hours
                    by_worker[entry.worker_id] = by_worker.get(entry.worker_id, ZERO) + hours
                project_hours += task_hours

                workers = []
                for worker_id, hours in by_worker.items():
                    worker = self.store.get_worker(worker_id)
                    workers.append(
                        WorkerHours(
                            id=worker_id,
                            name=worker.name if worker else None,
                            hours=round_2(hours),
                        )
                    )
                tasks.append(
                    TaskTimeBreakdown(
                        id=task.id,
                        title=task.title,
                        status=task.status.value,
                        estimated_hours=task.estimated_hours,
                        total_hours=round_2(task_hours),
                        by_worker=workers,
                    )
                )
            result.append(
                ProjectTimeBreakdown(
                    id=project.id,
                    name=project.name,
                    total_hours=round_2(project_hours),
                    tasks=tasks,
                )
            )
        return result

    # ---------- Commands ----------
    def update_project_financials(self, project_id: str, **changes: Any) -> Project:
        """Patch a project's fee percent, working budget or exchange rate.

        Passing None clears a field; omitted fields are left unchanged.

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If a field is unknown or a value is invalid
        """
        unknown = set(changes) - FINANCIAL_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update project fields: {sorted(unknown)}")

        project = self._require_project(project_id)
        try:
            updated = Project.model_validate({**project.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project financials: {e}")

        self.store.save_project(updated)
        logger.info(f"Updated financials of project {project_id}: {sorted(changes)}")
        return updated
