"""Cost aggregation over logged time.

This module walks a project's tasks and time entries once and accumulates,
in parallel over the same scan:
- project totals (hours, billable hours, cost)
- per-task actual hours and cost
- per-role totals with a nested per-worker breakdown
- per-worker totals

Cost of an entry is ``duration_seconds / 3600 * hourly_rate(worker)``. An
entry whose worker cannot be resolved still counts towards task and project
hours but contributes no cost and appears in no role bucket.

Accumulators keep full precision; values are rounded (money to whole
units, hours to 2 decimals) only by the accessors that hand results out.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from agency_finance.calculators.compensation import hourly_rate
from agency_finance.calculators.money_utils import (
    ZERO,
    round_2,
    round_money,
    round_optional_2,
    seconds_to_hours,
)
from agency_finance.models.project import Task
from agency_finance.models.time_entry import TimeEntry
from agency_finance.models.worker import COST_ROLES, Role, Worker

logger = logging.getLogger(__name__)


@dataclass
class AssigneeInfo:
    """Identity and rate of a task's assignee."""

    id: str
    name: str
    role: str
    monthly_salary: Optional[Decimal]
    hourly_rate: Decimal


@dataclass
class TaskCost:
    """Actual versus estimated cost of a single task (rounded).

    Attributes:
        id: Task identifier
        title: Task title
        status: Task status
        assignee: Assignee identity and rate, if assigned
        estimated_hours: Estimate in hours (None when not estimated)
        actual_hours: Logged hours
        estimated_cost: estimated_hours x assignee hourly rate
        actual_cost: Sum of logged hours x logging worker's rate
        cost_variance: actual_cost - estimated_cost
        is_over_budget: Logged hours exceed the estimate
    """

    id: str
    title: str
    status: str
    assignee: Optional[AssigneeInfo]
    estimated_hours: Optional[Decimal]
    actual_hours: Decimal
    estimated_cost: Decimal
    actual_cost: Decimal
    cost_variance: Decimal
    is_over_budget: bool


@dataclass
class RoleMemberCost:
    """A worker's share of a role bucket (rounded)."""

    id: str
    name: str
    monthly_salary: Optional[Decimal]
    hourly_rate: Decimal
    hours_worked: Decimal
    cost: Decimal


@dataclass
class RoleCost:
    """Hours and cost of one role with its members (rounded)."""

    role: str
    members: List[RoleMemberCost]
    total_hours: Decimal
    total_cost: Decimal


@dataclass
class _WorkerBucket:
    worker: Worker
    rate: Decimal
    hours: Decimal = ZERO
    cost: Decimal = ZERO


@dataclass
class _RoleBucket:
    workers: Dict[str, _WorkerBucket] = field(default_factory=OrderedDict)
    hours: Decimal = ZERO
    cost: Decimal = ZERO


@dataclass
class _TaskBucket:
    task: Task
    hours: Decimal = ZERO
    cost: Decimal = ZERO


@dataclass
class CostAggregation:
    """Unrounded accumulators produced by one scan of a project.

    Use the accessor methods to obtain rounded values for reporting.
    """

    workers: Mapping[str, Worker]
    tasks: Dict[str, _TaskBucket] = field(default_factory=OrderedDict)
    roles: Dict[str, _RoleBucket] = field(default_factory=OrderedDict)
    by_worker: Dict[str, _WorkerBucket] = field(default_factory=OrderedDict)
    total_hours: Decimal = ZERO
    billable_hours: Decimal = ZERO
    total_cost: Decimal = ZERO
    estimated_hours: Decimal = ZERO
    skipped_entries: int = 0

    @property
    def non_billable_hours(self) -> Decimal:
        return self.total_hours - self.billable_hours

    def role_cost(self, role: Role) -> Decimal:
        """Unrounded cost of one role (0 if nobody with that role logged time)."""
        bucket = self.roles.get(role.value)
        return bucket.cost if bucket else ZERO

    def worker_hours(self, worker_id: str) -> Decimal:
        bucket = self.by_worker.get(worker_id)
        return bucket.hours if bucket else ZERO

    def worker_cost(self, worker_id: str) -> Decimal:
        bucket = self.by_worker.get(worker_id)
        return bucket.cost if bucket else ZERO

    def task_costs(self) -> List[TaskCost]:
        """Per-task actual versus estimated cost, in task order."""
        result = []
        for bucket in self.tasks.values():
            task = bucket.task
            assignee = self.workers.get(task.assignee_id) if task.assignee_id else None
            assignee_rate = hourly_rate(assignee.monthly_salary) if assignee else ZERO

            estimated_cost = ZERO
            if task.estimated_hours is not None:
                estimated_cost = task.estimated_hours * assignee_rate

            assignee_info = None
            if assignee is not None:
                assignee_info = AssigneeInfo(
                    id=assignee.id,
                    name=assignee.name,
                    role=assignee.role.value,
                    monthly_salary=assignee.monthly_salary,
                    hourly_rate=round_2(assignee_rate),
                )

            result.append(
                TaskCost(
                    id=task.id,
                    title=task.title,
                    status=task.status.value,
                    assignee=assignee_info,
                    estimated_hours=round_optional_2(task.estimated_hours),
                    actual_hours=round_2(bucket.hours),
                    estimated_cost=round_money(estimated_cost),
                    actual_cost=round_money(bucket.cost),
                    cost_variance=round_money(bucket.cost - estimated_cost),
                    is_over_budget=(
                        task.estimated_hours is not None
                        and bucket.hours > task.estimated_hours
                    ),
                )
            )
        return result

    def role_breakdown(self) -> List[RoleCost]:
        """Per-role cost with nested members; roles without members omitted."""
        result = []
        for role, bucket in self.roles.items():
            if not bucket.workers:
                continue
            members = [
                RoleMemberCost(
                    id=wb.worker.id,
                    name=wb.worker.name,
                    monthly_salary=wb.worker.monthly_salary,
                    hourly_rate=round_2(wb.rate),
                    hours_worked=round_2(wb.hours),
                    cost=round_money(wb.cost),
                )
                for wb in bucket.workers.values()
            ]
            result.append(
                RoleCost(
                    role=role,
                    members=members,
                    total_hours=round_2(bucket.hours),
                    total_cost=round_money(bucket.cost),
                )
            )
        return result


class CostAggregator:
    """Turns logged time into cost using each worker's hourly rate.

    Attributes:
        workers: Worker lookup by id used to resolve time entries

    Example:
        >>> aggregator = CostAggregator({"u-1": worker})
        >>> result = aggregator.aggregate(tasks, entries_by_task)
        >>> round_money(result.total_cost)
        Decimal('1')
    """

    def __init__(self, workers: Mapping[str, Worker]):
        self.workers = workers

    def _resolve(self, entry: TimeEntry) -> Optional[Worker]:
        worker = self.workers.get(entry.worker_id)
        if worker is None:
            logger.debug(
                f"Skipping cost for time entry {entry.id}: "
                f"unknown worker {entry.worker_id}"
            )
        return worker

    def aggregate(
        self,
        tasks: Iterable[Task],
        entries_by_task: Mapping[str, List[TimeEntry]],
    ) -> CostAggregation:
        """Accumulate hours and cost for a set of tasks in one pass.

        Args:
            tasks: Tasks of the project (defines task order)
            entries_by_task: Time entries keyed by task id

        Returns:
            CostAggregation with unrounded accumulators
        """
        result = CostAggregation(workers=self.workers)
        for role in COST_ROLES:
            result.roles[role.value] = _RoleBucket()

        for task in tasks:
            task_bucket = _TaskBucket(task=task)
            result.tasks[task.id] = task_bucket
            if task.estimated_hours is not None:
                result.estimated_hours += task.estimated_hours

            for entry in entries_by_task.get(task.id, []):
                hours = seconds_to_hours(entry.duration_seconds)
                task_bucket.hours += hours
                result.total_hours += hours
                if entry.is_billable:
                    result.billable_hours += hours

                worker = self._resolve(entry)
                if worker is None:
                    result.skipped_entries += 1
                    continue

                rate = hourly_rate(worker.monthly_salary)
                cost = hours * rate
                task_bucket.cost += cost
                result.total_cost += cost

                role_bucket = result.roles.setdefault(worker.role.value, _RoleBucket())
                role_bucket.hours += hours
                role_bucket.cost += cost
                member = role_bucket.workers.get(worker.id)
                if member is None:
                    member = role_bucket.workers[worker.id] = _WorkerBucket(
                        worker=worker, rate=rate
                    )
                member.hours += hours
                member.cost += cost

                totals = result.by_worker.get(worker.id)
                if totals is None:
                    totals = result.by_worker[worker.id] = _WorkerBucket(
                        worker=worker, rate=rate
                    )
                totals.hours += hours
                totals.cost += cost

        if result.skipped_entries:
            logger.info(
                f"Skipped cost for {result.skipped_entries} time entries "
                f"with unresolved workers"
            )
        return result

    def entries_cost(self, entries: Iterable[TimeEntry]) -> Tuple[Decimal, Decimal]:
        """Sum hours and cost of loose time entries (unrounded).

        Hours include entries with unresolved workers; cost does not.

        Returns:
            Tuple of (hours, cost)
        """
        hours_total = ZERO
        cost_total = ZERO
        for entry in entries:
            hours = seconds_to_hours(entry.duration_seconds)
            hours_total += hours
            worker = self._resolve(entry)
            if worker is not None:
                cost_total += hours * hourly_rate(worker.monthly_salary)
        return hours_total, cost_total
