"""In-memory store over a finance snapshot.

The store is the read/write boundary between the engine and persistence.
It indexes an already-loaded ``FinanceSnapshot`` and offers the handful of
queries the report composers, the milestone commands and the trend
analyzer need. Writes replace whole entities; the engine never mutates
entities in place.
"""

import datetime as dt
import logging
import threading
from collections import OrderedDict, defaultdict
from typing import Dict, List, Optional

from agency_finance.models.milestone import Milestone, PaymentStatus
from agency_finance.models.project import Client, Project, Task
from agency_finance.models.snapshot import FinanceSnapshot
from agency_finance.models.time_entry import TimeEntry
from agency_finance.models.worker import Worker

logger = logging.getLogger(__name__)


class InMemoryFinanceStore:
    """Indexed, thread-safe view of a FinanceSnapshot.

    Attributes:
        snapshot: The snapshot the store was built from

    Example:
        >>> store = InMemoryFinanceStore(snapshot)
        >>> store.get_project("p-1").name
        'Storefront'
    """

    def __init__(self, snapshot: Optional[FinanceSnapshot] = None):
        self.snapshot = snapshot or FinanceSnapshot()
        self._lock = threading.RLock()

        self._workers: Dict[str, Worker] = OrderedDict(
            (w.id, w) for w in self.snapshot.workers
        )
        self._clients: Dict[str, Client] = OrderedDict(
            (c.id, c) for c in self.snapshot.clients
        )
        self._projects: Dict[str, Project] = OrderedDict(
            (p.id, p) for p in self.snapshot.projects
        )
        self._tasks: Dict[str, Task] = OrderedDict((t.id, t) for t in self.snapshot.tasks)
        self._milestones: Dict[str, Milestone] = OrderedDict(
            (m.id, m) for m in self.snapshot.milestones
        )
        self._entries: List[TimeEntry] = list(self.snapshot.time_entries)

        self._entries_by_task: Dict[str, List[TimeEntry]] = defaultdict(list)
        self._entries_by_worker: Dict[str, List[TimeEntry]] = defaultdict(list)
        for entry in self._entries:
            self._entries_by_task[entry.task_id].append(entry)
            self._entries_by_worker[entry.worker_id].append(entry)

        logger.debug(
            f"Indexed snapshot: {len(self._projects)} projects, "
            f"{len(self._tasks)} tasks, {len(self._entries)} time entries, "
            f"{len(self._milestones)} milestones"
        )

    # ---------- Workers / clients ----------
    def get_worker(self, worker_id: str) -> Optional[Worker]:
        return self._workers.get(worker_id)

    def list_workers(self) -> List[Worker]:
        return list(self._workers.values())

    def workers_by_id(self) -> Dict[str, Worker]:
        return dict(self._workers)

    def get_client(self, client_id: str) -> Optional[Client]:
        return self._clients.get(client_id)

    # ---------- Projects / tasks ----------
    def get_project(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)

    def list_projects(self, active_only: bool = False) -> List[Project]:
        with self._lock:
            projects = list(self._projects.values())
        if active_only:
            projects = [p for p in projects if p.is_active]
        return projects

    def save_project(self, project: Project) -> Project:
        with self._lock:
            self._projects[project.id] = project
        return project

    def get_task(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def tasks_for_project(self, project_id: str) -> List[Task]:
        return [t for t in self._tasks.values() if t.project_id == project_id]

    def tasks_assigned_to(self, worker_id: str) -> List[Task]:
        return [t for t in self._tasks.values() if t.assignee_id == worker_id]

    # ---------- Time entries ----------
    def entries_by_task(self, project_id: str) -> Dict[str, List[TimeEntry]]:
        """Time entries of a project's tasks keyed by task id."""
        return {
            task.id: list(self._entries_by_task.get(task.id, []))
            for task in self.tasks_for_project(project_id)
        }

    def time_entries_for_worker(self, worker_id: str) -> List[TimeEntry]:
        return list(self._entries_by_worker.get(worker_id, []))

    def time_entries_started_between(
        self, start: dt.datetime, end: dt.datetime
    ) -> List[TimeEntry]:
        """Time entries with ``start <= start_time < end``."""
        return [e for e in self._entries if start <= e.start_time < end]

    # ---------- Milestones ----------
    def get_milestone(self, milestone_id: str) -> Optional[Milestone]:
        with self._lock:
            return self._milestones.get(milestone_id)

    def list_milestones(self, project_id: Optional[str] = None) -> List[Milestone]:
        with self._lock:
            milestones = list(self._milestones.values())
        if project_id is not None:
            milestones = [m for m in milestones if m.project_id == project_id]
        return milestones

    def released_milestones_between(
        self, start: dt.datetime, end: dt.datetime
    ) -> List[Milestone]:
        """Released milestones with ``start <= released_at < end``."""
        return [
            m
            for m in self.list_milestones()
            if m.payment_status == PaymentStatus.RELEASED
            and m.released_at is not None
            and start <= m.released_at < end
        ]

    def save_milestone(self, milestone: Milestone) -> Milestone:
        with self._lock:
            self._milestones[milestone.id] = milestone
        return milestone

    def delete_milestone(self, milestone_id: str) -> Optional[Milestone]:
        with self._lock:
            return self._milestones.pop(milestone_id, None)
