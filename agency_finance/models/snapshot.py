"""Snapshot container for all entities handed to the engine."""

from typing import List

from pydantic import Field, model_validator

from agency_finance.models.base import BaseDataModel
from agency_finance.models.milestone import Milestone
from agency_finance.models.project import Client, Project, Task
from agency_finance.models.time_entry import TimeEntry
from agency_finance.models.worker import Worker


class FinanceSnapshot(BaseDataModel):
    """Already-loaded entities for one report computation.

    Attributes:
        workers: All workers
        clients: All clients
        projects: All projects
        tasks: All tasks
        time_entries: All time entries
        milestones: All milestones
    """

    workers: List[Worker] = Field(default_factory=list)
    clients: List[Client] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    time_entries: List[TimeEntry] = Field(default_factory=list)
    milestones: List[Milestone] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "FinanceSnapshot":
        """Reject duplicate identifiers within an entity collection.

        Raises:
            ValueError: If two entities of the same kind share an id
        """
        for name in ("workers", "clients", "projects", "tasks", "time_entries", "milestones"):
            ids = [item.id for item in getattr(self, name)]
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {name} ids: {duplicates}")
        return self
