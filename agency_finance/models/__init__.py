"""Data models for the finance engine.

This package contains Pydantic models for all entity snapshots:
- BaseDataModel: Base class with common configuration
- Worker: A person who logs time
- Client, Project, ProjectMember, Task: Commercial and work structure
- TimeEntry: Logged time on a task
- Milestone, LedgerTransaction: Payable milestones and their ledger record
- FinanceSnapshot: Container for one computation's inputs
"""

from agency_finance.models.base import BaseDataModel
from agency_finance.models.milestone import (
    STATUS_SYNONYMS,
    LedgerTransaction,
    Milestone,
    MilestoneStatus,
    PaymentStatus,
    parse_workflow_status,
)
from agency_finance.models.project import (
    Client,
    ClientKind,
    Project,
    ProjectMember,
    Task,
    TaskStatus,
)
from agency_finance.models.snapshot import FinanceSnapshot
from agency_finance.models.time_entry import TimeEntry
from agency_finance.models.worker import (
    COST_ROLES,
    DELIVERY_ROLES,
    EmploymentKind,
    Role,
    Worker,
)

__all__ = [
    "BaseDataModel",
    "Client",
    "ClientKind",
    "COST_ROLES",
    "DELIVERY_ROLES",
    "EmploymentKind",
    "FinanceSnapshot",
    "LedgerTransaction",
    "Milestone",
    "MilestoneStatus",
    "PaymentStatus",
    "Project",
    "ProjectMember",
    "Role",
    "STATUS_SYNONYMS",
    "Task",
    "TaskStatus",
    "TimeEntry",
    "Worker",
    "parse_workflow_status",
]
