"""Client, project and task data models.

This module defines the commercial side of a project (client, currency,
budget, platform fee, working budget, custom exchange rate) and the tasks
that time is logged against.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator

from agency_finance.models.base import BaseDataModel, require_text, to_decimal


class ClientKind(str, Enum):
    """Where the client relationship comes from."""

    DIRECT = "DIRECT"
    UPWORK = "UPWORK"
    FREELANCER = "FREELANCER"


class TaskStatus(str, Enum):
    """Workflow status of a task."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


class Client(BaseDataModel):
    """Represents a client of the agency.

    Attributes:
        id: Unique client identifier
        name: Client name
        client_kind: Relationship kind (direct, marketplace sourced)

    Example:
        >>> client = Client(id="c-1", name="Acme Corp")
        >>> client.client_kind
        <ClientKind.DIRECT: 'DIRECT'>
    """

    id: str = Field(..., min_length=1, description="Unique client identifier")
    name: str = Field(..., min_length=1, description="Client name")
    client_kind: ClientKind = Field(ClientKind.DIRECT, description="Relationship kind")

    @field_validator("id", "name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return require_text(v, info.field_name)


class ProjectMember(BaseDataModel):
    """Membership of a worker in a project.

    Attributes:
        worker_id: Member worker identifier
        role: Role label shown on the project (free text)
    """

    worker_id: str = Field(..., min_length=1, description="Member worker identifier")
    role: str = Field("DEVELOPER", description="Role label on the project")


class Project(BaseDataModel):
    """Represents a client project with its financial configuration.

    Money fields (``budget``, ``working_budget``) are expressed in the
    project's own ``currency``. ``exchange_rate`` is the number of base
    currency units per one unit of ``currency``; when absent, the rate
    provider's table (and finally a hard-coded fallback) applies.

    Attributes:
        id: Unique project identifier
        name: Project name
        status: Project status label
        currency: ISO currency code of the contract
        budget: Nominal contract budget (optional)
        platform_fee_percent: Marketplace fee percentage, 0-100 (optional)
        working_budget: Budget allocated to execution (optional)
        exchange_rate: Custom rate to the base currency (optional)
        client_id: Owning client identifier
        members: Workers assigned to the project
        is_active: Whether the project is shown in overview reports

    Example:
        >>> project = Project(
        ...     id="p-1",
        ...     name="Storefront",
        ...     currency="USD",
        ...     budget=Decimal("1000"),
        ...     client_id="c-1",
        ... )
        >>> project.budget
        Decimal('1000')
    """

    id: str = Field(..., min_length=1, description="Unique project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    status: str = Field("ACTIVE", description="Project status label")
    currency: str = Field("USD", description="Currency code")
    budget: Optional[Decimal] = Field(None, ge=0, description="Nominal budget")
    platform_fee_percent: Optional[Decimal] = Field(
        None, ge=0, le=100, description="Platform fee percentage (0-100)"
    )
    working_budget: Optional[Decimal] = Field(
        None, ge=0, description="Working budget override"
    )
    exchange_rate: Optional[Decimal] = Field(
        None, gt=0, description="Base currency units per unit of currency"
    )
    client_id: str = Field(..., min_length=1, description="Owning client identifier")
    members: List[ProjectMember] = Field(default_factory=list)
    is_active: bool = Field(True, description="Whether the project is active")

    @field_validator("id", "name", "client_id")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid currency code: {v!r}")
        return code

    @field_validator(
        "budget",
        "platform_fee_percent",
        "working_budget",
        "exchange_rate",
        mode="before",
    )
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class Task(BaseDataModel):
    """Represents a unit of work inside a project.

    Attributes:
        id: Unique task identifier
        project_id: Owning project identifier
        title: Task title
        status: Workflow status
        estimated_hours: Estimate in hours (optional)
        assignee_id: Assigned worker identifier (optional)
    """

    id: str = Field(..., min_length=1, description="Unique task identifier")
    project_id: str = Field(..., min_length=1, description="Owning project identifier")
    title: str = Field(..., min_length=1, description="Task title")
    status: TaskStatus = Field(TaskStatus.TODO, description="Workflow status")
    estimated_hours: Optional[Decimal] = Field(None, ge=0, description="Estimate")
    assignee_id: Optional[str] = Field(None, description="Assigned worker identifier")

    @field_validator("estimated_hours", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)
