"""Worker data model.

A worker is a "user" of the agency dashboard: anyone who can log time
against a task. The finance engine only reads workers.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from agency_finance.models.base import BaseDataModel, require_text, to_decimal


class Role(str, Enum):
    """Organisational role of a worker."""

    ADMIN = "ADMIN"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    DEVELOPER = "DEVELOPER"
    DESIGNER = "DESIGNER"
    QC = "QC"


class EmploymentKind(str, Enum):
    """How a worker is employed."""

    IN_HOUSE = "IN_HOUSE"
    FREELANCER = "FREELANCER"


# Roles whose time is tracked as delivery cost
COST_ROLES = (Role.DEVELOPER, Role.DESIGNER, Role.QC, Role.PROJECT_MANAGER)

# Roles listed in the developer cost section of the overview
DELIVERY_ROLES = (Role.DEVELOPER, Role.DESIGNER, Role.QC)


class Worker(BaseDataModel):
    """Represents a worker whose logged time turns into cost.

    Attributes:
        id: Unique worker identifier
        first_name: Given name
        last_name: Family name
        email: Optional contact address
        role: Organisational role
        employment_kind: In-house employee or freelancer
        monthly_salary: Monthly salary in the base currency (optional)
        is_active: Whether the worker is currently active

    Example:
        >>> worker = Worker(
        ...     id="u-1",
        ...     first_name="Ayesha",
        ...     last_name="Khan",
        ...     role=Role.DEVELOPER,
        ...     monthly_salary=Decimal("176000"),
        ... )
        >>> worker.name
        'Ayesha Khan'
    """

    id: str = Field(..., min_length=1, description="Unique worker identifier")
    first_name: str = Field(..., min_length=1, description="Given name")
    last_name: str = Field("", description="Family name")
    email: Optional[str] = Field(None, description="Contact address")
    role: Role = Field(Role.DEVELOPER, description="Organisational role")
    employment_kind: EmploymentKind = Field(
        EmploymentKind.IN_HOUSE, description="Employment kind"
    )
    monthly_salary: Optional[Decimal] = Field(
        None, ge=0, description="Monthly salary in base currency"
    )
    is_active: bool = Field(True, description="Whether the worker is active")

    @field_validator("id", "first_name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("monthly_salary", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    @property
    def name(self) -> str:
        """Full display name."""
        return f"{self.first_name} {self.last_name}".strip()
