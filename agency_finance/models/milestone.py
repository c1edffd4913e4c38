"""Milestone and ledger transaction data models.

A milestone carries two independent status fields:

- ``status`` is the delivery workflow (NOT_STARTED .. COMPLETED).
- ``payment_status`` drives revenue recognition (PENDING .. RELEASED).

The UI speaks a third vocabulary ("released" / "pending") for the workflow
status. ``parse_workflow_status`` is the single place where that vocabulary
is translated into workflow values.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator, model_validator

from agency_finance.models.base import (
    BaseDataModel,
    require_text,
    to_decimal,
    to_naive_utc,
)


class MilestoneStatus(str, Enum):
    """Delivery workflow status of a milestone."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Revenue recognition status of a milestone."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RELEASED = "RELEASED"
    DELAYED = "DELAYED"
    CANCELLED = "CANCELLED"

    @property
    def is_pending(self) -> bool:
        """Anything neither released nor cancelled counts as pending."""
        return self not in (PaymentStatus.RELEASED, PaymentStatus.CANCELLED)


# External vocabulary -> workflow status (keys are lower case)
STATUS_SYNONYMS: Dict[str, MilestoneStatus] = {
    "released": MilestoneStatus.COMPLETED,
    "pending": MilestoneStatus.NOT_STARTED,
}


def parse_workflow_status(value: Union[str, MilestoneStatus]) -> MilestoneStatus:
    """Translate an externally supplied status into a workflow status.

    Args:
        value: Either a MilestoneStatus, one of its names, or a synonym

    Returns:
        The canonical workflow status

    Raises:
        ValueError: If the value is neither a synonym nor a workflow status

    Example:
        >>> parse_workflow_status("Released")
        <MilestoneStatus.COMPLETED: 'COMPLETED'>
        >>> parse_workflow_status("in_progress")
        <MilestoneStatus.IN_PROGRESS: 'IN_PROGRESS'>
    """
    if isinstance(value, MilestoneStatus):
        return value
    key = str(value).strip().lower()
    if key in STATUS_SYNONYMS:
        return STATUS_SYNONYMS[key]
    try:
        return MilestoneStatus(key.upper())
    except ValueError:
        valid = [s.value for s in MilestoneStatus] + sorted(STATUS_SYNONYMS)
        raise ValueError(f"Unknown milestone status '{value}'. Must be one of: {valid}")


class Milestone(BaseDataModel):
    """Represents a payable milestone of a project.

    Attributes:
        id: Unique milestone identifier
        project_id: Owning project identifier
        title: Milestone title
        description: Optional description
        amount: Gross amount
        currency: Milestone currency; None means the project's currency
        status: Delivery workflow status
        payment_status: Revenue recognition status
        due_date: Optional due date
        released_at: When the milestone was released (set exactly once)
        created_at: Creation timestamp, used for listing order

    Example:
        >>> milestone = Milestone(
        ...     id="m-1",
        ...     project_id="p-1",
        ...     title="Design sign-off",
        ...     amount=Decimal("500"),
        ... )
        >>> milestone.payment_status.is_pending
        True
    """

    id: str = Field(..., min_length=1, description="Unique milestone identifier")
    project_id: str = Field(..., min_length=1, description="Owning project identifier")
    title: str = Field(..., min_length=1, description="Milestone title")
    description: Optional[str] = Field(None, description="Milestone description")
    amount: Decimal = Field(..., ge=0, description="Gross amount")
    currency: Optional[str] = Field(None, description="Milestone currency")
    status: MilestoneStatus = Field(MilestoneStatus.NOT_STARTED)
    payment_status: PaymentStatus = Field(PaymentStatus.PENDING)
    due_date: Optional[dt.date] = Field(None, description="Due date")
    released_at: Optional[dt.datetime] = Field(None, description="Release timestamp")
    created_at: Optional[dt.datetime] = Field(None, description="Creation timestamp")

    @field_validator("title")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().upper()

    @field_validator("released_at", "created_at")
    @classmethod
    def normalize_timezone(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def validate_release_timestamp(self) -> "Milestone":
        """A released payment must carry its release timestamp.

        Raises:
            ValueError: If payment_status is RELEASED without released_at
        """
        if self.payment_status == PaymentStatus.RELEASED and self.released_at is None:
            raise ValueError("released_at must be set when payment_status is RELEASED")
        return self

    def effective_currency(self, project_currency: str) -> str:
        """Currency the amount is expressed in."""
        return self.currency or project_currency


class LedgerTransaction(BaseDataModel):
    """Ledger record written once per milestone release.

    The fee and net amounts are the milestone-level application of the
    project's platform fee at the time of release.

    Attributes:
        milestone_id: Released milestone
        title: Milestone title
        gross_amount: Milestone amount before platform fee
        currency: Currency of the gross amount
        project_id: Owning project identifier
        project_name: Owning project name
        client_name: Client name, if known
        platform_fee_percent: Fee percentage in effect at release
        fee_amount: Fee deducted from the gross amount
        net_amount: Gross amount minus fee
        recorded_at: When the transaction was produced
    """

    milestone_id: str = Field(..., min_length=1)
    title: str
    gross_amount: Decimal
    currency: str
    project_id: str
    project_name: str
    client_name: Optional[str] = None
    platform_fee_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    fee_amount: Decimal = Decimal("0")
    net_amount: Decimal = Decimal("0")
    recorded_at: Optional[dt.datetime] = None

    @field_validator("recorded_at")
    @classmethod
    def normalize_timezone(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_naive_utc(v)

    @property
    def description(self) -> str:
        """Human readable ledger line."""
        return f"Milestone payment: {self.title} for {self.project_name}"
