"""Time entry data model.

A time entry records how long a worker spent on a task. The recorded
duration is authoritative for cost; start and end times only place the
entry on the calendar.
"""

import datetime as dt
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from agency_finance.models.base import BaseDataModel, to_naive_utc


class TimeEntry(BaseDataModel):
    """Represents logged time on a task.

    Time entries are immutable once created; the engine never mutates them.

    Attributes:
        id: Unique entry identifier
        task_id: Task the time was logged against
        worker_id: Worker who logged the time
        start_time: When the work started
        end_time: When the work ended (optional for a running timer)
        duration_seconds: Elapsed seconds used for all cost math
        is_billable: Whether the time is billable to the client

    Example:
        >>> entry = TimeEntry(
        ...     id="te-1",
        ...     task_id="t-1",
        ...     worker_id="u-1",
        ...     start_time=dt.datetime(2026, 3, 2, 9, 0),
        ...     duration_seconds=3600,
        ... )
        >>> entry.is_billable
        True
    """

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    id: str = Field(..., min_length=1, description="Unique entry identifier")
    task_id: str = Field(..., min_length=1, description="Task identifier")
    worker_id: str = Field(..., min_length=1, description="Worker identifier")
    start_time: dt.datetime = Field(..., description="Start of the work")
    end_time: Optional[dt.datetime] = Field(None, description="End of the work")
    duration_seconds: int = Field(0, ge=0, description="Elapsed seconds")
    is_billable: bool = Field(True, description="Billable to the client")

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeEntry":
        """Validate that the entry does not end before it starts.

        Raises:
            ValueError: If end_time precedes start_time
        """
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError(
                f"end_time ({self.end_time}) must not be before "
                f"start_time ({self.start_time})"
            )
        return self
