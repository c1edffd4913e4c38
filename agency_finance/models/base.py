"""Base model for all entity snapshots consumed by the finance engine.

This module provides a base Pydantic model with common configuration and
shared validators used by the entity models.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Arbitrary types support for dates, datetimes, decimals

    Example:
        >>> class Currency(BaseDataModel):
        ...     code: str
        >>> Currency(code="USD").model_dump()
        {'code': 'USD'}
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="forbid",
        frozen=False,
    )


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a numeric value to Decimal, passing None through.

    Args:
        value: The value to convert (str, int, float, Decimal or None)

    Returns:
        The value as a Decimal, or None when no value was supplied

    Raises:
        ValueError: If the value cannot be converted to Decimal

    Example:
        >>> to_decimal("12.50")
        Decimal('12.50')
        >>> to_decimal(None) is None
        True
    """
    if value is None or isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {value} to Decimal: {e}")


def to_naive_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Convert an aware datetime to naive UTC; naive values pass through.

    All timestamps inside the engine are naive UTC so that month windows,
    sorting and clock stamps compare without timezone errors.

    Example:
        >>> to_naive_utc(dt.datetime(2026, 3, 2, 14, 0, tzinfo=dt.timezone(dt.timedelta(hours=5))))
        datetime.datetime(2026, 3, 2, 9, 0)
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def utc_now() -> dt.datetime:
    """Current time as naive UTC, the default clock of the services."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def require_text(value: str, field_name: str) -> str:
    """Validate that a string field is not empty or whitespace only."""
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return value.strip()
