"""Unit tests for base model functionality."""

import datetime as dt
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from agency_finance.models.base import (
    BaseDataModel,
    require_text,
    to_decimal,
    to_naive_utc,
    utc_now,
)


class TestBaseModelSerialization:
    """Test serialization/deserialization for models."""

    def test_model_to_dict(self):
        """Test model serialization to dictionary."""

        class TestModel(BaseDataModel):
            name: str
            value: int

        model = TestModel(name="test", value=42)
        assert model.model_dump() == {"name": "test", "value": 42}

    def test_model_handles_dates_and_decimals(self):
        """Test that models accept dates and Decimal amounts."""

        class TestModel(BaseDataModel):
            due: date
            amount: Decimal

        model = TestModel(due=date(2026, 6, 15), amount=Decimal("12.50"))
        assert model.due == date(2026, 6, 15)
        assert model.amount == Decimal("12.50")

    def test_extra_fields_are_rejected(self):
        """Test that unknown fields fail validation."""

        class TestModel(BaseDataModel):
            name: str

        with pytest.raises(ValidationError):
            TestModel(name="test", unexpected="x")

    def test_assignment_is_validated(self):
        """Test that attribute assignment is validated."""

        class TestModel(BaseDataModel):
            value: int

        model = TestModel(value=1)
        with pytest.raises(ValidationError):
            model.value = "not a number"


class TestToDecimal:
    """Test Decimal conversion helper."""

    def test_string_keeps_exact_value(self):
        assert to_decimal("12.50") == Decimal("12.50")

    def test_float_goes_through_string(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_none_passes_through(self):
        assert to_decimal(None) is None

    def test_invalid_value_raises(self):
        with pytest.raises(ValueError, match="Cannot convert"):
            to_decimal("abc")


class TestRequireText:
    """Test non-empty text helper."""

    def test_strips_whitespace(self):
        assert require_text("  Acme ", "name") == "Acme"

    def test_blank_raises_with_field_name(self):
        with pytest.raises(ValueError, match="title cannot be empty"):
            require_text("   ", "title")


class TestToNaiveUtc:
    """Test timestamp normalization."""

    def test_naive_passes_through(self):
        value = dt.datetime(2026, 3, 2, 9, 0)
        assert to_naive_utc(value) is value

    def test_none_passes_through(self):
        assert to_naive_utc(None) is None

    def test_aware_converted_to_utc(self):
        value = dt.datetime(2026, 3, 1, 2, 0, tzinfo=dt.timezone(dt.timedelta(hours=5)))

        result = to_naive_utc(value)

        assert result == dt.datetime(2026, 2, 28, 21, 0)
        assert result.tzinfo is None

    def test_utc_now_is_naive(self):
        assert utc_now().tzinfo is None
