"""Unit tests for the TimeEntry model."""

import datetime as dt

import pytest
from pydantic import ValidationError

from agency_finance.models.time_entry import TimeEntry


def make_entry(**overrides):
    data = {
        "id": "e-1",
        "task_id": "t-1",
        "worker_id": "w-1",
        "start_time": dt.datetime(2026, 3, 2, 9, 0),
        "duration_seconds": 3600,
    }
    data.update(overrides)
    return TimeEntry(**data)


class TestTimeEntry:
    """Test TimeEntry validation and immutability."""

    def test_billable_by_default(self):
        assert make_entry().is_billable is True

    def test_running_timer_has_no_end(self):
        assert make_entry().end_time is None

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="must not be before"):
            make_entry(end_time=dt.datetime(2026, 3, 2, 8, 0))

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(duration_seconds=-1)

    def test_entry_is_frozen(self):
        entry = make_entry()
        with pytest.raises(ValidationError):
            entry.duration_seconds = 7200

    def test_utc_suffix_normalized_to_naive_utc(self):
        entry = make_entry(start_time="2026-03-02T09:00:00Z", end_time="2026-03-02T10:00:00Z")

        assert entry.start_time == dt.datetime(2026, 3, 2, 9, 0)
        assert entry.start_time.tzinfo is None
        assert entry.end_time == dt.datetime(2026, 3, 2, 10, 0)

    def test_offset_converted_to_utc(self):
        entry = make_entry(start_time="2026-03-02T14:00:00+05:00")

        assert entry.start_time == dt.datetime(2026, 3, 2, 9, 0)
