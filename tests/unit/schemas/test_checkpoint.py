"""Tests for Checkpoint and ExportWindow schemas."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from auditvault.schemas import Checkpoint, ExportWindow, format_timestamp

UTC = timezone.utc


def test_record_uses_table_attribute_names():
    """Serialized checkpoints use EventDate/CreatedAt/From/To."""
    checkpoint = Checkpoint(
        event_date="2024-05-01",
        created_at=datetime(2024, 5, 1, 11, 0, 3, tzinfo=UTC),
        window_start=datetime(2024, 5, 1, 10, 0, tzinfo=UTC),
        window_end=datetime(2024, 5, 1, 11, 0, tzinfo=UTC),
    )

    assert checkpoint.to_record() == {
        "EventDate": "2024-05-01",
        "CreatedAt": "2024-05-01T11:00:03.000000+00:00",
        "From": "2024-05-01T10:00:00.000000+00:00",
        "To": "2024-05-01T11:00:00.000000+00:00",
    }
    assert Checkpoint.from_record(checkpoint.to_record()) == checkpoint


def test_for_window_partitions_by_local_day():
    """The partition is the creation day in the configured zone."""
    tokyo = ZoneInfo("Asia/Tokyo")
    window = ExportWindow(
        start=datetime(2024, 5, 1, 15, 0, tzinfo=UTC), end=datetime(2024, 5, 1, 16, 0, tzinfo=UTC)
    )

    checkpoint = Checkpoint.for_window(
        window, created_at=datetime(2024, 5, 1, 16, 0, 1, tzinfo=UTC), tz=tokyo
    )

    assert checkpoint.event_date == "2024-05-02"
    assert checkpoint.window == window


def test_sort_keys_order_chronologically():
    """Fixed-width UTC strings sort like the instants they encode."""
    plus_two = timezone(timedelta(hours=2))
    earlier = datetime(2024, 5, 1, 11, 59, 59, 999999, tzinfo=UTC)
    later = datetime(2024, 5, 1, 14, 0, tzinfo=plus_two)

    assert format_timestamp(earlier) < format_timestamp(later)


def test_window_requires_start_before_end():
    """Empty or inverted windows are rejected."""
    moment = datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    with pytest.raises(ValidationError):
        ExportWindow(start=moment, end=moment)


def test_window_requires_aware_bounds():
    """Naive datetimes are ambiguous across zones."""
    with pytest.raises(ValidationError):
        ExportWindow(start=datetime(2024, 5, 1, 10), end=datetime(2024, 5, 1, 11))
