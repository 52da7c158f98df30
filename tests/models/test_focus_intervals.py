"""Tests for FocusInterval records."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from sentience_cli.models.focus.intervals import FocusInterval, parse_timestamp
from tests.conftest import make_interval


class TestFocusInterval:
    @pytest.mark.parametrize(
        "seconds,minutes", [(1, 1), (59, 1), (60, 1), (61, 2), (1500, 25)]
    )
    def test_duration_minutes_rounds_up(self, seconds, minutes):
        interval = FocusInterval.create("work", seconds)
        assert interval.duration_minutes == minutes

    def test_create_assigns_unique_ids(self):
        a = FocusInterval.create("work", 60)
        b = FocusInterval.create("work", 60)
        assert a.id != b.id
        assert a.date.tzinfo is not None

    def test_rejects_non_positive_duration(self):
        with pytest.raises(ValueError):
            FocusInterval.create("work", 0)

    def test_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            FocusInterval.create("nap", 60)

    def test_is_immutable(self):
        interval = make_interval()
        with pytest.raises(AttributeError):
            interval.duration_seconds = 10

    def test_dict_round_trip(self):
        interval = make_interval("break", 5, interval_id="abc")
        data = interval.to_dict()
        assert data["duration_minutes"] == 5
        assert data["date"] == "2024-03-13T10:00:00+00:00"
        assert FocusInterval.from_dict(data) == interval

    def test_from_dict_minutes_only(self):
        interval = FocusInterval.from_dict(
            {
                "id": 7,
                "date": "2024-03-13T10:00:00Z",
                "duration_minutes": 25,
                "type": "work",
            }
        )
        assert interval.id == "7"
        assert interval.scope == "device"
        assert interval.duration_seconds == 1500
        assert interval.date == datetime(2024, 3, 13, 10, 0, tzinfo=timezone.utc)


def test_parse_timestamp_naive_becomes_aware():
    assert parse_timestamp("2024-03-13T10:00:00").tzinfo is not None
