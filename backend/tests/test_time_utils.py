"""Tests for UTC time helpers"""
from datetime import datetime, timedelta, timezone

from lexdesk.utils.time import ensure_utc, format_iso, is_future, is_overdue, parse_iso


def test_naive_values_are_treated_as_utc():
    naive = datetime(2026, 3, 1, 10, 30)
    assert ensure_utc(naive) == datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)
    assert ensure_utc(None) is None


def test_offsets_are_converted():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert ensure_utc(datetime(2026, 3, 1, 16, 0, tzinfo=ist)).hour == 10


def test_iso_format_and_parse():
    moment = datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)
    assert format_iso(moment) == "2026-03-01T10:30:00Z"
    assert parse_iso("2026-03-01T16:00:00+05:30") == moment
    assert parse_iso("2026-03-01T10:30:00Z") == moment


def test_future_and_overdue_are_strict():
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    assert not is_future(now, now)
    assert not is_overdue(now, now)
    assert is_overdue(now - timedelta(seconds=1), now)
    assert is_future(now + timedelta(seconds=1), now)
    assert not is_future(None) and not is_overdue(None)
