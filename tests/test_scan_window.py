"""
Tests for the scan-window policy
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from ticketing.core.config import Settings
from ticketing.services.scan_window import ScanWindowPolicy

START = datetime(2025, 6, 1, 18, 0)
END = datetime(2025, 6, 1, 22, 0)

@pytest.fixture
def event():
    return SimpleNamespace(start_at=START, end_at=END)

@pytest.mark.parametrize("offset_minutes, expected", [
    (-121, False),
    (-120, True),
    (-60, True),
    (0, True),
    (240, True),
    (360, True),
    (361, False),
])
def test_window_bounds_are_inclusive(event, offset_minutes, expected):
    """Scans are accepted from two hours before start to two hours after end"""
    policy = ScanWindowPolicy()
    now = START + timedelta(minutes=offset_minutes)
    assert policy.is_within_scan_window(now, event) is expected

def test_missing_schedule_is_never_in_window():
    policy = ScanWindowPolicy()
    assert not policy.is_within_scan_window(START, SimpleNamespace(start_at=None, end_at=END))
    assert not policy.is_within_scan_window(START, SimpleNamespace(start_at=START, end_at=None))
    assert not policy.is_within_scan_window(START, object())

def test_custom_durations(event):
    policy = ScanWindowPolicy(before=timedelta(minutes=30), after=timedelta(0))
    assert not policy.is_within_scan_window(START - timedelta(minutes=31), event)
    assert policy.is_within_scan_window(START - timedelta(minutes=30), event)
    assert policy.is_within_scan_window(END, event)
    assert not policy.is_within_scan_window(END + timedelta(seconds=1), event)

def test_aware_timestamps_are_compared_in_utc(event):
    """17:00Z expressed in UTC+02:00 is still one hour before start"""
    policy = ScanWindowPolicy()
    now = datetime(2025, 6, 1, 19, 0, tzinfo=timezone(timedelta(hours=2)))
    assert policy.is_within_scan_window(now, event)

def test_window_for_returns_bounds(event):
    policy = ScanWindowPolicy()
    assert policy.window_for(event) == (datetime(2025, 6, 1, 16, 0), datetime(2025, 6, 2, 0, 0))

def test_negative_durations_rejected():
    with pytest.raises(ValueError):
        ScanWindowPolicy(before=timedelta(hours=-1))

def test_from_settings():
    settings = Settings(EVENT_SCAN_WINDOW_BEFORE_HOURS=1, EVENT_SCAN_WINDOW_AFTER_HOURS=0.5)
    policy = ScanWindowPolicy.from_settings(settings)
    assert policy.before == timedelta(hours=1)
    assert policy.after == timedelta(minutes=30)
