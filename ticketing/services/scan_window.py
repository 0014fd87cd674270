"""
Scan-window policy: when a ticket may be scanned for an event
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple

from ticketing.core.clock import to_utc
from ticketing.core.config import Settings


@dataclass(frozen=True)
class ScanWindowPolicy:
    """Accepts scans in [start_at - before, end_at + after], both ends inclusive."""

    before: timedelta = timedelta(hours=2)
    after: timedelta = timedelta(hours=2)

    def __post_init__(self) -> None:
        if self.before < timedelta(0) or self.after < timedelta(0):
            raise ValueError("Scan window durations cannot be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScanWindowPolicy":
        return cls(
            before=timedelta(hours=settings.EVENT_SCAN_WINDOW_BEFORE_HOURS),
            after=timedelta(hours=settings.EVENT_SCAN_WINDOW_AFTER_HOURS),
        )

    def window_for(self, event) -> Optional[Tuple[datetime, datetime]]:
        """Return (window_start, window_end) or None when the schedule is incomplete"""
        start_at = to_utc(getattr(event, "start_at", None))
        end_at = to_utc(getattr(event, "end_at", None))
        if start_at is None or end_at is None:
            return None
        return start_at - self.before, end_at + self.after

    def is_within_scan_window(self, now: datetime, event) -> bool:
        window = self.window_for(event)
        if window is None or now is None:
            return False
        window_start, window_end = window
        return window_start <= to_utc(now) <= window_end
