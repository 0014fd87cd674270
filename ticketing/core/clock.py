"""
Wall-clock access. Services receive a Clock instead of reading time directly.
"""

from datetime import datetime, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Current UTC time as a naive datetime, matching the stored columns."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an aware datetime to naive UTC; naive values are taken as UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """Column default: naive UTC now"""
    return SystemClock().now()
