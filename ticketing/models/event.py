"""
Event model, status type and unique-view rows
"""

import enum
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.types import TypeDecorator

from ticketing.core.db import Base


class EventStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    ENDED = "ENDED"
    CANCELLED = "CANCELLED"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["EventStatus"]:
        """Map a stored status string, including legacy spellings, to a member.

        Unknown values fall back to AVAILABLE.
        """
        if raw is None:
            return None
        if isinstance(raw, cls):
            return raw
        return _LEGACY_STATUS.get(raw.strip().upper(), cls.AVAILABLE)


_LEGACY_STATUS = {
    "ACTIVE": EventStatus.AVAILABLE,
    "PUBLISHED": EventStatus.AVAILABLE,
    "PUBLIC": EventStatus.AVAILABLE,
    "AVAILABLE": EventStatus.AVAILABLE,
    "ENDED": EventStatus.ENDED,
    "EXPIRED": EventStatus.ENDED,
    "CANCELLED": EventStatus.CANCELLED,
    "CANCELED": EventStatus.CANCELLED,
    "ARCHIVED": EventStatus.ARCHIVED,
}


class EventStatusType(TypeDecorator):
    """String column holding an EventStatus; always writes the canonical name."""

    impl = String(20)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        status = EventStatus.parse(value)
        return status.value if status is not None else None

    def process_result_value(self, value, dialect):
        return EventStatus.parse(value)


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)  # concert, seminar, festival, ...
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    ticket_price = Column(Numeric(10, 2), nullable=False, default=0)
    capacity = Column(Integer, nullable=False, default=0)
    organizer_ref = Column(String(255), nullable=False)  # user id or display identifier
    description = Column(Text, nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    tickets_sold = Column(Integer, nullable=False, default=0)
    status = Column(EventStatusType(), nullable=False, default=EventStatus.AVAILABLE)
    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    def organizer_user_id(self) -> Optional[int]:
        """Organizer as a numeric user id, or None when it is a display identifier"""
        ref = (self.organizer_ref or "").strip()
        return int(ref) if ref.isascii() and ref.isdigit() else None


class EventView(Base):
    __tablename__ = "event_views"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_view_event_user"),)
