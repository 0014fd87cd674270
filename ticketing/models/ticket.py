"""
Ticket model
"""

import enum
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from ticketing.core.clock import utc_now
from ticketing.core.db import Base


class TicketStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"
    USED = "USED"

    @classmethod
    def is_terminal(cls, status: Optional[str]) -> bool:
        """True for refunded/cancelled tickets, compared case-insensitively"""
        return (status or "").strip().upper() in (cls.REFUNDED.value, cls.CANCELLED.value)


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    qr_code = Column(String(64), unique=True, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)  # frozen at purchase time
    purchased_at = Column(DateTime, nullable=False, default=utc_now)
    ticket_type = Column(String(50), nullable=False, default="REGULAR")
    status = Column(String(20), nullable=False, default=TicketStatus.ACTIVE.value)
