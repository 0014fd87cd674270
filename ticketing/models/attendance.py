"""
Attendance log model
"""

import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from ticketing.core.db import Base


class AttendanceStatus(str, enum.Enum):
    VALID = "valid"
    INVALID = "invalid"
    DUPLICATE = "duplicate"
    OUT_OF_WINDOW = "out_of_window"


class AttendanceLog(Base):
    __tablename__ = "attendance_logs"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    occurred_at = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default=AttendanceStatus.VALID.value)
    re_entry_count = Column(Integer, nullable=False, default=0)
    gate = Column(String(100), nullable=True)

    # Two valid scans of one ticket can never share a re-entry count
    __table_args__ = (
        UniqueConstraint("ticket_id", "status", "re_entry_count", name="uq_attendance_ticket_status_reentry"),
    )
