"""
Attendance-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional

from .common import CamelModel, EntityRef

class AttendanceCreate(CamelModel):
    """Scan submitted by a gate scanner. Missing references are reported as 400."""
    ticket: Optional[EntityRef] = None
    event: Optional[EntityRef] = None
    user: Optional[EntityRef] = None
    start_time: Optional[datetime] = None
    gate: Optional[str] = None

class AttendanceLogResponse(CamelModel):
    id: int
    ticket_id: int
    event_id: int
    user_id: int
    start_time: datetime
    status: str
    re_entry_count: int
    gate: Optional[str] = None

    @classmethod
    def from_log(cls, log) -> "AttendanceLogResponse":
        return cls(
            id=log.id,
            ticket_id=log.ticket_id,
            event_id=log.event_id,
            user_id=log.user_id,
            start_time=log.occurred_at,
            status=log.status,
            re_entry_count=log.re_entry_count,
            gate=log.gate,
        )

class AttendanceStats(CamelModel):
    check_in_count: int
    total_logs: int
