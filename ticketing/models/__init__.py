"""
Database models package
"""

from .user import User, Role
from .event import Event, EventStatus, EventView
from .ticket import Ticket, TicketStatus
from .payment import Payment
from .attendance import AttendanceLog, AttendanceStatus
from .notification import Notification

__all__ = [
    "User",
    "Role",
    "Event",
    "EventStatus",
    "EventView",
    "Ticket",
    "TicketStatus",
    "Payment",
    "AttendanceLog",
    "AttendanceStatus",
    "Notification",
]
