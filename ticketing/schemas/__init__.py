"""
Pydantic schemas package
"""

from .common import *
from .attendance import *
from .event import *
from .ticket import *
from .user import *

__all__ = [
    "CamelModel",
    "EntityRef",
    "StandardResponse",
    "ErrorResponse",
    "AttendanceCreate",
    "AttendanceLogResponse",
    "AttendanceStats",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "CancelEventRequest",
    "CancelEventResponse",
    "EventViewRequest",
    "EventViewResponse",
    "BookTicketRequest",
    "TicketResponse",
    "PaymentCreate",
    "PaymentStatusUpdate",
    "PaymentResponse",
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "UserUpdate",
    "RoleRequest",
    "RoleResponse",
    "NotificationResponse",
]
