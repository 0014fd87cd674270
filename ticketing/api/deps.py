"""
Explicit wiring of services into the routers.

Each provider is a FastAPI dependency so tests can swap implementations
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from ticketing.core.clock import SystemClock
from ticketing.core.config import settings
from ticketing.core.db import SessionLocal
from ticketing.services.attendance_service import AttendanceService
from ticketing.services.dashboard_service import DashboardService
from ticketing.services.event_service import EventService
from ticketing.services.notification_service import DatabaseNotificationSink, NotificationSink
from ticketing.services.payment_service import PaymentService
from ticketing.services.scan_window import ScanWindowPolicy
from ticketing.services.ticket_service import TicketService

clock = SystemClock()


@lru_cache(maxsize=1)
def get_scan_window_policy() -> ScanWindowPolicy:
    return ScanWindowPolicy.from_settings(settings)


@lru_cache(maxsize=1)
def get_notification_sink() -> NotificationSink:
    return DatabaseNotificationSink(SessionLocal)


def get_attendance_service() -> AttendanceService:
    return AttendanceService(get_scan_window_policy())


def get_event_service() -> EventService:
    return EventService(clock, get_notification_sink())


def get_ticket_service() -> TicketService:
    return TicketService(clock)


def get_payment_service() -> PaymentService:
    return PaymentService(clock)


def get_dashboard_service() -> DashboardService:
    return DashboardService(clock)
