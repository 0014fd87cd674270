"""
Attendance check-in: validates ticket scans and records attendance logs
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.core.clock import to_utc
from ticketing.core.db import transaction
from ticketing.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    OutsideScanWindowError,
    StoreFailureError,
    TicketInvalidError,
)
from ticketing.models import AttendanceLog, AttendanceStatus, TicketStatus
from ticketing.services.repositories import AttendanceLogRepo, EventRepo, TicketRepo
from ticketing.services.scan_window import ScanWindowPolicy

logger = logging.getLogger(__name__)

RECENT_LOG_LIMIT = 25
SCAN_ATTEMPTS = 3


@dataclass(frozen=True)
class ScanRequest:
    ticket_id: Optional[int]
    event_id: Optional[int]
    user_id: Optional[int]
    occurred_at: Optional[datetime]
    gate: Optional[str] = None


class AttendanceService:
    """Service for recording ticket scans"""

    def __init__(self, policy: ScanWindowPolicy):
        self.policy = policy

    def record_scan(self, db: Session, scan: ScanRequest) -> AttendanceLog:
        """Validate a scan and persist its attendance log.

        The ticket row is locked while the previous log is read, so two
        concurrent scans of one ticket cannot compute the same re-entry count.
        Should one still collide on the (ticket, status, re-entry) unique
        constraint, the count is recomputed and the write retried.

        Raises:
            BadRequestError: A reference is missing, or the ticket belongs to
                another event or user.
            NotFoundError: The event or ticket does not exist.
            OutsideScanWindowError: The scan time is outside the event window.
            TicketInvalidError: The ticket was refunded or cancelled.
            ConflictError: Concurrent scans kept colliding on the re-entry count.
        """
        missing = [
            name for name, value in (
                ("ticket", scan.ticket_id),
                ("event", scan.event_id),
                ("user", scan.user_id),
                ("startTime", scan.occurred_at),
            )
            if value is None
        ]
        if missing:
            raise BadRequestError(f"Missing required fields: {', '.join(missing)}")

        occurred_at = to_utc(scan.occurred_at)

        for attempt in range(1, SCAN_ATTEMPTS + 1):
            try:
                log = self._write_scan(db, scan, occurred_at)
            except StoreFailureError as exc:
                if not isinstance(exc.__cause__, IntegrityError):
                    raise
                logger.warning(f"Re-entry count of ticket {scan.ticket_id} taken by a concurrent scan (attempt {attempt})")
                continue
            db.refresh(log)
            logger.info(f"Recorded scan of ticket {log.ticket_id} for event {log.event_id} (re-entry {log.re_entry_count})")
            return log

        raise ConflictError(f"Ticket {scan.ticket_id} is being scanned concurrently, try again")

    def _write_scan(self, db: Session, scan: ScanRequest, occurred_at: datetime) -> AttendanceLog:
        with transaction(db):
            event = EventRepo.get_by_id(db, scan.event_id)
            if event is None:
                raise NotFoundError("Event", scan.event_id)

            if not self.policy.is_within_scan_window(occurred_at, event):
                logger.warning(f"Rejected scan of ticket {scan.ticket_id} at {occurred_at.isoformat()}: outside scan window of event {event.id}")
                raise OutsideScanWindowError("Scan is outside the event's scan window")

            ticket = TicketRepo.get_for_update(db, scan.ticket_id)
            if ticket is None:
                raise NotFoundError("Ticket", scan.ticket_id)
            if ticket.event_id != scan.event_id:
                raise BadRequestError("Ticket does not belong to this event")
            if ticket.user_id != scan.user_id:
                raise BadRequestError("Ticket does not belong to this user")
            if TicketStatus.is_terminal(ticket.status):
                raise TicketInvalidError(f"Ticket is {ticket.status.lower()}")

            prior = AttendanceLogRepo.latest_for_ticket(db, ticket.id, status=AttendanceStatus.VALID.value)
            re_entry_count = 0 if prior is None else prior.re_entry_count + 1

            log = AttendanceLogRepo.add(db, AttendanceLog(
                ticket_id=ticket.id,
                event_id=event.id,
                user_id=ticket.user_id,
                occurred_at=occurred_at,
                status=AttendanceStatus.VALID.value,
                re_entry_count=re_entry_count,
                gate=scan.gate,
            ))

        return log

    @staticmethod
    def get_log(db: Session, log_id: int) -> AttendanceLog:
        log = AttendanceLogRepo.get_by_id(db, log_id)
        if log is None:
            raise NotFoundError("Attendance log", log_id)
        return log

    @staticmethod
    def list_logs(db: Session) -> List[AttendanceLog]:
        return AttendanceLogRepo.list_all(db)

    @staticmethod
    def logs_for_event(db: Session, event_id: int) -> List[AttendanceLog]:
        return AttendanceLogRepo.find_by_event(db, event_id)

    @staticmethod
    def logs_for_user(db: Session, user_id: int) -> List[AttendanceLog]:
        return AttendanceLogRepo.find_by_user(db, user_id)

    @staticmethod
    def recent_logs_for_event(db: Session, event_id: int) -> List[AttendanceLog]:
        """Newest logs first, at most 25"""
        return AttendanceLogRepo.top_by_event(db, event_id, RECENT_LOG_LIMIT)

    @staticmethod
    def valid_count(db: Session, event_id: int) -> int:
        """Logs whose status contains "valid", case-insensitively"""
        return AttendanceLogRepo.count_by_event(db, event_id, status_contains=AttendanceStatus.VALID.value)

    @staticmethod
    def total_count(db: Session, event_id: int) -> int:
        return AttendanceLogRepo.count_by_event(db, event_id)
