"""
Event lifecycle: creation, updates, unique views, cancellation and deletion
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.core.clock import Clock, to_utc
from ticketing.core.db import transaction
from ticketing.core.errors import (
    AlreadyCancelledError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    StoreFailureError,
)
from ticketing.models import Event, EventStatus, Ticket, TicketStatus
from ticketing.services.notification_service import NotificationMessage, NotificationSink, dispatch_notifications
from ticketing.services.repositories import (
    AttendanceLogRepo,
    EventRepo,
    EventViewRepo,
    PaymentRepo,
    TicketRepo,
)

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = "Unforeseen circumstances"
EDITABLE_FIELDS = (
    "name", "location", "category", "start_at", "end_at", "ticket_price",
    "capacity", "organizer_ref", "description",
)


@dataclass(frozen=True)
class CancellationResult:
    event_id: int
    tickets_refunded: int
    total_refund_amount: Decimal

    @property
    def message(self) -> str:
        return f"Event cancelled successfully. {self.tickets_refunded} tickets refunded."


def format_amount(amount: Decimal) -> str:
    return f"₱{amount:.2f}"


class EventService:
    """Service for event operations"""

    def __init__(self, clock: Clock, notification_sink: NotificationSink):
        self.clock = clock
        self.notification_sink = notification_sink

    # -------- queries --------

    @staticmethod
    def list_events(db: Session) -> List[Event]:
        return EventRepo.list_all(db)

    @staticmethod
    def get_event(db: Session, event_id: int) -> Event:
        event = EventRepo.get_by_id(db, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    @staticmethod
    def can_delete_event(db: Session, event_id: int) -> bool:
        return TicketRepo.count_by_event(db, event_id) == 0

    # -------- create / update --------

    def create_event(self, db: Session, data: Dict[str, Any]) -> Event:
        """Create an event and tell a numeric organizer it is live"""
        values = self._validated(data)
        with transaction(db):
            event = EventRepo.add(db, Event(
                view_count=0,
                tickets_sold=0,
                status=EventStatus.AVAILABLE,
                **values,
            ))
            messages = []
            organizer_id = event.organizer_user_id()
            if organizer_id is not None:
                messages.append(NotificationMessage(
                    user_id=organizer_id,
                    severity="success",
                    title="Event Created",
                    body=f'Your event "{event.name}" has been successfully created and is now live!',
                    event_id=event.id,
                ))

        dispatch_notifications(self.notification_sink, messages)
        db.refresh(event)
        logger.info(f"Created event {event.id} ({event.name})")
        return event

    def update_event(self, db: Session, event_id: int, data: Dict[str, Any]) -> Event:
        with transaction(db):
            event = EventRepo.get_for_update(db, event_id)
            if event is None:
                raise NotFoundError("Event", event_id)
            merged = {field: getattr(event, field) for field in EDITABLE_FIELDS}
            merged.update({key: value for key, value in data.items() if value is not None})
            for field, value in self._validated(merged).items():
                setattr(event, field, value)
        db.refresh(event)
        return event

    @staticmethod
    def _validated(data: Dict[str, Any]) -> Dict[str, Any]:
        values = {field: data.get(field) for field in EDITABLE_FIELDS}
        required = ("name", "location", "category", "start_at", "end_at", "organizer_ref")
        missing = [field for field in required if values.get(field) in (None, "")]
        if missing:
            raise BadRequestError(f"Missing required fields: {', '.join(missing)}")

        values["start_at"] = to_utc(values["start_at"])
        values["end_at"] = to_utc(values["end_at"])
        if values["start_at"] > values["end_at"]:
            raise BadRequestError("Event start must not be after its end")

        values["capacity"] = values.get("capacity") or 0
        if values["capacity"] < 0:
            raise BadRequestError("Capacity cannot be negative")

        values["ticket_price"] = Decimal(str(values.get("ticket_price") or 0))
        if values["ticket_price"] < 0:
            raise BadRequestError("Ticket price cannot be negative")

        values["organizer_ref"] = str(values["organizer_ref"])
        return values

    # -------- unique views --------

    def track_unique_view(self, db: Session, event_id: int, user_id: Optional[int], role: Optional[str]) -> bool:
        """Count a first visit by an attendee. Returns True when the view was counted.

        Other roles and repeat visits are ignored. A concurrent insert of the
        same (event, user) pair trips the unique constraint and is treated as
        already counted.
        """
        if user_id is None or not role or role.strip().lower() != "attendee":
            return False

        try:
            with transaction(db):
                if EventRepo.get_by_id(db, event_id) is None:
                    raise NotFoundError("Event", event_id)
                if EventViewRepo.exists(db, event_id, user_id):
                    return False
                EventViewRepo.add(db, event_id, user_id)
                EventRepo.increment_views(db, event_id)
        except StoreFailureError as exc:
            if isinstance(exc.__cause__, IntegrityError):
                logger.info(f"View of event {event_id} by user {user_id} already counted")
                return False
            raise
        return True

    # -------- cancellation --------

    def cancel_event(self, db: Session, event_id: int, reason: Optional[str] = None) -> CancellationResult:
        """Cancel an event and refund every outstanding ticket.

        Runs as one transaction holding the event row lock. Ticket holders and
        a numeric organizer are notified only after the refunds are committed.

        Raises:
            NotFoundError: The event does not exist.
            AlreadyCancelledError: The event was cancelled before.
        """
        reason = reason.strip() if reason and reason.strip() else DEFAULT_CANCELLATION_REASON

        with transaction(db):
            event = EventRepo.get_for_update(db, event_id)
            if event is None:
                raise NotFoundError("Event", event_id)
            if event.status == EventStatus.CANCELLED:
                raise AlreadyCancelledError(event_id)

            refunded: List[Ticket] = []
            total_refund = Decimal("0.00")
            for ticket in TicketRepo.find_by_event(db, event_id):
                if TicketStatus.is_terminal(ticket.status):
                    continue
                ticket.status = TicketStatus.REFUNDED.value
                total_refund += Decimal(ticket.price)
                refunded.append(ticket)

            event.status = EventStatus.CANCELLED
            event.cancellation_reason = reason
            event.cancelled_at = self.clock.now()

            messages = self._cancellation_notices(event, refunded, reason, total_refund)

        result = CancellationResult(
            event_id=event_id,
            tickets_refunded=len(refunded),
            total_refund_amount=total_refund,
        )
        logger.info(f"Cancelled event {event_id}: {result.tickets_refunded} tickets refunded, total {total_refund:.2f}")

        dispatch_notifications(self.notification_sink, messages)
        return result

    @staticmethod
    def _cancellation_notices(event: Event, refunded: List[Ticket], reason: str, total: Decimal) -> List[NotificationMessage]:
        messages = [
            NotificationMessage(
                user_id=ticket.user_id,
                severity="warning",
                title="Event Cancelled - Refund Issued",
                body=(
                    f'The event "{event.name}" has been cancelled. Reason: {reason}. '
                    f"A refund of {format_amount(Decimal(ticket.price))} has been issued to your original payment method."
                ),
                event_id=event.id,
            )
            for ticket in refunded
        ]
        organizer_id = event.organizer_user_id()
        if organizer_id is not None:
            messages.append(NotificationMessage(
                user_id=organizer_id,
                severity="error",
                title="Event Cancelled",
                body=(
                    f'Your event "{event.name}" has been cancelled. '
                    f"{len(refunded)} tickets were refunded for a total of {format_amount(total)}."
                ),
                event_id=event.id,
            ))
        return messages

    # -------- deletion --------

    def delete_event(self, db: Session, event_id: int) -> None:
        """Delete an event that never sold a ticket, together with its dependents.

        Raises:
            NotFoundError: The event does not exist.
            ConflictError: Tickets exist for the event; cancel it instead.
        """
        with transaction(db):
            event = EventRepo.get_for_update(db, event_id)
            if event is None:
                raise NotFoundError("Event", event_id)
            if TicketRepo.count_by_event(db, event_id) > 0:
                raise ConflictError(
                    "Cannot delete event with existing tickets. Use cancel event instead to refund ticket holders."
                )

            AttendanceLogRepo.delete_by_event(db, event_id)
            PaymentRepo.delete_by_event(db, event_id)
            EventViewRepo.delete_by_event(db, event_id)
            EventRepo.delete(db, event)

        logger.info(f"Deleted event {event_id}")
