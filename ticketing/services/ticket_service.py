"""
Ticket booking and refunds
"""

import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ticketing.core.clock import Clock
from ticketing.core.db import transaction
from ticketing.core.errors import BadRequestError, ConflictError, NotFoundError
from ticketing.models import EventStatus, Ticket, TicketStatus
from ticketing.services.repositories import EventRepo, TicketRepo, UserRepo

logger = logging.getLogger(__name__)


class TicketService:
    """Service for ticket purchase and lifecycle"""

    def __init__(self, clock: Clock):
        self.clock = clock

    @staticmethod
    def get_ticket(db: Session, ticket_id: int) -> Ticket:
        ticket = TicketRepo.get_by_id(db, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket", ticket_id)
        return ticket

    @staticmethod
    def get_by_qr_code(db: Session, qr_code: str) -> Ticket:
        """Resolve a scanned QR payload to its ticket"""
        ticket = TicketRepo.get_by_qr_code(db, qr_code.strip())
        if ticket is None:
            raise NotFoundError("Ticket", qr_code)
        return ticket

    @staticmethod
    def list_tickets(db: Session) -> List[Ticket]:
        return TicketRepo.list_all(db)

    @staticmethod
    def tickets_for_user(db: Session, user_id: int) -> List[Ticket]:
        return TicketRepo.find_by_user(db, user_id)

    @staticmethod
    def tickets_for_event(db: Session, event_id: int) -> List[Ticket]:
        return TicketRepo.find_by_event(db, event_id)

    def book_tickets(
        self,
        db: Session,
        user_id: int,
        event_id: int,
        quantity: int = 1,
        ticket_type: Optional[str] = None
    ) -> List[Ticket]:
        """Issue tickets at the event's current price.

        The event row is locked so that concurrent bookings cannot oversell
        capacity, and bookings for events that are not AVAILABLE are refused.
        """
        if quantity < 1:
            raise BadRequestError("Quantity must be at least 1")
        ticket_type = (ticket_type or "").strip() or "REGULAR"

        with transaction(db):
            if UserRepo.get_by_id(db, user_id) is None:
                raise NotFoundError("User", user_id)
            event = EventRepo.get_for_update(db, event_id)
            if event is None:
                raise NotFoundError("Event", event_id)
            if event.status != EventStatus.AVAILABLE:
                raise ConflictError(f"Event is {event.status.value.lower()} and no longer sells tickets")

            sold = event.tickets_sold or 0
            if event.capacity and sold + quantity > event.capacity:
                raise ConflictError(f"Only {max(event.capacity - sold, 0)} tickets left for this event")

            now = self.clock.now()
            tickets = TicketRepo.add_all(db, [
                Ticket(
                    user_id=user_id,
                    event_id=event_id,
                    qr_code=str(uuid.uuid4()),
                    price=Decimal(event.ticket_price),
                    purchased_at=now,
                    ticket_type=ticket_type,
                    status=TicketStatus.ACTIVE.value,
                )
                for _ in range(quantity)
            ])
            event.tickets_sold = sold + quantity

        for ticket in tickets:
            db.refresh(ticket)
        logger.info(f"Booked {quantity} ticket(s) for user {user_id} on event {event_id}")
        return tickets

    @staticmethod
    def refund_ticket(db: Session, ticket_id: int) -> Ticket:
        """ACTIVE -> REFUNDED for a single ticket"""
        with transaction(db):
            ticket = TicketRepo.get_for_update(db, ticket_id)
            if ticket is None:
                raise NotFoundError("Ticket", ticket_id)
            if TicketStatus.is_terminal(ticket.status):
                raise ConflictError(f"Ticket is already {ticket.status.lower()}")
            ticket.status = TicketStatus.REFUNDED.value
        db.refresh(ticket)
        return ticket
