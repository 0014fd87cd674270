"""
Dashboard aggregation for attendees, organizers and gate staff
"""

import re
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ticketing.core.clock import Clock
from ticketing.core.errors import NotFoundError
from ticketing.models import Event, Ticket
from ticketing.services.attendance_service import AttendanceService
from ticketing.services.repositories import AttendanceLogRepo, EventRepo, TicketRepo, UserRepo

DEFAULT_GATE = "Main Gate"


def format_ticket_number(ticket: Optional[Ticket]) -> str:
    """e.g. VIP-000042"""
    if ticket is None or ticket.id is None:
        return ""
    prefix = re.sub(r"\s+", "", ticket.ticket_type or "TICKET").upper()
    return f"{prefix}-{ticket.id:06d}"


class DashboardService:
    """Read-only summaries built from the repositories"""

    def __init__(self, clock: Clock):
        self.clock = clock

    def attendee_dashboard(self, db: Session, user_id: int) -> Dict:
        if UserRepo.get_by_id(db, user_id) is None:
            raise NotFoundError("User", user_id)

        now = self.clock.now()
        tickets = TicketRepo.find_by_user(db, user_id)
        logs = AttendanceLogRepo.find_by_user(db, user_id)
        attended_event_ids = list(dict.fromkeys(log.event_id for log in logs))
        events: Dict[int, Event] = {}
        for ticket in tickets:
            if ticket.event_id not in events:
                events[ticket.event_id] = EventRepo.get_by_id(db, ticket.event_id)

        upcoming = sorted(
            (ticket for ticket in tickets if events[ticket.event_id].start_at > now),
            key=lambda ticket: events[ticket.event_id].start_at
        )

        history = {}
        for ticket in tickets:
            event = events[ticket.event_id]
            if event.end_at < now and event.id not in history:
                history[event.id] = {
                    "event_id": event.id,
                    "event_name": event.name,
                    "ended_at": event.end_at,
                    "location": event.location,
                    "attended": event.id in attended_event_ids,
                }

        return {
            "upcoming_count": len(upcoming),
            "events_attended": len(attended_event_ids),
            "total_spent": float(TicketRepo.sum_price_by_user(db, user_id)),
            "upcoming_tickets": [
                {
                    "ticket_id": ticket.id,
                    "event_id": ticket.event_id,
                    "event_name": events[ticket.event_id].name,
                    "starts_at": events[ticket.event_id].start_at,
                    "ends_at": events[ticket.event_id].end_at,
                    "location": events[ticket.event_id].location,
                    "ticket_number": format_ticket_number(ticket),
                    "qr_code": ticket.qr_code,
                    "price": float(ticket.price),
                    "status": ticket.status,
                }
                for ticket in upcoming
            ],
            "history": list(history.values()),
        }

    @staticmethod
    def organizer_dashboard(db: Session, user_id: int) -> Dict:
        organizer = UserRepo.get_by_id(db, user_id)
        if organizer is None:
            raise NotFoundError("User", user_id)

        events = EventRepo.find_by_organizer(db, [str(organizer.id), organizer.name, organizer.email])
        summaries = []
        for event in events:
            sold = TicketRepo.count_by_event(db, event.id)
            summaries.append({
                "event_id": event.id,
                "name": event.name,
                "starts_at": event.start_at,
                "ends_at": event.end_at,
                "status": event.status.value,
                "tickets_sold": sold,
                "capacity": event.capacity or 0,
                "revenue": float(TicketRepo.sum_price_by_event(db, event.id)),
                "views": event.view_count or 0,
            })

        fill_rates = [
            summary["tickets_sold"] / summary["capacity"] * 100 if summary["capacity"] > 0 else 0
            for summary in summaries
        ]
        return {
            "total_events": len(summaries),
            "total_tickets_sold": sum(summary["tickets_sold"] for summary in summaries),
            "total_revenue": sum(summary["revenue"] for summary in summaries),
            "average_attendance": round(sum(fill_rates) / len(fill_rates)) if fill_rates else 0,
            "events": summaries,
        }

    @staticmethod
    def staff_dashboard(db: Session, event_id: int) -> Dict:
        event = EventRepo.get_by_id(db, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)

        tickets_sold = TicketRepo.count_by_event(db, event_id)
        checked_in = AttendanceService.valid_count(db, event_id)

        scans: List[Dict] = []
        for log in AttendanceService.recent_logs_for_event(db, event_id):
            ticket = TicketRepo.get_by_id(db, log.ticket_id)
            attendee = UserRepo.get_by_id(db, log.user_id)
            scans.append({
                "log_id": log.id,
                "ticket_id": log.ticket_id,
                "ticket_number": format_ticket_number(ticket),
                "attendee_name": attendee.name if attendee else "",
                "attendee_email": attendee.email if attendee else "",
                "scanned_at": log.occurred_at,
                "status": log.status,
                "gate": log.gate or DEFAULT_GATE,
            })

        return {
            "event": {
                "event_id": event.id,
                "name": event.name,
                "starts_at": event.start_at,
                "ends_at": event.end_at,
                "location": event.location,
            },
            "capacity": event.capacity or 0,
            "tickets_sold": tickets_sold,
            "checked_in": checked_in,
            "pending": max(tickets_sold - checked_in, 0),
            "recent_scans": scans,
        }
