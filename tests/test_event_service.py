"""
Tests for event cancellation, deletion and creation
"""

from datetime import datetime
from decimal import Decimal

import pytest

from ticketing.core.errors import AlreadyCancelledError, BadRequestError, ConflictError, NotFoundError
from ticketing.models import AttendanceLog, Event, EventStatus, EventView, Payment, Ticket
from ticketing.services.event_service import DEFAULT_CANCELLATION_REASON, EventService

@pytest.fixture
def service(clock, sink):
    return EventService(clock, sink)

@pytest.fixture
def event_with_tickets(make_user, make_event, make_ticket):
    """E2: two ACTIVE tickets (100.00, 250.00) and one already REFUNDED (99.00)"""
    alice = make_user("Alice")
    bob = make_user("Bob")
    carol = make_user("Carol")
    event = make_event(name="Open Air Festival")
    tickets = [
        make_ticket(alice, event, price=Decimal("100.00")),
        make_ticket(bob, event, price=Decimal("250.00")),
        make_ticket(carol, event, price=Decimal("99.00"), status="REFUNDED"),
    ]
    return event, tickets

def test_cancel_refunds_outstanding_tickets(db_session, service, sink, clock, event_with_tickets):
    event, tickets = event_with_tickets
    result = service.cancel_event(db_session, event.id, "venue lost")

    assert result.tickets_refunded == 2
    assert result.total_refund_amount == Decimal("350.00")

    db_session.expire_all()
    cancelled = db_session.query(Event).filter(Event.id == event.id).first()
    assert cancelled.status is EventStatus.CANCELLED
    assert cancelled.cancellation_reason == "venue lost"
    assert cancelled.cancelled_at == clock.now()

    statuses = [t.status for t in db_session.query(Ticket).order_by(Ticket.id)]
    assert statuses == ["REFUNDED", "REFUNDED", "REFUNDED"]

    assert len(sink.messages) == 2
    assert {m.user_id for m in sink.messages} == {tickets[0].user_id, tickets[1].user_id}
    assert all(m.severity == "warning" and m.title == "Event Cancelled - Refund Issued" for m in sink.messages)
    assert "Open Air Festival" in sink.messages[0].body
    assert "venue lost" in sink.messages[0].body
    assert "₱100.00" in sink.messages[0].body

def test_already_refunded_ticket_untouched(db_session, service, event_with_tickets):
    event, tickets = event_with_tickets
    refunded_id = tickets[2].id
    service.cancel_event(db_session, event.id, "venue lost")

    ticket = db_session.query(Ticket).filter(Ticket.id == refunded_id).first()
    assert ticket.status == "REFUNDED"
    assert ticket.price == Decimal("99.00")

def test_double_cancel_fails_without_notifications(db_session, service, sink, event_with_tickets):
    event, _ = event_with_tickets
    service.cancel_event(db_session, event.id, "venue lost")
    sent = len(sink.messages)

    with pytest.raises(AlreadyCancelledError):
        service.cancel_event(db_session, event.id, "again")

    assert len(sink.messages) == sent
    db_session.expire_all()
    assert db_session.query(Event).filter(Event.id == event.id).first().cancellation_reason == "venue lost"

def test_cancel_unknown_event(db_session, service):
    with pytest.raises(NotFoundError):
        service.cancel_event(db_session, 4242)

@pytest.mark.parametrize("reason", [None, "", "   "])
def test_default_reason(db_session, service, make_event, reason):
    event = make_event()
    service.cancel_event(db_session, event.id, reason)

    db_session.expire_all()
    assert db_session.query(Event).filter(Event.id == event.id).first().cancellation_reason == DEFAULT_CANCELLATION_REASON

def test_numeric_organizer_is_notified(db_session, service, sink, make_user, make_event, make_ticket):
    organizer = make_user("Olga", role="ORGANIZER")
    attendee = make_user("Ann")
    event = make_event(organizer_ref=str(organizer.id))
    make_ticket(attendee, event, price=Decimal("40.00"))

    service.cancel_event(db_session, event.id, "storm")

    organizer_notes = [m for m in sink.messages if m.user_id == organizer.id]
    assert len(organizer_notes) == 1
    assert organizer_notes[0].severity == "error"
    assert organizer_notes[0].title == "Event Cancelled"
    assert "1 tickets were refunded" in organizer_notes[0].body
    assert "₱40.00" in organizer_notes[0].body

def test_display_name_organizer_is_not_notified(db_session, service, sink, make_event):
    event = make_event(organizer_ref="Acme Events")
    service.cancel_event(db_session, event.id)
    assert sink.messages == []

def test_notification_failure_does_not_undo_cancellation(db_session, service, sink, event_with_tickets):
    event, tickets = event_with_tickets
    sink.fail_for.add(tickets[0].user_id)
    result = service.cancel_event(db_session, event.id, "venue lost")

    assert result.tickets_refunded == 2
    assert [m.user_id for m in sink.messages] == [tickets[1].user_id]
    db_session.expire_all()
    assert db_session.query(Event).filter(Event.id == event.id).first().status is EventStatus.CANCELLED

def test_delete_with_tickets_conflicts_and_changes_nothing(db_session, service, event_with_tickets):
    event, _ = event_with_tickets
    with pytest.raises(ConflictError):
        service.delete_event(db_session, event.id)

    db_session.expire_all()
    assert db_session.query(Event).filter(Event.id == event.id).count() == 1
    assert db_session.query(Ticket).filter(Ticket.event_id == event.id).count() == 3

def test_delete_removes_dependents(db_session, service, make_user, make_event):
    user = make_user()
    event = make_event()
    db_session.add(EventView(event_id=event.id, user_id=user.id))
    db_session.add(Payment(
        user_id=user.id, event_id=event.id, amount=Decimal("10.00"), paid_at=datetime(2025, 5, 1),
        method="card", status="FAILED", transaction_reference="tx-1"
    ))
    db_session.commit()

    assert EventService.can_delete_event(db_session, event.id)
    service.delete_event(db_session, event.id)

    assert db_session.query(Event).count() == 0
    assert db_session.query(EventView).count() == 0
    assert db_session.query(Payment).count() == 0
    assert db_session.query(AttendanceLog).count() == 0

def test_delete_unknown_event(db_session, service):
    with pytest.raises(NotFoundError):
        service.delete_event(db_session, 4242)

def test_create_event_notifies_numeric_organizer(db_session, service, sink, make_user):
    organizer = make_user("Olga", role="ORGANIZER")
    event = service.create_event(db_session, {
        "name": "Tech Talk",
        "location": "Room 1",
        "category": "seminar",
        "start_at": datetime(2025, 7, 1, 9, 0),
        "end_at": datetime(2025, 7, 1, 11, 0),
        "ticket_price": Decimal("15.50"),
        "capacity": 50,
        "organizer_ref": str(organizer.id),
    })

    assert event.status is EventStatus.AVAILABLE
    assert event.view_count == 0
    assert [m.title for m in sink.messages] == ["Event Created"]

def test_create_event_rejects_inverted_schedule(db_session, service):
    with pytest.raises(BadRequestError):
        service.create_event(db_session, {
            "name": "Backwards",
            "location": "Room 1",
            "category": "seminar",
            "start_at": datetime(2025, 7, 1, 12, 0),
            "end_at": datetime(2025, 7, 1, 11, 0),
            "organizer_ref": "someone",
        })

def test_update_event_keeps_omitted_fields(db_session, service, make_event):
    event = make_event()
    updated = service.update_event(db_session, event.id, {"name": "Renamed", "capacity": 10})

    assert updated.name == "Renamed"
    assert updated.capacity == 10
    assert updated.location == "Main Hall"
