"""
HTTP tests for the check-in and cancellation surface
"""

import io
from decimal import Decimal

import pandas as pd
import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from main import app
from ticketing.api import deps
from ticketing.core.db import get_db
from ticketing.services.attendance_service import AttendanceService
from ticketing.services.dashboard_service import DashboardService
from ticketing.services.event_service import EventService
from ticketing.services.payment_service import PaymentService
from ticketing.services.ticket_service import TicketService

@pytest.fixture
def client(session_factory, clock, sink, policy):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_attendance_service] = lambda: AttendanceService(policy)
    app.dependency_overrides[deps.get_event_service] = lambda: EventService(clock, sink)
    app.dependency_overrides[deps.get_ticket_service] = lambda: TicketService(clock)
    app.dependency_overrides[deps.get_payment_service] = lambda: PaymentService(clock)
    app.dependency_overrides[deps.get_dashboard_service] = lambda: DashboardService(clock)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def e1(make_user, make_event, make_ticket):
    """E1 2025-06-01 18:00-22:00Z with ticket T1 held by U1"""
    user = make_user("Ursula")
    event = make_event(name="E1")
    ticket = make_ticket(user, event)
    return {"user": user.id, "event": event.id, "ticket": ticket.id}

@pytest.fixture
def e2(make_user, make_event, make_ticket):
    event = make_event(name="E2")
    make_ticket(make_user(), event, price=Decimal("100.00"))
    make_ticket(make_user(), event, price=Decimal("250.00"))
    make_ticket(make_user(), event, price=Decimal("99.00"), status="REFUNDED")
    return event.id

def scan_body(ids, start_time, gate=None):
    body = {
        "ticket": {"id": ids["ticket"]},
        "event": {"id": ids["event"]},
        "user": {"id": ids["user"]},
        "startTime": start_time,
    }
    if gate:
        body["gate"] = gate
    return body

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_in_window_scan_then_re_entry(client, e1):
    first = client.post("/api/attendance", json=scan_body(e1, "2025-06-01T17:00:00Z"))
    assert first.status_code == 200
    assert first.json()["reEntryCount"] == 0
    assert first.json()["status"] == "valid"
    assert first.json()["ticketId"] == e1["ticket"]

    second = client.post("/api/attendance", json=scan_body(e1, "2025-06-01T19:00:00Z", gate="East"))
    assert second.status_code == 200
    assert second.json()["reEntryCount"] == 1
    assert second.json()["gate"] == "East"

def test_out_of_window_scan_is_forbidden(client, e1):
    response = client.post("/api/attendance", json=scan_body(e1, "2025-06-01T15:00:00Z"))
    assert response.status_code == 403
    assert response.json()["error_code"] == "OUTSIDE_SCAN_WINDOW"

    stats = client.get(f"/api/attendance/event/{e1['event']}/stats").json()
    assert stats == {"checkInCount": 0, "totalLogs": 0}

def test_missing_fields_are_400(client, e1):
    body = scan_body(e1, "2025-06-01T17:00:00Z")
    del body["event"]
    response = client.post("/api/attendance", json=body)
    assert response.status_code == 400
    assert response.json()["error_code"] == "BAD_REQUEST"

def test_malformed_timestamp_is_400(client, e1):
    response = client.post("/api/attendance", json=scan_body(e1, "not-a-time"))
    assert response.status_code == 400

def test_recent_and_stats(client, e1):
    for hour in (17, 18, 19):
        client.post("/api/attendance", json=scan_body(e1, f"2025-06-01T{hour}:00:00Z"))

    recent = client.get(f"/api/attendance/event/{e1['event']}/recent").json()
    assert [log["reEntryCount"] for log in recent] == [2, 1, 0]

    stats = client.get(f"/api/attendance/event/{e1['event']}/stats").json()
    assert stats == {"checkInCount": 3, "totalLogs": 3}

def test_cancel_then_double_cancel_then_delete(client, sink, e2):
    response = client.post(f"/api/events/{e2}/cancel", json={"reason": "venue lost"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["ticketsRefunded"] == 2
    assert body["totalRefundAmount"] == pytest.approx(350.00)
    assert len(sink.messages) == 2

    event = client.get(f"/api/events/{e2}").json()
    assert event["status"] == "CANCELLED"
    assert event["cancellationReason"] == "venue lost"
    assert event["cancelledAt"] is not None

    again = client.post(f"/api/events/{e2}/cancel", json={"reason": "venue lost"})
    assert again.status_code == 409
    assert again.json()["error_code"] == "ALREADY_CANCELLED"
    assert len(sink.messages) == 2

    delete = client.delete(f"/api/events/{e2}")
    assert delete.status_code == 409
    assert len(client.get(f"/api/tickets/event/{e2}").json()) == 3

def test_cancel_without_body_uses_default_reason(client, make_event):
    event = make_event()
    assert client.post(f"/api/events/{event.id}/cancel").status_code == 200
    assert client.get(f"/api/events/{event.id}").json()["cancellationReason"] == "Unforeseen circumstances"

def test_cancel_unknown_event_is_404(client, db_session):
    assert client.post("/api/events/777/cancel", json={}).status_code == 404

def test_scan_after_cancellation_is_ticket_invalid(client, e1):
    client.post(f"/api/events/{e1['event']}/cancel", json={"reason": "rain"})
    response = client.post("/api/attendance", json=scan_body(e1, "2025-06-01T19:00:00Z"))
    assert response.status_code == 409
    assert response.json()["error_code"] == "TICKET_INVALID"

def test_delete_event_without_tickets(client, make_event):
    event = make_event()
    assert client.get(f"/api/events/{event.id}/can-delete").json() == {"canDelete": True}
    assert client.delete(f"/api/events/{event.id}").status_code == 204
    assert client.get(f"/api/events/{event.id}").status_code == 404

def test_create_event_and_book(client, make_user):
    user = make_user()
    created = client.post("/api/events", json={
        "name": "Jazz Night",
        "location": "Club",
        "category": "concert",
        "startAt": "2025-08-01T20:00:00Z",
        "endAt": "2025-08-01T23:00:00Z",
        "ticketPrice": 35.5,
        "capacity": 2,
        "organizerRef": "Blue Note",
    })
    assert created.status_code == 201
    event_id = created.json()["id"]
    assert created.json()["status"] == "AVAILABLE"

    booked = client.post("/api/tickets/book", json={"userId": user.id, "eventId": event_id, "quantity": 2})
    assert booked.status_code == 201
    assert [t["price"] for t in booked.json()] == [35.5, 35.5]

    sold_out = client.post("/api/tickets/book", json={"userId": user.id, "eventId": event_id})
    assert sold_out.status_code == 409

def test_unique_view_endpoint(client, make_user, make_event):
    user = make_user()
    event = make_event()
    first = client.post(f"/api/events/{event.id}/view", json={"userId": user.id, "role": "attendee"}).json()
    second = client.post(f"/api/events/{event.id}/view", json={"userId": user.id, "role": "attendee"}).json()
    staff = client.post(f"/api/events/{event.id}/view", json={"userId": user.id, "role": "staff"}).json()

    assert first == {"counted": True, "viewCount": 1}
    assert second == {"counted": False, "viewCount": 1}
    assert staff == {"counted": False, "viewCount": 1}

def test_signup_and_login(client, db_session):
    signup = client.post("/api/auth/signup", json={
        "name": "Grace",
        "email": "grace@example.com",
        "password": "s3cret",
        "role": "organizer",
        "contact": "0917",
    })
    assert signup.status_code == 200
    assert signup.json()["data"]["role"] == "ORGANIZER"
    assert "secret" not in signup.json()["data"]

    duplicate = client.post("/api/auth/signup", json={
        "name": "Grace", "email": "grace@example.com", "password": "x"
    })
    assert duplicate.status_code == 400

    login = client.post("/api/auth/login", json={"email": "grace@example.com", "password": "s3cret"})
    assert login.status_code == 200
    assert login.json()["name"] == "Grace"

    wrong = client.post("/api/auth/login", json={"email": "grace@example.com", "password": "nope"})
    assert wrong.status_code == 400

def test_attendance_export(client, e1):
    client.post("/api/attendance", json=scan_body(e1, "2025-06-01T17:00:00Z", gate="North"))
    response = client.get(f"/api/attendance/event/{e1['event']}/export.xlsx")
    assert response.status_code == 200

    df = pd.read_excel(io.BytesIO(response.content))
    assert list(df["Gate"]) == ["North"]
    assert list(df["Re-entry"]) == [0]

def test_staff_dashboard_defaults_gate(client, e1):
    client.post("/api/attendance", json=scan_body(e1, "2025-06-01T17:00:00Z"))
    data = client.get(f"/api/dashboard/staff/{e1['event']}").json()["data"]

    assert data["tickets_sold"] == 1
    assert data["checked_in"] == 1
    assert data["pending"] == 0
    assert data["recent_scans"][0]["gate"] == "Main Gate"
    assert data["recent_scans"][0]["attendee_name"] == "Ursula"

def test_ticket_qr_png(client, e1):
    response = client.get(f"/api/tickets/{e1['ticket']}/qr.png")
    assert response.status_code == 200
    assert response.content.startswith(b"\x89PNG")

def test_live_feed_welcome_and_ping(client, e1):
    with client.websocket_connect(f"/ws/events/{e1['event']}") as websocket:
        welcome = websocket.receive_json()
        assert welcome["type"] == "connection"
        assert welcome["event_id"] == e1["event"]

        websocket.send_text('{"type": "ping", "timestamp": 42}')
        assert websocket.receive_json() == {"type": "pong", "timestamp": 42}

def test_live_feed_unknown_event_is_closed(client, db_session):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws/events/999") as websocket:
            websocket.receive_json()
    assert excinfo.value.code == 4004

def test_list_all_logs_newest_first(client, e1):
    for hour in (17, 18):
        client.post("/api/attendance", json=scan_body(e1, f"2025-06-01T{hour}:00:00Z"))

    logs = client.get("/api/attendance").json()
    assert [log["reEntryCount"] for log in logs] == [1, 0]

def test_ticket_lookup_by_qr_code(client, db_session, e1):
    qr_code = client.get(f"/api/tickets/{e1['ticket']}").json()["qrCode"]

    found = client.get(f"/api/tickets/qr/{qr_code}")
    assert found.status_code == 200
    assert found.json()["id"] == e1["ticket"]
    assert client.get("/api/tickets/qr/unknown-code").status_code == 404
