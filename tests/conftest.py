"""
Shared fixtures: a throw-away SQLite database, a fixed clock and a recording
notification sink.
"""

from datetime import datetime
from decimal import Decimal
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ticketing.core.db import Base
from ticketing.models import Event, EventStatus, Ticket, TicketStatus, User
from ticketing.services.notification_service import NotificationSink
from ticketing.services.scan_window import ScanWindowPolicy

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_ticketing.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


class RecordingSink(NotificationSink):
    """Keeps sent messages in memory; can be told to fail for chosen users"""

    def __init__(self, fail_for=()):
        self.messages = []
        self.fail_for = set(fail_for)

    def send(self, message):
        if message.user_id in self.fail_for:
            raise RuntimeError("notification backend unavailable")
        self.messages.append(message)


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 5, 20, 12, 0))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def policy():
    return ScanWindowPolicy()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(name=None, role="ATTENDEE"):
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=f"user{counter['n']}@example.com",
            secret="$2b$12$placeholder",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_event(db_session):
    def _make_event(
        name="Summer Concert",
        start_at=datetime(2025, 6, 1, 18, 0),
        end_at=datetime(2025, 6, 1, 22, 0),
        organizer_ref="Acme Events",
        capacity=100,
        ticket_price=Decimal("100.00"),
        status=EventStatus.AVAILABLE,
    ):
        event = Event(
            name=name,
            location="Main Hall",
            category="concert",
            start_at=start_at,
            end_at=end_at,
            ticket_price=ticket_price,
            capacity=capacity,
            organizer_ref=organizer_ref,
            view_count=0,
            tickets_sold=0,
            status=status,
        )
        db_session.add(event)
        db_session.commit()
        return event

    return _make_event


@pytest.fixture
def make_ticket(db_session):
    def _make_ticket(user, event, price=Decimal("100.00"), status=TicketStatus.ACTIVE.value, ticket_type="REGULAR"):
        ticket = Ticket(
            user_id=user.id,
            event_id=event.id,
            qr_code=str(uuid.uuid4()),
            price=price,
            purchased_at=datetime(2025, 5, 1, 9, 0),
            ticket_type=ticket_type,
            status=status,
        )
        db_session.add(ticket)
        db_session.commit()
        return ticket

    return _make_ticket


@pytest.fixture
def session_factory(db_session):
    """Sessionmaker bound to the test database, for components that open their own sessions"""
    return TestingSessionLocal
