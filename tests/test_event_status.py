"""
Tests for event status parsing and persistence
"""

import pytest
from sqlalchemy import text

from ticketing.models import Event, EventStatus

@pytest.mark.parametrize("raw, expected", [
    ("ACTIVE", EventStatus.AVAILABLE),
    ("published", EventStatus.AVAILABLE),
    ("Public", EventStatus.AVAILABLE),
    ("AVAILABLE", EventStatus.AVAILABLE),
    ("EXPIRED", EventStatus.ENDED),
    ("ended", EventStatus.ENDED),
    ("CANCELED", EventStatus.CANCELLED),
    (" cancelled ", EventStatus.CANCELLED),
    ("ARCHIVED", EventStatus.ARCHIVED),
    ("something-else", EventStatus.AVAILABLE),
])
def test_parse_maps_legacy_values(raw, expected):
    assert EventStatus.parse(raw) is expected

def test_parse_none():
    assert EventStatus.parse(None) is None

def test_legacy_value_is_mapped_on_read(db_session, make_event):
    event = make_event()
    db_session.execute(text("UPDATE events SET status = 'CANCELED' WHERE id = :id"), {"id": event.id})
    db_session.commit()
    db_session.expire_all()

    reloaded = db_session.query(Event).filter(Event.id == event.id).first()
    assert reloaded.status is EventStatus.CANCELLED

def test_writes_emit_canonical_name(db_session, make_event):
    event = make_event()
    event.status = "expired"
    db_session.commit()

    stored = db_session.execute(text("SELECT status FROM events WHERE id = :id"), {"id": event.id}).scalar()
    assert stored == "ENDED"

@pytest.mark.parametrize("ref,expected", [
    ("42", 42),
    (" 7 ", 7),
    ("Acme Events", None),
    ("٣", None),
    ("²", None),
    ("", None),
])
def test_organizer_user_id_accepts_ascii_digits_only(ref, expected):
    assert Event(organizer_ref=ref).organizer_user_id() == expected
