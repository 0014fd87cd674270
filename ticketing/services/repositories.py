"""
Repository layer: the read/write primitives the services build on.

Repositories never commit. Mutations are flushed into the caller's session and
become durable when the surrounding ``transaction(db)`` block commits.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ticketing.models import AttendanceLog, Event, EventView, Notification, Payment, Role, Ticket, User


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_id(db: Session, event_id: int) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def get_for_update(db: Session, event_id: int) -> Optional[Event]:
        """Load an event holding its row lock until the transaction ends.

        The no-op UPDATE takes the write lock first, so backends that ignore
        FOR UPDATE (SQLite) still serialise concurrent writers on this row.
        """
        db.query(Event).filter(Event.id == event_id).update(
            {Event.tickets_sold: Event.tickets_sold}, synchronize_session=False
        )
        return db.query(Event).filter(Event.id == event_id).with_for_update().populate_existing().first()

    @staticmethod
    def list_all(db: Session) -> List[Event]:
        return db.query(Event).order_by(Event.start_at).all()

    @staticmethod
    def find_by_organizer(db: Session, identifiers: List[str]) -> List[Event]:
        return db.query(Event).filter(Event.organizer_ref.in_(identifiers)).order_by(Event.start_at).all()

    @staticmethod
    def add(db: Session, event: Event) -> Event:
        db.add(event)
        db.flush()
        return event

    @staticmethod
    def increment_views(db: Session, event_id: int) -> None:
        db.query(Event).filter(Event.id == event_id).update(
            {Event.view_count: Event.view_count + 1}, synchronize_session=False
        )

    @staticmethod
    def delete(db: Session, event: Event) -> None:
        db.delete(event)
        db.flush()


# -------- Ticket repository --------

class TicketRepo:
    @staticmethod
    def get_by_id(db: Session, ticket_id: int) -> Optional[Ticket]:
        return db.query(Ticket).filter(Ticket.id == ticket_id).first()

    @staticmethod
    def get_for_update(db: Session, ticket_id: int) -> Optional[Ticket]:
        """Load a ticket holding its row lock; see EventRepo.get_for_update"""
        db.query(Ticket).filter(Ticket.id == ticket_id).update(
            {Ticket.status: Ticket.status}, synchronize_session=False
        )
        return db.query(Ticket).filter(Ticket.id == ticket_id).with_for_update().populate_existing().first()

    @staticmethod
    def get_by_qr_code(db: Session, qr_code: str) -> Optional[Ticket]:
        return db.query(Ticket).filter(Ticket.qr_code == qr_code).first()

    @staticmethod
    def list_all(db: Session) -> List[Ticket]:
        return db.query(Ticket).order_by(Ticket.id).all()

    @staticmethod
    def find_by_event(db: Session, event_id: int) -> List[Ticket]:
        return db.query(Ticket).filter(Ticket.event_id == event_id).order_by(Ticket.id).all()

    @staticmethod
    def find_by_user(db: Session, user_id: int) -> List[Ticket]:
        return db.query(Ticket).filter(Ticket.user_id == user_id).order_by(Ticket.id).all()

    @staticmethod
    def count_by_event(db: Session, event_id: int) -> int:
        return db.query(func.count(Ticket.id)).filter(Ticket.event_id == event_id).scalar() or 0

    @staticmethod
    def sum_price_by_event(db: Session, event_id: int) -> Decimal:
        total = db.query(func.coalesce(func.sum(Ticket.price), 0)).filter(Ticket.event_id == event_id).scalar()
        return Decimal(str(total))

    @staticmethod
    def sum_price_by_user(db: Session, user_id: int) -> Decimal:
        total = db.query(func.coalesce(func.sum(Ticket.price), 0)).filter(Ticket.user_id == user_id).scalar()
        return Decimal(str(total))

    @staticmethod
    def add_all(db: Session, tickets: List[Ticket]) -> List[Ticket]:
        db.add_all(tickets)
        db.flush()
        return tickets


# -------- Attendance log repository --------

class AttendanceLogRepo:
    @staticmethod
    def get_by_id(db: Session, log_id: int) -> Optional[AttendanceLog]:
        return db.query(AttendanceLog).filter(AttendanceLog.id == log_id).first()

    @staticmethod
    def list_all(db: Session) -> List[AttendanceLog]:
        return db.query(AttendanceLog).order_by(AttendanceLog.occurred_at.desc(), AttendanceLog.id.desc()).all()

    @staticmethod
    def latest_for_ticket(db: Session, ticket_id: int, status: Optional[str] = None) -> Optional[AttendanceLog]:
        """Most recent log for a ticket by occurred_at; ties go to the higher id"""
        query = db.query(AttendanceLog).filter(AttendanceLog.ticket_id == ticket_id)
        if status is not None:
            query = query.filter(AttendanceLog.status == status)
        return query.order_by(AttendanceLog.occurred_at.desc(), AttendanceLog.id.desc()).first()

    @staticmethod
    def find_by_event(db: Session, event_id: int) -> List[AttendanceLog]:
        return (
            db.query(AttendanceLog)
            .filter(AttendanceLog.event_id == event_id)
            .order_by(AttendanceLog.occurred_at, AttendanceLog.id)
            .all()
        )

    @staticmethod
    def find_by_user(db: Session, user_id: int) -> List[AttendanceLog]:
        return (
            db.query(AttendanceLog)
            .filter(AttendanceLog.user_id == user_id)
            .order_by(AttendanceLog.occurred_at.desc(), AttendanceLog.id.desc())
            .all()
        )

    @staticmethod
    def top_by_event(db: Session, event_id: int, limit: int) -> List[AttendanceLog]:
        return (
            db.query(AttendanceLog)
            .filter(AttendanceLog.event_id == event_id)
            .order_by(AttendanceLog.occurred_at.desc(), AttendanceLog.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_by_event(db: Session, event_id: int, status_contains: Optional[str] = None) -> int:
        query = db.query(func.count(AttendanceLog.id)).filter(AttendanceLog.event_id == event_id)
        if status_contains is not None:
            query = query.filter(func.lower(AttendanceLog.status).like(f"%{status_contains.lower()}%"))
        return query.scalar() or 0

    @staticmethod
    def add(db: Session, log: AttendanceLog) -> AttendanceLog:
        db.add(log)
        db.flush()
        return log

    @staticmethod
    def delete_by_event(db: Session, event_id: int) -> int:
        return db.query(AttendanceLog).filter(AttendanceLog.event_id == event_id).delete(synchronize_session=False)


# -------- Payment repository --------

class PaymentRepo:
    @staticmethod
    def get_by_id(db: Session, payment_id: int) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.id == payment_id).first()

    @staticmethod
    def get_by_reference(db: Session, reference: str) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.transaction_reference == reference).first()

    @staticmethod
    def list_all(db: Session) -> List[Payment]:
        return db.query(Payment).order_by(Payment.id).all()

    @staticmethod
    def find_by_event(db: Session, event_id: int) -> List[Payment]:
        return db.query(Payment).filter(Payment.event_id == event_id).order_by(Payment.id).all()

    @staticmethod
    def find_by_user(db: Session, user_id: int) -> List[Payment]:
        return db.query(Payment).filter(Payment.user_id == user_id).order_by(Payment.id).all()

    @staticmethod
    def add(db: Session, payment: Payment) -> Payment:
        db.add(payment)
        db.flush()
        return payment

    @staticmethod
    def delete_by_event(db: Session, event_id: int) -> int:
        return db.query(Payment).filter(Payment.event_id == event_id).delete(synchronize_session=False)


# -------- Event view repository --------

class EventViewRepo:
    @staticmethod
    def exists(db: Session, event_id: int, user_id: int) -> bool:
        return db.query(EventView.id).filter(
            EventView.event_id == event_id,
            EventView.user_id == user_id
        ).first() is not None

    @staticmethod
    def add(db: Session, event_id: int, user_id: int) -> EventView:
        view = EventView(event_id=event_id, user_id=user_id)
        db.add(view)
        db.flush()
        return view

    @staticmethod
    def delete_by_event(db: Session, event_id: int) -> int:
        return db.query(EventView).filter(EventView.event_id == event_id).delete(synchronize_session=False)


# -------- User and role repositories --------

class UserRepo:
    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    @staticmethod
    def list_all(db: Session) -> List[User]:
        return db.query(User).order_by(User.id).all()

    @staticmethod
    def add(db: Session, user: User) -> User:
        db.add(user)
        db.flush()
        return user


class RoleRepo:
    @staticmethod
    def get_by_id(db: Session, role_id: int) -> Optional[Role]:
        return db.query(Role).filter(Role.id == role_id).first()

    @staticmethod
    def get_by_name(db: Session, name: str) -> Optional[Role]:
        return db.query(Role).filter(func.upper(Role.name) == name.strip().upper()).first()

    @staticmethod
    def list_all(db: Session) -> List[Role]:
        return db.query(Role).order_by(Role.id).all()

    @staticmethod
    def add(db: Session, role: Role) -> Role:
        db.add(role)
        db.flush()
        return role

    @staticmethod
    def delete(db: Session, role: Role) -> None:
        db.delete(role)
        db.flush()


# -------- Notification repository --------

class NotificationRepo:
    @staticmethod
    def get_by_id(db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def find_by_user(db: Session, user_id: int) -> List[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    @staticmethod
    def add(db: Session, notification: Notification) -> Notification:
        db.add(notification)
        db.flush()
        return notification
