"""
Payment records. No money moves here; rows only mirror what the provider reported.
"""

from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ticketing.core.clock import Clock, to_utc
from ticketing.core.db import transaction
from ticketing.core.errors import BadRequestError, ConflictError, NotFoundError
from ticketing.models import Payment
from ticketing.services.repositories import EventRepo, PaymentRepo, UserRepo


class PaymentService:
    """Service for payment records"""

    def __init__(self, clock: Clock):
        self.clock = clock

    @staticmethod
    def get_payment(db: Session, payment_id: int) -> Payment:
        payment = PaymentRepo.get_by_id(db, payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        return payment

    @staticmethod
    def get_by_reference(db: Session, reference: str) -> Payment:
        payment = PaymentRepo.get_by_reference(db, reference)
        if payment is None:
            raise NotFoundError("Payment", reference)
        return payment

    @staticmethod
    def list_payments(db: Session) -> List[Payment]:
        return PaymentRepo.list_all(db)

    @staticmethod
    def payments_for_user(db: Session, user_id: int) -> List[Payment]:
        return PaymentRepo.find_by_user(db, user_id)

    @staticmethod
    def payments_for_event(db: Session, event_id: int) -> List[Payment]:
        return PaymentRepo.find_by_event(db, event_id)

    def record_payment(self, db: Session, data: Dict[str, Any]) -> Payment:
        amount = Decimal(str(data["amount"]))
        if amount < 0:
            raise BadRequestError("Payment amount cannot be negative")

        with transaction(db):
            if UserRepo.get_by_id(db, data["user_id"]) is None:
                raise NotFoundError("User", data["user_id"])
            if EventRepo.get_by_id(db, data["event_id"]) is None:
                raise NotFoundError("Event", data["event_id"])
            if PaymentRepo.get_by_reference(db, data["transaction_reference"]) is not None:
                raise ConflictError("Transaction reference already recorded")

            payment = PaymentRepo.add(db, Payment(
                user_id=data["user_id"],
                event_id=data["event_id"],
                amount=amount,
                paid_at=to_utc(data.get("paid_at")) or self.clock.now(),
                method=data["method"],
                status=data["status"],
                transaction_reference=data["transaction_reference"],
            ))
        db.refresh(payment)
        return payment

    @staticmethod
    def update_status(db: Session, payment_id: int, status: str) -> Payment:
        with transaction(db):
            payment = PaymentRepo.get_by_id(db, payment_id)
            if payment is None:
                raise NotFoundError("Payment", payment_id)
            payment.status = status
        db.refresh(payment)
        return payment
