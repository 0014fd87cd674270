"""
Notification sink. Delivery is fire-and-forget: a failed notification is
logged and dropped, it never undoes the business operation that caused it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from ticketing.core.db import transaction
from ticketing.core.errors import NotFoundError
from ticketing.models import Notification
from ticketing.services.repositories import NotificationRepo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationMessage:
    user_id: int
    severity: str
    title: str
    body: str
    event_id: Optional[int] = None


class NotificationSink(ABC):
    """Interface for delivering user notifications."""

    @abstractmethod
    def send(self, message: NotificationMessage) -> None:
        """Deliver one notification. May raise; callers treat failures as lossy."""
        ...


class DatabaseNotificationSink(NotificationSink):
    """Persists notifications so clients can poll them, one short session per message."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def send(self, message: NotificationMessage) -> None:
        db = self.session_factory()
        try:
            with transaction(db):
                NotificationRepo.add(db, Notification(
                    user_id=message.user_id,
                    event_id=message.event_id,
                    severity=message.severity,
                    title=message.title,
                    message=message.body,
                ))
        finally:
            db.close()


def dispatch_notifications(sink: NotificationSink, messages: Iterable[NotificationMessage]) -> int:
    """Send every message, swallowing individual failures. Returns the number delivered."""
    delivered = 0
    for message in messages:
        try:
            sink.send(message)
            delivered += 1
        except Exception:
            logger.exception(f"Dropping notification '{message.title}' for user {message.user_id}")
    return delivered


class NotificationService:
    """Read side of the notifications table"""

    @staticmethod
    def list_for_user(db: Session, user_id: int) -> List[Notification]:
        return NotificationRepo.find_by_user(db, user_id)

    @staticmethod
    def mark_read(db: Session, notification_id: int) -> Notification:
        with transaction(db):
            notification = NotificationRepo.get_by_id(db, notification_id)
            if notification is None:
                raise NotFoundError("Notification", notification_id)
            notification.is_read = True
        db.refresh(notification)
        return notification
