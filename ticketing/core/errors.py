"""Domain error codes and exceptions raised by the services."""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Domain error codes."""

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    OUTSIDE_SCAN_WINDOW = "OUTSIDE_SCAN_WINDOW"
    TICKET_INVALID = "TICKET_INVALID"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    CONFLICT = "CONFLICT"
    STORE_FAILURE = "STORE_FAILURE"


class DomainError(Exception):
    """Base domain error with code, HTTP status and user-safe message."""

    code = ErrorCode.BAD_REQUEST
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class BadRequestError(DomainError):
    """Raised for missing or internally inconsistent input."""

    code = ErrorCode.BAD_REQUEST
    status_code = 400


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, identifier: Any = None) -> None:
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} not found with ID: {identifier}"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class OutsideScanWindowError(DomainError):
    """Raised when a scan falls outside the event's scan window."""

    code = ErrorCode.OUTSIDE_SCAN_WINDOW
    status_code = 403


class TicketInvalidError(DomainError):
    """Raised when a refunded or cancelled ticket is scanned."""

    code = ErrorCode.TICKET_INVALID
    status_code = 409


class AlreadyCancelledError(DomainError):
    """Raised when cancelling an event that is already cancelled."""

    code = ErrorCode.ALREADY_CANCELLED
    status_code = 409

    def __init__(self, event_id: int) -> None:
        super().__init__("Event is already cancelled")
        self.event_id = event_id


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state."""

    code = ErrorCode.CONFLICT
    status_code = 409


class StoreFailureError(DomainError):
    """Raised when the store fails; the surrounding transaction is rolled back."""

    code = ErrorCode.STORE_FAILURE
    status_code = 500

    def __init__(self, reason: str = "") -> None:
        super().__init__("A storage error occurred", details=reason or None)
