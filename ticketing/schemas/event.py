"""
Event-related Pydantic schemas
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_serializer

from ticketing.models import EventStatus

from .common import CamelModel

class EventCreate(CamelModel):
    """Schema for creating an event"""
    name: str
    location: str
    category: str
    start_at: datetime
    end_at: datetime
    ticket_price: Decimal = Decimal("0")
    capacity: int = 0
    organizer_ref: str
    description: Optional[str] = None

class EventUpdate(CamelModel):
    """Schema for updating an event; omitted fields keep their value"""
    name: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    ticket_price: Optional[Decimal] = None
    capacity: Optional[int] = None
    organizer_ref: Optional[str] = None
    description: Optional[str] = None

class EventResponse(CamelModel):
    id: int
    name: str
    location: str
    category: str
    start_at: datetime
    end_at: datetime
    ticket_price: Decimal
    capacity: int
    organizer_ref: str
    description: Optional[str] = None
    view_count: int
    tickets_sold: int
    status: EventStatus
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None

    @field_serializer("ticket_price")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

class CancelEventRequest(CamelModel):
    reason: Optional[str] = None

class CancelEventResponse(CamelModel):
    success: bool = True
    message: str
    tickets_refunded: int
    total_refund_amount: float

class EventViewRequest(CamelModel):
    user_id: Optional[int] = None
    role: Optional[str] = None

class EventViewResponse(CamelModel):
    counted: bool
    view_count: int = Field(ge=0)
