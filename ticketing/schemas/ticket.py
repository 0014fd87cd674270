"""
Ticket and payment Pydantic schemas
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_serializer

from .common import CamelModel

class BookTicketRequest(CamelModel):
    user_id: int
    event_id: int
    quantity: int = Field(default=1, ge=1)
    ticket_type: Optional[str] = None

class TicketResponse(CamelModel):
    id: int
    user_id: int
    event_id: int
    qr_code: str
    price: Decimal
    purchased_at: datetime
    ticket_type: str
    status: str

    @field_serializer("price")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

class PaymentCreate(CamelModel):
    user_id: int
    event_id: int
    amount: Decimal
    paid_at: Optional[datetime] = None
    method: str
    status: str
    transaction_reference: str

class PaymentStatusUpdate(CamelModel):
    status: str

class PaymentResponse(CamelModel):
    id: int
    user_id: int
    event_id: int
    amount: Decimal
    paid_at: datetime
    method: str
    status: str
    transaction_reference: str

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> float:
        return float(value)
