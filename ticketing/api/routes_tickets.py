"""
Ticket and payment API routes
"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ticketing.api.deps import get_payment_service, get_ticket_service
from ticketing.core.db import get_db
from ticketing.schemas.ticket import (
    BookTicketRequest,
    PaymentCreate,
    PaymentResponse,
    PaymentStatusUpdate,
    TicketResponse,
)
from ticketing.services.payment_service import PaymentService
from ticketing.services.qr_service import QRService
from ticketing.services.ticket_service import TicketService

router = APIRouter()
payments_router = APIRouter()

@router.get("", response_model=List[TicketResponse])
async def list_tickets(db: Session = Depends(get_db)):
    return TicketService.list_tickets(db)

@router.get("/qr/{qr_code}", response_model=TicketResponse)
async def get_ticket_by_qr_code(qr_code: str, db: Session = Depends(get_db)):
    """Look up the ticket behind a scanned QR payload"""
    return TicketService.get_by_qr_code(db, qr_code)

@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return TicketService.get_ticket(db, ticket_id)

@router.get("/user/{user_id}", response_model=List[TicketResponse])
async def get_tickets_by_user(user_id: int, db: Session = Depends(get_db)):
    return TicketService.tickets_for_user(db, user_id)

@router.get("/event/{event_id}", response_model=List[TicketResponse])
async def get_tickets_by_event(event_id: int, db: Session = Depends(get_db)):
    return TicketService.tickets_for_event(db, event_id)

@router.post("/book", response_model=List[TicketResponse], status_code=status.HTTP_201_CREATED)
async def book_tickets(
    booking: BookTicketRequest,
    db: Session = Depends(get_db),
    service: TicketService = Depends(get_ticket_service)
):
    return service.book_tickets(db, booking.user_id, booking.event_id, booking.quantity, booking.ticket_type)

@router.post("/{ticket_id}/refund", response_model=TicketResponse)
async def refund_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return TicketService.refund_ticket(db, ticket_id)

@router.get("/{ticket_id}/qr.png")
async def get_ticket_qr(ticket_id: int, db: Session = Depends(get_db)):
    """QR image encoding the ticket's code"""
    ticket = TicketService.get_ticket(db, ticket_id)
    return Response(
        content=QRService.render_ticket_qr(ticket.qr_code),
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=ticket_{ticket_id}.png"}
    )

# -------- payments --------

@payments_router.get("", response_model=List[PaymentResponse])
async def list_payments(db: Session = Depends(get_db)):
    return PaymentService.list_payments(db)

@payments_router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return PaymentService.get_payment(db, payment_id)

@payments_router.get("/user/{user_id}", response_model=List[PaymentResponse])
async def get_payments_by_user(user_id: int, db: Session = Depends(get_db)):
    return PaymentService.payments_for_user(db, user_id)

@payments_router.get("/event/{event_id}", response_model=List[PaymentResponse])
async def get_payments_by_event(event_id: int, db: Session = Depends(get_db)):
    return PaymentService.payments_for_event(db, event_id)

@payments_router.get("/reference/{reference}", response_model=PaymentResponse)
async def get_payment_by_reference(reference: str, db: Session = Depends(get_db)):
    return PaymentService.get_by_reference(db, reference)

@payments_router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    service: PaymentService = Depends(get_payment_service)
):
    return service.record_payment(db, payment.model_dump())

@payments_router.put("/{payment_id}/status", response_model=PaymentResponse)
async def update_payment_status(payment_id: int, update: PaymentStatusUpdate, db: Session = Depends(get_db)):
    return PaymentService.update_status(db, payment_id, update.status)
