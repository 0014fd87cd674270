"""
Dashboard API routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.api.deps import get_dashboard_service
from ticketing.core.db import get_db
from ticketing.services.dashboard_service import DashboardService
from ticketing.utils.responses import success_response

router = APIRouter()

@router.get("/attendee/{user_id}")
async def attendee_dashboard(
    user_id: int,
    db: Session = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service)
):
    return success_response(
        message="Attendee dashboard retrieved",
        data=service.attendee_dashboard(db, user_id)
    )

@router.get("/organizer/{user_id}")
async def organizer_dashboard(user_id: int, db: Session = Depends(get_db)):
    return success_response(
        message="Organizer dashboard retrieved",
        data=DashboardService.organizer_dashboard(db, user_id)
    )

@router.get("/staff/{event_id}")
async def staff_dashboard(event_id: int, db: Session = Depends(get_db)):
    return success_response(
        message="Staff dashboard retrieved",
        data=DashboardService.staff_dashboard(db, event_id)
    )
