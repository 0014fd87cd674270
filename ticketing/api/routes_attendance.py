"""
Attendance API routes - ticket scans and check-in statistics
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ticketing.api.deps import clock, get_attendance_service
from ticketing.api.ws import websocket_manager
from ticketing.core.db import get_db
from ticketing.schemas.attendance import AttendanceCreate, AttendanceLogResponse, AttendanceStats
from ticketing.services.attendance_service import AttendanceService, ScanRequest
from ticketing.services.excel_service import ExcelService
from ticketing.services.event_service import EventService

router = APIRouter()

def _ref_id(ref):
    return ref.id if ref is not None else None

@router.post("", response_model=AttendanceLogResponse)
async def record_scan(
    scan: AttendanceCreate,
    db: Session = Depends(get_db),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Validate a ticket scan and record attendance"""
    log = service.record_scan(db, ScanRequest(
        ticket_id=_ref_id(scan.ticket),
        event_id=_ref_id(scan.event),
        user_id=_ref_id(scan.user),
        occurred_at=scan.start_time,
        gate=scan.gate,
    ))
    response = AttendanceLogResponse.from_log(log)

    await websocket_manager.broadcast_to_event(log.event_id, {
        "type": "scan",
        "log": response.model_dump(by_alias=True),
        "timestamp": clock.now().isoformat()
    })
    return response

@router.get("", response_model=List[AttendanceLogResponse])
async def list_logs(db: Session = Depends(get_db)):
    """Every attendance log, newest first"""
    return [AttendanceLogResponse.from_log(log) for log in AttendanceService.list_logs(db)]

@router.get("/{log_id}", response_model=AttendanceLogResponse)
async def get_log(log_id: int, db: Session = Depends(get_db)):
    return AttendanceLogResponse.from_log(AttendanceService.get_log(db, log_id))

@router.get("/user/{user_id}", response_model=List[AttendanceLogResponse])
async def get_logs_by_user(user_id: int, db: Session = Depends(get_db)):
    return [AttendanceLogResponse.from_log(log) for log in AttendanceService.logs_for_user(db, user_id)]

@router.get("/event/{event_id}", response_model=List[AttendanceLogResponse])
async def get_logs_by_event(event_id: int, db: Session = Depends(get_db)):
    return [AttendanceLogResponse.from_log(log) for log in AttendanceService.logs_for_event(db, event_id)]

@router.get("/event/{event_id}/recent", response_model=List[AttendanceLogResponse])
async def get_recent_logs(event_id: int, db: Session = Depends(get_db)):
    """Newest 25 scans for an event"""
    return [AttendanceLogResponse.from_log(log) for log in AttendanceService.recent_logs_for_event(db, event_id)]

@router.get("/event/{event_id}/stats", response_model=AttendanceStats)
async def get_event_stats(event_id: int, db: Session = Depends(get_db)):
    return AttendanceStats(
        check_in_count=AttendanceService.valid_count(db, event_id),
        total_logs=AttendanceService.total_count(db, event_id)
    )

@router.get("/event/{event_id}/export.xlsx")
async def export_event_attendance(event_id: int, db: Session = Depends(get_db)):
    """Download every attendance log of an event as a spreadsheet"""
    EventService.get_event(db, event_id)
    content = ExcelService.export_attendance(event_id, db)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=attendance_event_{event_id}.xlsx"}
    )
