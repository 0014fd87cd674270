"""
Excel export of attendance logs
"""

import io

import pandas as pd
from sqlalchemy.orm import Session

from ticketing.services.dashboard_service import format_ticket_number
from ticketing.services.repositories import AttendanceLogRepo, TicketRepo, UserRepo

EXPORT_COLUMNS = ['Log ID', 'Ticket', 'Attendee', 'Email', 'Scanned At', 'Status', 'Re-entry', 'Gate']

class ExcelService:
    """Service for spreadsheet exports"""

    @staticmethod
    def export_attendance(event_id: int, db: Session) -> bytes:
        """Export every attendance log of an event, oldest first"""
        data = []
        for log in AttendanceLogRepo.find_by_event(db, event_id):
            ticket = TicketRepo.get_by_id(db, log.ticket_id)
            attendee = UserRepo.get_by_id(db, log.user_id)
            data.append({
                'Log ID': log.id,
                'Ticket': format_ticket_number(ticket),
                'Attendee': attendee.name if attendee else '',
                'Email': attendee.email if attendee else '',
                'Scanned At': log.occurred_at,
                'Status': log.status,
                'Re-entry': log.re_entry_count,
                'Gate': log.gate or '',
            })

        df = pd.DataFrame(data, columns=EXPORT_COLUMNS)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Attendance')

        return buffer.getvalue()
