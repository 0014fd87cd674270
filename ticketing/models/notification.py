"""
Notification model
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from ticketing.core.clock import utc_now
from ticketing.core.db import Base

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, nullable=True)  # loose reference, survives event deletion
    severity = Column(String(20), nullable=False)  # info, success, warning, error
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utc_now)
