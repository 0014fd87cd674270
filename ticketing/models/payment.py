"""
Payment model
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from ticketing.core.db import Base

class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    paid_at = Column(DateTime, nullable=False)
    method = Column(String(50), nullable=False)
    status = Column(String(30), nullable=False)
    transaction_reference = Column(String(100), unique=True, nullable=False)
