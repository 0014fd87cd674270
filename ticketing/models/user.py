"""
User and role models
"""

from sqlalchemy import Column, Integer, String

from ticketing.core.db import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    secret = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(50), nullable=False, default="ATTENDEE")  # attendee, organizer, staff, admin
    contact = Column(String(100), nullable=True)

class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
