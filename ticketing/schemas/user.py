"""
User, role, auth and notification Pydantic schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr

from .common import CamelModel

class SignupRequest(CamelModel):
    name: str
    email: EmailStr
    password: str
    role: str = "attendee"
    contact: Optional[str] = None

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class UserResponse(CamelModel):
    """Public view of a user; the stored secret is never serialised"""
    id: int
    name: str
    email: str
    role: str
    contact: Optional[str] = None

class AuthResponse(CamelModel):
    user_id: int
    name: str
    email: str
    role: str
    contact: Optional[str] = None

class UserUpdate(CamelModel):
    name: Optional[str] = None
    contact: Optional[str] = None
    role: Optional[str] = None

class RoleRequest(CamelModel):
    name: str

class RoleResponse(CamelModel):
    id: int
    name: str

class NotificationResponse(CamelModel):
    id: int
    user_id: int
    event_id: Optional[int] = None
    severity: str
    title: str
    message: str
    is_read: bool
    created_at: datetime
