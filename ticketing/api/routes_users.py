"""
Auth, user, role and notification API routes
"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ticketing.core.db import get_db
from ticketing.schemas.user import (
    AuthResponse,
    LoginRequest,
    NotificationResponse,
    RoleRequest,
    RoleResponse,
    SignupRequest,
    UserResponse,
    UserUpdate,
)
from ticketing.services.auth_service import AuthService, RoleService, UserService
from ticketing.services.notification_service import NotificationService
from ticketing.utils.responses import success_response

auth_router = APIRouter()
users_router = APIRouter()
roles_router = APIRouter()
notifications_router = APIRouter()

# -------- auth --------

@auth_router.post("/signup")
async def signup(signup_data: SignupRequest, db: Session = Depends(get_db)):
    user = AuthService.register(db, signup_data.model_dump())
    return success_response(
        message="Signup successful",
        data=UserResponse.model_validate(user).model_dump(by_alias=True)
    )

@auth_router.post("/login", response_model=AuthResponse)
async def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    user = AuthService.login(db, login_data.email, login_data.password)
    return AuthResponse(
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        contact=user.contact
    )

# -------- users --------

@users_router.get("", response_model=List[UserResponse])
async def list_users(db: Session = Depends(get_db)):
    return UserService.list_users(db)

@users_router.get("/email/{email}", response_model=UserResponse)
async def get_user_by_email(email: str, db: Session = Depends(get_db)):
    return UserService.get_by_email(db, email)

@users_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService.get_user(db, user_id)

@users_router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, update: UserUpdate, db: Session = Depends(get_db)):
    return UserService.update_user(db, user_id, update.model_dump())

# -------- roles --------

@roles_router.get("", response_model=List[RoleResponse])
async def list_roles(db: Session = Depends(get_db)):
    return RoleService.list_roles(db)

@roles_router.get("/{role_id}", response_model=RoleResponse)
async def get_role(role_id: int, db: Session = Depends(get_db)):
    return RoleService.get_role(db, role_id)

@roles_router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(role: RoleRequest, db: Session = Depends(get_db)):
    return RoleService.create_role(db, role.name)

@roles_router.put("/{role_id}", response_model=RoleResponse)
async def rename_role(role_id: int, role: RoleRequest, db: Session = Depends(get_db)):
    return RoleService.rename_role(db, role_id, role.name)

@roles_router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(role_id: int, db: Session = Depends(get_db)):
    RoleService.delete_role(db, role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# -------- notifications --------

@notifications_router.get("/user/{user_id}", response_model=List[NotificationResponse])
async def list_notifications(user_id: int, db: Session = Depends(get_db)):
    return NotificationService.list_for_user(db, user_id)

@notifications_router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(notification_id: int, db: Session = Depends(get_db)):
    return NotificationService.mark_read(db, notification_id)
