"""
Signup, login, and the user/role records behind them
"""

from typing import Any, Dict, List

import bcrypt
from sqlalchemy.orm import Session

from ticketing.core.db import transaction
from ticketing.core.errors import BadRequestError, ConflictError, NotFoundError
from ticketing.models import Role, User
from ticketing.services.repositories import RoleRepo, UserRepo

USER_ROLES = ("ATTENDEE", "ORGANIZER", "STAFF", "ADMIN")
MAX_SECRET_BYTES = 72  # bcrypt only reads the first 72 bytes


def hash_secret(secret: str) -> str:
    """Hash a password with bcrypt; the salt is embedded in the result"""
    secret_bytes = secret.encode('utf-8')
    if len(secret_bytes) > MAX_SECRET_BYTES:
        raise BadRequestError(f"Password must be at most {MAX_SECRET_BYTES} bytes")
    hashed = bcrypt.hashpw(secret_bytes, bcrypt.gensalt())
    return hashed.decode('utf-8')


def verify_secret(secret: str, stored: str) -> bool:
    secret_bytes = secret.encode('utf-8')
    if len(secret_bytes) > MAX_SECRET_BYTES:
        return False
    return bcrypt.checkpw(secret_bytes, stored.encode('utf-8'))


def normalize_role(role: str) -> str:
    normalized = (role or "").strip().upper()
    if normalized not in USER_ROLES:
        raise BadRequestError(f"Unknown role '{role}'")
    return normalized


class AuthService:
    """Service for signup and login"""

    @staticmethod
    def register(db: Session, data: Dict[str, Any]) -> User:
        with transaction(db):
            if UserRepo.get_by_email(db, data["email"]) is not None:
                raise BadRequestError("Email already registered")
            user = UserRepo.add(db, User(
                name=data["name"],
                email=data["email"].strip().lower(),
                secret=hash_secret(data["password"]),
                role=normalize_role(data.get("role") or "attendee"),
                contact=data.get("contact"),
            ))
        db.refresh(user)
        return user

    @staticmethod
    def login(db: Session, email: str, password: str) -> User:
        user = UserRepo.get_by_email(db, email)
        if user is None:
            raise BadRequestError("User not found")
        if not verify_secret(password, user.secret):
            raise BadRequestError("Invalid password")
        return user


class UserService:
    """Lookup and profile updates for users"""

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return UserRepo.list_all(db)

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        user = UserRepo.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def get_by_email(db: Session, email: str) -> User:
        user = UserRepo.get_by_email(db, email)
        if user is None:
            raise NotFoundError("User")
        return user

    @staticmethod
    def update_user(db: Session, user_id: int, data: Dict[str, Any]) -> User:
        with transaction(db):
            user = UserRepo.get_by_id(db, user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if data.get("name"):
                user.name = data["name"]
            if data.get("contact") is not None:
                user.contact = data["contact"]
            if data.get("role"):
                user.role = normalize_role(data["role"])
        db.refresh(user)
        return user


class RoleService:
    """CRUD for role names"""

    @staticmethod
    def list_roles(db: Session) -> List[Role]:
        return RoleRepo.list_all(db)

    @staticmethod
    def get_role(db: Session, role_id: int) -> Role:
        role = RoleRepo.get_by_id(db, role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return role

    @staticmethod
    def create_role(db: Session, name: str) -> Role:
        with transaction(db):
            if RoleRepo.get_by_name(db, name) is not None:
                raise ConflictError(f"Role '{name}' already exists")
            role = RoleRepo.add(db, Role(name=name.strip().upper()))
        db.refresh(role)
        return role

    @staticmethod
    def rename_role(db: Session, role_id: int, name: str) -> Role:
        with transaction(db):
            role = RoleRepo.get_by_id(db, role_id)
            if role is None:
                raise NotFoundError("Role", role_id)
            role.name = name.strip().upper()
        db.refresh(role)
        return role

    @staticmethod
    def delete_role(db: Session, role_id: int) -> None:
        with transaction(db):
            role = RoleRepo.get_by_id(db, role_id)
            if role is None:
                raise NotFoundError("Role", role_id)
            RoleRepo.delete(db, role)
