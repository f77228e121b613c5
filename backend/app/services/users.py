"""Account management: registration, credentials and admin user operations."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import parse_guid
from ..enums import UserRole
from ..security import (
    TOKEN_TYPE_REFRESH,
    TokenError,
    decode_token,
    generate_password_hash,
    hash_reset_token,
    verify_password,
)
from .listing import PageWindow, paginate, validate_window

LOGGER = logging.getLogger(__name__)

RESET_TOKEN_LIFETIME = timedelta(hours=1)
NEW_USER_WINDOW = timedelta(days=30)


class UserServiceError(RuntimeError):
    """Raised when an account operation cannot be completed."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _as_aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; every stored timestamp is UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class UserService:
    """Encapsulates account operations shared by the auth and users routers."""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[models.User]:
        return db.query(models.User).filter(models.User.email == email.lower()).first()

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[models.User]:
        user_id = parse_guid(user_id)
        if user_id is None:
            return None
        return db.query(models.User).filter(models.User.id == user_id).first()

    @staticmethod
    def register(db: Session, data: schemas.RegisterRequest) -> models.User:
        if UserService.get_by_email(db, data.email) is not None:
            raise UserServiceError("User already exists with this email")

        user = models.User(
            name=data.name,
            email=data.email.lower(),
            password_hash=generate_password_hash(data.password),
            role=UserRole.USER,
            last_login=datetime.now(timezone.utc),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        LOGGER.info("Registered user %s", user.email)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> models.User:
        user = UserService.get_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            raise UserServiceError("Invalid credentials", status_code=401)
        if not user.is_active:
            raise UserServiceError("Your account has been deactivated", status_code=401)

        user.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def resolve_refresh_token(db: Session, refresh_token: str) -> models.User:
        try:
            payload = decode_token(refresh_token, TOKEN_TYPE_REFRESH)
        except TokenError as exc:
            raise UserServiceError("Invalid refresh token", status_code=401) from exc

        user = UserService.get_user(db, payload["sub"])
        if user is None or not user.is_active:
            raise UserServiceError("Invalid refresh token", status_code=401)
        return user

    @staticmethod
    def update_profile(db: Session, user: models.User, data: schemas.ProfileUpdate) -> models.User:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_password(db: Session, user: models.User, data: schemas.PasswordUpdate) -> models.User:
        if not verify_password(data.current_password, user.password_hash):
            raise UserServiceError("Current password is incorrect", status_code=401)
        user.password_hash = generate_password_hash(data.new_password)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def issue_reset_token(db: Session, email: str) -> Tuple[models.User, str]:
        """Store a hashed one-hour reset token and return the raw value."""

        user = UserService.get_by_email(db, email)
        if user is None:
            raise UserServiceError("No user found with that email", status_code=404)

        token = secrets.token_hex(20)
        user.reset_token_hash = hash_reset_token(token)
        user.reset_token_expires_at = datetime.now(timezone.utc) + RESET_TOKEN_LIFETIME
        db.commit()
        return user, token

    @staticmethod
    def reset_password(db: Session, token: str, password: str) -> models.User:
        user = (
            db.query(models.User)
            .filter(models.User.reset_token_hash == hash_reset_token(token))
            .first()
        )
        expires_at = _as_aware(user.reset_token_expires_at) if user is not None else None
        if user is None or expires_at is None or expires_at <= datetime.now(timezone.utc):
            raise UserServiceError("Invalid or expired reset token")

        user.password_hash = generate_password_hash(password)
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def list_users(
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        max_limit: int = 100,
    ) -> Tuple[list[models.User], PageWindow]:
        validate_window(page, limit)
        limit = min(limit, max_limit)
        window = paginate(page, limit, db.query(models.User).count())
        items = (
            db.query(models.User)
            .order_by(models.User.created_at.desc(), models.User.id.asc())
            .offset(window.skip)
            .limit(window.limit)
            .all()
        )
        return items, window

    @staticmethod
    def stats(db: Session) -> schemas.UserStats:
        since = datetime.now(timezone.utc) - NEW_USER_WINDOW

        def _count(*conditions) -> int:
            query = db.query(func.count(models.User.id))
            if conditions:
                query = query.filter(*conditions)
            return int(query.scalar() or 0)

        return schemas.UserStats(
            total_users=_count(),
            active_users=_count(models.User.is_active.is_(True)),
            admin_users=_count(models.User.role == UserRole.ADMIN),
            new_users_last_30_days=_count(models.User.created_at >= since),
        )

    @staticmethod
    def update_user(db: Session, user: models.User, data: schemas.UserUpdate) -> models.User:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: models.User, *, acting_user_id: str) -> None:
        if str(user.id) == str(acting_user_id):
            raise UserServiceError("You cannot delete your own account")
        db.delete(user)
        db.commit()

    @staticmethod
    def ensure_admin_account(
        db: Session,
        email: str,
        password: str,
        name: str = "Admin",
    ) -> models.User:
        """Create the administrator account unless one already uses ``email``."""

        existing = UserService.get_by_email(db, email)
        if existing is not None:
            if existing.role != UserRole.ADMIN:
                LOGGER.warning("Account %s exists but is not an administrator", existing.email)
            return existing

        admin = models.User(
            name=name,
            email=email.lower(),
            password_hash=generate_password_hash(password),
            role=UserRole.ADMIN,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        LOGGER.info("Created administrator account %s", admin.email)
        return admin
