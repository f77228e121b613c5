"""SQLAlchemy model for portfolio user accounts."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Enum, Index, String, Text, func

from ..database import Base
from ..db_types import GUID, new_guid, utcnow
from ..enums import UserRole


class User(Base):
    """Registered account; admins manage the portfolio content."""

    __tablename__ = "users"

    id = Column("user_id", GUID(), primary_key=True, default=new_guid)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(
            UserRole,
            name="user_role_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    bio = Column(Text, nullable=True)
    avatar = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    last_login = Column(DateTime(timezone=True), nullable=True)
    reset_token_hash = Column(String(64), nullable=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


Index("users_role_idx", User.role)
