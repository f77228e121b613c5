"""Pydantic schemas for user accounts and authentication."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ..enums import UserRole
from .common import CamelModel, SanitizedInput

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password_strength(value: str) -> str:
    if not _PASSWORD_RULE.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return value


class UserSummary(CamelModel):
    id: str
    name: str
    email: str


class UserRead(UserSummary):
    role: UserRole
    bio: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime


class UserUpdate(SanitizedInput):
    """Fields an administrator may change on any account."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    bio: Optional[str] = Field(default=None, max_length=500)


class UserStats(CamelModel):
    total_users: int
    active_users: int
    admin_users: int
    new_users_last_30_days: int


class RegisterRequest(SanitizedInput):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class LoginRequest(SanitizedInput):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """Access token returned upon successful authentication."""

    success: bool = True
    token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserRead


class ProfileUpdate(SanitizedInput):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar: Optional[str] = Field(default=None, max_length=500)


class PasswordUpdate(SanitizedInput):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    @field_validator("new_password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class ForgotPasswordRequest(SanitizedInput):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class ResetPasswordRequest(SanitizedInput):
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        return _check_password_strength(value)
