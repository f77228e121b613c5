"""Password hashing, bearer tokens and role-based FastAPI dependencies."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import os
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from . import models
from .database import get_db
from .enums import CallerRole, UserRole

JWT_SECRET_ENV = "JWT_SECRET"
JWT_REFRESH_SECRET_ENV = "JWT_REFRESH_SECRET"
ACCESS_TOKEN_EXPIRE_MINUTES_ENV = "ACCESS_TOKEN_EXPIRE_MINUTES"
REFRESH_TOKEN_EXPIRE_MINUTES_ENV = "REFRESH_TOKEN_EXPIRE_MINUTES"

PBKDF2_DEFAULT_ITERATIONS = 390_000
DEFAULT_ACCESS_TOKEN_MINUTES = 30
DEFAULT_REFRESH_TOKEN_MINUTES = 7 * 24 * 60

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class SecurityConfigurationError(RuntimeError):
    """Raised when mandatory security settings are missing or invalid."""


class TokenError(ValueError):
    """Raised when a bearer token is malformed, forged or expired."""


def _read_env_var(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise SecurityConfigurationError(f"Environment variable '{name}' is required")
    return value


def generate_password_hash(password: str, *, iterations: int = PBKDF2_DEFAULT_ITERATIONS) -> str:
    """Return a PBKDF2-based password hash string."""

    if not password:
        raise ValueError("password must not be empty")
    salt = secrets.token_bytes(16)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    components = (
        str(iterations),
        base64.urlsafe_b64encode(salt).decode("ascii"),
        base64.urlsafe_b64encode(derived).decode("ascii"),
    )
    return "$".join(components)


def _split_password_hash(stored_hash: str) -> tuple[int, bytes, bytes]:
    try:
        iterations_str, salt_b64, hash_b64 = stored_hash.split("$")
        iterations = int(iterations_str)
        salt = base64.urlsafe_b64decode(salt_b64)
        digest = base64.urlsafe_b64decode(hash_b64)
    except (ValueError, binascii.Error) as exc:  # pragma: no cover - defensive branch
        raise SecurityConfigurationError("Stored password hash is invalid") from exc
    return iterations, salt, digest


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored PBKDF2 hash."""

    iterations, salt, digest = _split_password_hash(stored_hash)
    candidate = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(candidate, digest)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@lru_cache(maxsize=2)
def _load_signing_key(env_name: str) -> bytes:
    raw_secret = _read_env_var(env_name)
    try:
        return base64.urlsafe_b64decode(raw_secret)
    except (ValueError, binascii.Error):
        return raw_secret.encode("utf-8")


def _signing_key(token_type: str) -> bytes:
    if token_type == TOKEN_TYPE_REFRESH and os.getenv(JWT_REFRESH_SECRET_ENV):
        return _load_signing_key(JWT_REFRESH_SECRET_ENV)
    return _load_signing_key(JWT_SECRET_ENV)


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _encode_jwt(payload: dict[str, Any], key: bytes) -> str:
    header = {"typ": "JWT", "alg": "HS256"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    signature = hmac.new(key, signing_input, hashlib.sha256).digest()
    signature_b64 = _b64url_encode(signature)
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def _decode_jwt(token: str, key: bytes) -> dict[str, Any]:
    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
        signature = _b64url_decode(signature_b64)
        signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    except (ValueError, binascii.Error) as exc:
        raise TokenError("Malformed token") from exc

    expected_signature = hmac.new(key, signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(signature, expected_signature):
        raise TokenError("Invalid token signature")

    try:
        payload_data = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, binascii.Error) as exc:
        raise TokenError("Malformed token payload") from exc
    if payload_data.get("exp") is None:
        raise TokenError("Token has no expiry")
    exp = int(payload_data["exp"])
    if datetime.now(timezone.utc) >= datetime.fromtimestamp(exp, tz=timezone.utc):
        raise TokenError("Token expired")
    return payload_data


def _resolve_expiry(env_name: str, default_minutes: int) -> timedelta:
    raw = os.getenv(env_name)
    if not raw:
        return timedelta(minutes=default_minutes)
    try:
        minutes = int(raw)
    except ValueError as exc:  # pragma: no cover - defensive branch
        raise SecurityConfigurationError(f"{env_name} must be an integer") from exc
    if minutes <= 0:
        raise SecurityConfigurationError(f"{env_name} must be positive")
    return timedelta(minutes=minutes)


def _create_token(user: models.User, token_type: str, lifetime: timedelta) -> str:
    expiry = datetime.now(timezone.utc) + lifetime
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "role": UserRole(user.role).value,
        "type": token_type,
        "exp": int(expiry.timestamp()),
    }
    return _encode_jwt(payload, _signing_key(token_type))


def create_access_token(user: models.User) -> str:
    lifetime = _resolve_expiry(ACCESS_TOKEN_EXPIRE_MINUTES_ENV, DEFAULT_ACCESS_TOKEN_MINUTES)
    return _create_token(user, TOKEN_TYPE_ACCESS, lifetime)


def create_refresh_token(user: models.User) -> str:
    lifetime = _resolve_expiry(REFRESH_TOKEN_EXPIRE_MINUTES_ENV, DEFAULT_REFRESH_TOKEN_MINUTES)
    return _create_token(user, TOKEN_TYPE_REFRESH, lifetime)


def decode_token(token: str, token_type: str = TOKEN_TYPE_ACCESS) -> dict[str, Any]:
    payload = _decode_jwt(token, _signing_key(token_type))
    if payload.get("type") != token_type:
        raise TokenError("Unexpected token type")
    if not isinstance(payload.get("sub"), str):
        raise TokenError("Token has no subject")
    return payload


@dataclass(frozen=True)
class CallerIdentity:
    """Who issued the current request."""

    role: CallerRole
    user_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is CallerRole.ADMIN


ANONYMOUS = CallerIdentity(role=CallerRole.ANONYMOUS)


def _load_active_user(db: Session, token: str) -> Optional[models.User]:
    try:
        payload = decode_token(token)
    except TokenError:
        return None
    user = db.query(models.User).filter(models.User.id == payload["sub"]).first()
    if user is None or not user.is_active:
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    user = _load_active_user(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_caller(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> CallerIdentity:
    """Resolve the caller, treating a missing or invalid token as anonymous."""

    if not token:
        return ANONYMOUS
    user = _load_active_user(db, token)
    if user is None:
        return ANONYMOUS
    return CallerIdentity(role=CallerRole(UserRole(user.role).value), user_id=str(user.id))


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    """FastAPI dependency that ensures the request is authenticated as an admin."""

    if UserRole(user.role) is not UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User role {UserRole(user.role).value} is not authorized to access this route",
        )
    return user
