"""Custom SQLAlchemy column types for multi-database compatibility."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON
from sqlalchemy.types import CHAR, String, TypeDecorator


class GUID(TypeDecorator):
    """Platform-independent GUID/UUID type.

    Stores UUID values as ``UUID`` in PostgreSQL and as 36-character strings
    elsewhere. Values are normalised to strings when read so record
    identifiers can be handled as text throughout the API.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        if dialect.name == "postgresql":
            if isinstance(value, uuid.UUID):
                return value
            return uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value)


class INET(TypeDecorator):
    """Represents IPv4/IPv6 addresses.

    Uses the native ``INET`` type in PostgreSQL and falls back to a sized
    ``String`` column in other engines.
    """

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.INET())
        return dialect.type_descriptor(String(45))

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value)


# List- and object-valued document fields.
JSONDocument = JSON().with_variant(SQLiteJSON(), "sqlite")


def parse_guid(value: Any) -> Optional[str]:
    """Return ``value`` as a canonical identifier, or ``None`` if it is not one."""

    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return None


def new_guid() -> str:
    """Return a new identifier in the textual form exposed by the API."""

    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
