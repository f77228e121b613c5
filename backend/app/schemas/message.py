"""Pydantic schemas for contact messages."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ..enums import MessageCategory, MessagePriority, MessageStatus
from .common import CamelModel, SanitizedInput

_PHONE_PATTERN = re.compile(r"^[+]?[(]?[0-9]{3}[)]?[-\s.]?[0-9]{3}[-\s.]?[0-9]{4,6}$")


class MessageAttachment(CamelModel):
    filename: Optional[str] = None
    url: Optional[str] = None
    size: Optional[int] = None


class MessageCreate(SanitizedInput):
    """Public contact form submission."""

    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: Optional[str] = None
    subject: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=2000)
    category: MessageCategory = MessageCategory.GENERAL_INQUIRY

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if not _PHONE_PATTERN.match(value):
            raise ValueError("Please provide a valid phone number")
        return value


class MessageReceipt(CamelModel):
    id: str
    name: str
    email: str
    subject: str


class MessageRead(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    category: MessageCategory
    status: MessageStatus
    priority: MessagePriority
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    is_spam: bool
    replied_at: Optional[datetime] = None
    reply_message: Optional[str] = None
    attachments: list[MessageAttachment] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MessageStatusUpdate(CamelModel):
    status: MessageStatus


class MessageReply(SanitizedInput):
    reply_message: str = Field(..., min_length=1, max_length=5000)


class UnreadCount(CamelModel):
    count: int
