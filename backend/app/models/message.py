"""SQLAlchemy model for contact form messages."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Enum, Index, String, Text, func

from ..database import Base
from ..db_types import GUID, INET, JSONDocument, new_guid, utcnow
from ..enums import MessageCategory, MessagePriority, MessageStatus


class Message(Base):
    """Inbound contact message reviewed from the admin console."""

    __tablename__ = "messages"

    id = Column("message_id", GUID(), primary_key=True, default=new_guid)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    subject = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    category = Column(
        Enum(
            MessageCategory,
            name="message_category_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=MessageCategory.GENERAL_INQUIRY,
    )
    status = Column(
        Enum(
            MessageStatus,
            name="message_status_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=MessageStatus.NEW,
    )
    priority = Column(
        Enum(
            MessagePriority,
            name="message_priority_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=MessagePriority.MEDIUM,
    )
    ip_address = Column(INET(), nullable=True)
    user_agent = Column(String(512), nullable=True)
    is_spam = Column(Boolean, nullable=False, default=False, server_default="0")
    replied_at = Column(DateTime(timezone=True), nullable=True)
    reply_message = Column(Text, nullable=True)
    attachments = Column(JSONDocument, nullable=False, default=list)
    notes = Column(Text, nullable=True)
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


Index("messages_status_created_idx", Message.status, Message.created_at)
Index("messages_email_idx", Message.email)
