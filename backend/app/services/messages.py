"""Business logic for contact messages."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import parse_guid
from ..enums import MessageStatus
from .notifications import MessageNotifier

LOGGER = logging.getLogger(__name__)


class MessageService:
    """Encapsulates the contact-message workflow."""

    @staticmethod
    def create_message(
        db: Session,
        data: schemas.MessageCreate,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> models.Message:
        message = models.Message(
            **data.model_dump(),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.add(message)
        db.commit()
        db.refresh(message)
        LOGGER.info("Stored contact message %s from %s", message.id, message.email)
        return message

    @staticmethod
    def get_message(db: Session, message_id: str) -> Optional[models.Message]:
        message_id = parse_guid(message_id)
        if message_id is None:
            return None
        return db.query(models.Message).filter(models.Message.id == message_id).first()

    @staticmethod
    def open_message(db: Session, message: models.Message) -> models.Message:
        """Mark a ``new`` message as ``read`` when an administrator views it."""

        if message.status == MessageStatus.NEW:
            message.status = MessageStatus.READ
            db.commit()
            db.refresh(message)
        return message

    @staticmethod
    def unread_count(db: Session) -> int:
        return (
            db.query(models.Message)
            .filter(
                models.Message.status == MessageStatus.NEW,
                models.Message.is_spam.is_(False),
            )
            .count()
        )

    @staticmethod
    def update_status(
        db: Session,
        message: models.Message,
        status: MessageStatus,
    ) -> models.Message:
        message.status = status
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def reply(
        db: Session,
        message: models.Message,
        reply_message: str,
        notifier: MessageNotifier,
    ) -> models.Message:
        """Email the reply first; the message is only marked replied once it is sent."""

        notifier.send_reply(
            name=message.name,
            email=message.email,
            subject=message.subject,
            reply=reply_message,
        )
        message.status = MessageStatus.REPLIED
        message.replied_at = datetime.now(timezone.utc)
        message.reply_message = reply_message
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def mark_spam(db: Session, message: models.Message) -> models.Message:
        message.is_spam = True
        message.status = MessageStatus.ARCHIVED
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def delete_message(db: Session, message: models.Message) -> None:
        db.delete(message)
        db.commit()
