"""Router for the public contact form and the admin inbox."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..enums import CallerRole, ResourceKind
from ..security import require_admin
from ..services import MessageNotifier, MessageService, NotificationError, ResourceLister
from .dependencies import build_list_request, get_lister, get_notifier, list_payload

router = APIRouter(prefix="/messages", tags=["messages"])

MessageEnvelope = schemas.DataResponse[schemas.MessageRead]


def _get_message_or_404(db: Session, message_id: str) -> models.Message:
    message = MessageService.get_message(db, message_id)
    if message is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return message


@router.post(
    "/",
    response_model=schemas.DataResponse[schemas.MessageReceipt],
    status_code=status.HTTP_201_CREATED,
)
def submit_message(
    message_in: schemas.MessageCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: MessageNotifier = Depends(get_notifier),
):
    """Store a contact message and notify both parties after responding."""
    message = MessageService.create_message(
        db,
        message_in,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    background_tasks.add_task(
        notifier.notify_message_received,
        name=message.name,
        email=message.email,
        phone=message.phone,
        subject=message.subject,
        message=message.message,
        category=message.category.value,
    )
    return {
        "success": True,
        "message": "Message sent successfully! We'll get back to you soon.",
        "data": message,
    }


@router.get(
    "/",
    response_model=schemas.ListResponse[schemas.MessageRead],
    dependencies=[Depends(require_admin)],
)
def list_messages(
    request: Request,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    lister: ResourceLister = Depends(get_lister),
):
    """Inbox listing; messages flagged as spam are never included."""
    list_request = build_list_request(
        request, page=page, limit=limit, sort_by=sort_by, order=order, search=search
    )
    result = lister.list(ResourceKind.MESSAGE, list_request, CallerRole.ADMIN)
    return list_payload(result)


@router.get(
    "/unread-count",
    response_model=schemas.DataResponse[schemas.UnreadCount],
    dependencies=[Depends(require_admin)],
)
def unread_message_count(db: Session = Depends(get_db)):
    return {"success": True, "data": {"count": MessageService.unread_count(db)}}


@router.get("/{message_id}", response_model=MessageEnvelope, dependencies=[Depends(require_admin)])
def get_message(message_id: str, db: Session = Depends(get_db)):
    message = MessageService.open_message(db, _get_message_or_404(db, message_id))
    return {"success": True, "data": message}


@router.put(
    "/{message_id}/status",
    response_model=MessageEnvelope,
    dependencies=[Depends(require_admin)],
)
def update_message_status(
    message_id: str,
    payload: schemas.MessageStatusUpdate,
    db: Session = Depends(get_db),
):
    message = _get_message_or_404(db, message_id)
    message = MessageService.update_status(db, message, payload.status)
    return {"success": True, "message": "Message status updated", "data": message}


@router.post(
    "/{message_id}/reply",
    response_model=MessageEnvelope,
    dependencies=[Depends(require_admin)],
)
def reply_to_message(
    message_id: str,
    payload: schemas.MessageReply,
    db: Session = Depends(get_db),
    notifier: MessageNotifier = Depends(get_notifier),
):
    message = _get_message_or_404(db, message_id)
    try:
        message = MessageService.reply(db, message, payload.reply_message, notifier)
    except NotificationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send reply email",
        ) from exc
    return {"success": True, "message": "Reply sent successfully", "data": message}


@router.post(
    "/{message_id}/spam",
    response_model=MessageEnvelope,
    dependencies=[Depends(require_admin)],
)
def mark_message_as_spam(message_id: str, db: Session = Depends(get_db)):
    message = MessageService.mark_spam(db, _get_message_or_404(db, message_id))
    return {"success": True, "message": "Message marked as spam", "data": message}


@router.delete(
    "/{message_id}",
    response_model=schemas.ActionResponse,
    dependencies=[Depends(require_admin)],
)
def delete_message(message_id: str, db: Session = Depends(get_db)):
    MessageService.delete_message(db, _get_message_or_404(db, message_id))
    return schemas.ActionResponse(message="Message deleted successfully")
