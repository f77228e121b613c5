"""Administrator endpoints for managing user accounts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import get_listing_config
from ..database import get_db
from ..security import require_admin
from ..services import UserService, UserServiceError

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])

UserEnvelope = schemas.DataResponse[schemas.UserRead]


def _get_user_or_404(db: Session, user_id: str) -> models.User:
    user = UserService.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/", response_model=schemas.ListResponse[schemas.UserRead])
def list_users(
    page: int = Query(1),
    limit: int = Query(10),
    db: Session = Depends(get_db),
):
    """Return accounts newest first."""
    users, window = UserService.list_users(
        db, page=page, limit=limit, max_limit=get_listing_config().max_limit
    )
    return {
        "success": True,
        "count": len(users),
        "data": users,
        "pagination": window.as_dict(),
    }


@router.get("/stats", response_model=schemas.DataResponse[schemas.UserStats])
def user_stats(db: Session = Depends(get_db)):
    return {"success": True, "data": UserService.stats(db)}


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": _get_user_or_404(db, user_id)}


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(user_id: str, user_in: schemas.UserUpdate, db: Session = Depends(get_db)):
    user = UserService.update_user(db, _get_user_or_404(db, user_id), user_in)
    return {"success": True, "message": "User updated successfully", "data": user}


@router.delete("/{user_id}", response_model=schemas.ActionResponse)
def delete_user(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_user_or_404(db, user_id)
    try:
        UserService.delete_user(db, user, acting_user_id=admin.id)
    except UserServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return schemas.ActionResponse(message="User deleted successfully")
