"""Authentication endpoints: registration, tokens and password management."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..security import create_access_token, create_refresh_token, get_current_user
from ..services import MessageNotifier, UserService, UserServiceError
from .dependencies import get_notifier

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: models.User) -> schemas.TokenResponse:
    return schemas.TokenResponse(
        token=create_access_token(user),
        refresh_token=create_refresh_token(user),
        user=schemas.UserRead.model_validate(user),
    )


def _raise_http(exc: UserServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("/register", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: schemas.RegisterRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: MessageNotifier = Depends(get_notifier),
) -> schemas.TokenResponse:
    try:
        user = UserService.register(db, payload)
    except UserServiceError as exc:
        raise _raise_http(exc) from exc
    background_tasks.add_task(notifier.send_welcome, name=user.name, email=user.email)
    return _token_response(user)


@router.post("/login", response_model=schemas.TokenResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)) -> schemas.TokenResponse:
    """Authenticate with email and password and return a token pair."""

    try:
        user = UserService.authenticate(db, payload.email, payload.password)
    except UserServiceError as exc:
        raise _raise_http(exc) from exc
    return _token_response(user)


@router.post("/refresh-token", response_model=schemas.TokenResponse)
def refresh_token(
    payload: schemas.RefreshTokenRequest,
    db: Session = Depends(get_db),
) -> schemas.TokenResponse:
    try:
        user = UserService.resolve_refresh_token(db, payload.refresh_token)
    except UserServiceError as exc:
        raise _raise_http(exc) from exc
    return _token_response(user)


@router.post("/logout", response_model=schemas.ActionResponse)
def logout(_: models.User = Depends(get_current_user)) -> schemas.ActionResponse:
    # Tokens are stateless; clients discard them.
    return schemas.ActionResponse(message="Logged out successfully")


@router.get("/me", response_model=schemas.DataResponse[schemas.UserRead])
def read_current_user(user: models.User = Depends(get_current_user)):
    return {"success": True, "data": user}


@router.put("/update-profile", response_model=schemas.DataResponse[schemas.UserRead])
def update_profile(
    payload: schemas.ProfileUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UserService.update_profile(db, user, payload)
    return {"success": True, "message": "Profile updated successfully", "data": user}


@router.put("/update-password", response_model=schemas.TokenResponse)
def update_password(
    payload: schemas.PasswordUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> schemas.TokenResponse:
    try:
        user = UserService.update_password(db, user, payload)
    except UserServiceError as exc:
        raise _raise_http(exc) from exc
    return _token_response(user)


@router.post("/forgot-password", response_model=schemas.ActionResponse)
def forgot_password(
    payload: schemas.ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: MessageNotifier = Depends(get_notifier),
) -> schemas.ActionResponse:
    try:
        user, token = UserService.issue_reset_token(db, payload.email)
    except UserServiceError as exc:
        raise _raise_http(exc) from exc
    background_tasks.add_task(notifier.send_password_reset, email=user.email, token=token)
    return schemas.ActionResponse(message="Password reset email sent")


@router.post("/reset-password/{token}", response_model=schemas.TokenResponse)
def reset_password(
    token: str,
    payload: schemas.ResetPasswordRequest,
    db: Session = Depends(get_db),
) -> schemas.TokenResponse:
    try:
        user = UserService.reset_password(db, token, payload.password)
    except UserServiceError as exc:
        raise _raise_http(exc) from exc
    return _token_response(user)
