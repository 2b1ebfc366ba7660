"""Admin authentication endpoint.

A single POST route dispatching on ``action``, so the browser client can
talk to it with one fetch helper.
"""
from collections.abc import Callable
from datetime import timezone
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schoolsite.api.deps import get_db, get_request_ip
from schoolsite.errors import InternalError, ValidationError
from schoolsite.schemas.auth import (
    AuthRequest,
    InitStatusResponse,
    LoginResponse,
    SessionStatusResponse,
    SuccessResponse,
)
from schoolsite.services import admin_auth, sessions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-auth"])


def _check_init(payload: AuthRequest, request: Request, db: Session) -> dict:
    return InitStatusResponse(needs_init=admin_auth.check_init(db)).model_dump(by_alias=True)


def _login(payload: AuthRequest, request: Request, db: Session) -> dict:
    token, expires_at = admin_auth.login(
        db,
        payload.username,
        payload.password,
        ip_address=get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return LoginResponse(
        session_token=token,
        expires_at=expires_at.replace(tzinfo=timezone.utc).isoformat(),
    ).model_dump(by_alias=True)


def _logout(payload: AuthRequest, request: Request, db: Session) -> dict:
    admin_auth.logout(db, payload.session_token)
    return SuccessResponse(message="Logged out").model_dump()


def _change_password(payload: AuthRequest, request: Request, db: Session) -> dict:
    admin_auth.change_password(db, payload.session_token, payload.password, payload.new_password)
    return SuccessResponse(message="Password updated successfully").model_dump()


def _init_password(payload: AuthRequest, request: Request, db: Session) -> dict:
    admin_auth.init_password(db, payload.password)
    return SuccessResponse(message="Password initialized successfully").model_dump()


def _validate_session(payload: AuthRequest, request: Request, db: Session) -> dict:
    valid = sessions.validate_session(db, payload.session_token) is not None
    return SessionStatusResponse(valid=valid).model_dump()


AUTH_ACTIONS: dict[str, Callable[[AuthRequest, Request, Session], dict]] = {
    "check-init": _check_init,
    "login": _login,
    "logout": _logout,
    "change-password": _change_password,
    "init-password": _init_password,
    "validate-session": _validate_session,
}


@router.post("/admin-auth")
def admin_auth_action(
    payload: AuthRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Run one admin authentication action."""
    handler = AUTH_ACTIONS.get(payload.action)
    if handler is None:
        raise ValidationError("Invalid action")

    try:
        return handler(payload, request, db)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Database error during admin auth action '{payload.action}'")
        raise InternalError()
