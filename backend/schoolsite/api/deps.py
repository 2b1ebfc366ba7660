"""Shared API dependencies."""
import logging
from typing import Any

from fastapi import Request
from sqlalchemy.orm import Session

from schoolsite.database import get_db
from schoolsite.errors import AUTHENTICATION_REQUIRED, INVALID_SESSION, AuthenticationError
from schoolsite.models.admin import AdminSession
from schoolsite.services.sessions import validate_session

__all__ = ["get_db", "get_request_ip", "require_admin_session"]

security_logger = logging.getLogger("security.admin_auth")


def get_request_ip(request: Request) -> str | None:
    """Extract best-effort client IP for session metadata."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def require_admin_session(db: Session, session_token: Any) -> AdminSession:
    """Gate for privileged operations.

    Every way a token can be bad (never issued, logged out, expired, not a
    string) is reported with the same message.
    """
    if session_token is None or session_token == "":
        raise AuthenticationError(AUTHENTICATION_REQUIRED)

    session = validate_session(db, session_token) if isinstance(session_token, str) else None
    if session is None:
        security_logger.warning("Admin data call with invalid session", extra={"event": "auth_failure"})
        raise AuthenticationError(INVALID_SESSION)
    return session
