"""Admin session store and the session check used by every privileged call."""
from datetime import datetime, timedelta
import hashlib
import logging
import secrets

from sqlalchemy.orm import Session

from schoolsite.config import get_settings
from schoolsite.database import utcnow
from schoolsite.models.admin import AdminSession

security_logger = logging.getLogger("security.admin_auth")
settings = get_settings()


def generate_session_token() -> str:
    """Fresh opaque bearer token (64 url-safe characters)."""
    return secrets.token_urlsafe(48)


def hash_session_token(token: str) -> str:
    """Hash a session token before persisting or looking it up."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_session(
    db: Session,
    admin_id: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
    now: datetime | None = None,
) -> tuple[AdminSession, str]:
    """Persist a new session and return it with its raw token.

    The raw token is only ever returned here; the table keeps its hash.
    """
    now = now or utcnow()
    token = generate_session_token()
    session = AdminSession(
        admin_id=admin_id,
        token_hash=hash_session_token(token),
        created_at=now,
        expires_at=now + timedelta(hours=settings.session_lifetime_hours),
        ip_address=ip_address[:45] if ip_address else None,
        user_agent=user_agent[:512] if user_agent else None,
    )
    db.add(session)
    db.flush()

    security_logger.info(
        "Admin session created",
        extra={"event": "session_created", "client_ip": ip_address, "expires_at": session.expires_at.isoformat()},
    )
    return session, token


def validate_session(db: Session, token: str | None, now: datetime | None = None) -> AdminSession | None:
    """Return the live session for ``token``, or None.

    A session is live iff its row exists and ``expires_at`` is strictly in
    the future. Never writes.
    """
    if not token:
        return None

    now = now or utcnow()
    return db.query(AdminSession).filter(
        AdminSession.token_hash == hash_session_token(token),
        AdminSession.expires_at > now,
    ).first()


def delete_session(db: Session, token: str) -> int:
    """Delete the session for ``token`` if it exists."""
    return db.query(AdminSession).filter(
        AdminSession.token_hash == hash_session_token(token),
    ).delete(synchronize_session=False)


def cleanup_expired_sessions(db: Session, now: datetime | None = None) -> int:
    """Delete expired sessions. Returns the number of rows removed."""
    now = now or utcnow()
    return db.query(AdminSession).filter(
        AdminSession.expires_at <= now,
    ).delete(synchronize_session=False)


def revoke_admin_sessions(db: Session, admin_id: str, keep_session_id: str | None = None) -> int:
    """Delete every session of an admin, optionally sparing one."""
    query = db.query(AdminSession).filter(AdminSession.admin_id == admin_id)
    if keep_session_id:
        query = query.filter(AdminSession.id != keep_session_id)
    revoked = query.delete(synchronize_session=False)

    security_logger.info(
        "Admin sessions revoked",
        extra={"event": "sessions_revoked", "admin_id": admin_id, "count": revoked},
    )
    return revoked
