"""Admin authentication service.

Owns every write to the admin credential and session tables. All failures
are raised as ``schoolsite.errors`` exceptions; callers at the HTTP
boundary turn them into ``{"error": ...}`` responses.

Unknown usernames and wrong passwords are deliberately indistinguishable:
both surface as ``CredentialError("Invalid credentials")``.
"""
from datetime import datetime
from functools import lru_cache
import logging

import bcrypt
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schoolsite.config import get_settings
from schoolsite.database import utcnow
from schoolsite.errors import (
    ALREADY_INITIALIZED,
    INVALID_SESSION,
    NOT_AUTHENTICATED,
    AuthenticationError,
    CredentialError,
    StateError,
    ValidationError,
)
from schoolsite.models.admin import AdminCredential
from schoolsite.services import sessions

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security.admin_auth")
settings = get_settings()

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.bcrypt_rounds),
    ).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


@lru_cache
def _dummy_hash() -> str:
    # Compared against when the username is unknown so that both failure
    # paths cost one bcrypt check.
    return hash_password("dummy-password-for-timing")


def is_placeholder_hash(password_hash: str | None) -> bool:
    return not password_hash or password_hash.startswith(settings.placeholder_hash_prefix)


def get_admin_credential(db: Session) -> AdminCredential | None:
    """Get the deployment's admin credential row."""
    return db.query(AdminCredential).order_by(AdminCredential.created_at).first()


def check_init(db: Session) -> bool:
    """Whether the admin password still has to be set."""
    admin = get_admin_credential(db)
    return admin is None or is_placeholder_hash(admin.password_hash)


def _check_password_strength(password: str | None, message: str) -> None:
    if not password or len(password) < settings.min_password_length:
        raise ValidationError(message)


def init_password(db: Session, new_password: str | None) -> AdminCredential:
    """Set the first real password. Allowed once per deployment."""
    admin = get_admin_credential(db)
    if admin is not None and not is_placeholder_hash(admin.password_hash):
        security_logger.warning("Password init rejected: already initialized", extra={"event": "init_rejected"})
        raise StateError(ALREADY_INITIALIZED)

    _check_password_strength(
        new_password,
        f"Password must be at least {settings.min_password_length} characters",
    )
    new_hash = hash_password(new_password)

    if admin is None:
        admin = AdminCredential(username=settings.admin_username, password_hash=new_hash)
        db.add(admin)
        db.commit()
        db.refresh(admin)
    else:
        # Conditional on the placeholder still being there, so that of two
        # racing bootstraps only one can win.
        updated = db.query(AdminCredential).filter(
            AdminCredential.id == admin.id,
            or_(
                AdminCredential.password_hash == "",
                AdminCredential.password_hash.startswith(settings.placeholder_hash_prefix, autoescape=True),
            ),
        ).update({"password_hash": new_hash, "updated_at": utcnow()}, synchronize_session=False)
        if not updated:
            db.rollback()
            raise StateError(ALREADY_INITIALIZED)
        db.commit()
        db.refresh(admin)

    security_logger.info("Admin password initialized", extra={"event": "password_initialized", "admin_id": admin.id})
    return admin


def login(
    db: Session,
    username: str | None,
    password: str | None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Check credentials and open a new session.

    Returns the raw session token and its expiry.
    """
    if not username or not password:
        raise ValidationError("Username and password are required")

    admin = db.query(AdminCredential).filter(AdminCredential.username == username).first()
    if admin is None:
        verify_password(password, _dummy_hash())
        password_ok = False
    elif is_placeholder_hash(admin.password_hash):
        password_ok = False
    else:
        password_ok = verify_password(password, admin.password_hash)

    if not password_ok:
        security_logger.warning("Admin login failed", extra={"event": "login_failed", "client_ip": ip_address})
        raise CredentialError(INVALID_CREDENTIALS)

    now = now or utcnow()
    _sweep_expired_sessions(db, now)
    session, token = sessions.create_session(db, admin.id, ip_address, user_agent, now=now)
    db.commit()

    security_logger.info("Admin login succeeded", extra={"event": "login_succeeded", "admin_id": admin.id, "client_ip": ip_address})
    return token, session.expires_at


def _sweep_expired_sessions(db: Session, now: datetime) -> None:
    # Housekeeping only; validity never depends on rows being deleted.
    try:
        removed = sessions.cleanup_expired_sessions(db, now)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Expired session cleanup failed: {e}")
        return
    if removed:
        logger.info(f"Removed {removed} expired admin sessions")


def logout(db: Session, token: str | None) -> None:
    """End a session. Unknown or missing tokens are not an error."""
    if not token:
        return
    removed = sessions.delete_session(db, token)
    db.commit()
    security_logger.info("Admin logout", extra={"event": "logout", "removed": removed})


def change_password(
    db: Session,
    token: str | None,
    current_password: str | None,
    new_password: str | None,
    now: datetime | None = None,
) -> AdminCredential:
    """Replace the admin password after re-checking session and current password."""
    if not token:
        raise AuthenticationError(NOT_AUTHENTICATED)

    session = sessions.validate_session(db, token, now=now)
    if session is None:
        raise AuthenticationError(INVALID_SESSION)

    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")

    _check_password_strength(
        new_password,
        f"New password must be at least {settings.min_password_length} characters",
    )

    admin = db.query(AdminCredential).filter(AdminCredential.id == session.admin_id).first()
    if admin is None or not verify_password(current_password, admin.password_hash):
        security_logger.warning(
            "Password change rejected: wrong current password",
            extra={"event": "password_change_rejected", "admin_id": session.admin_id},
        )
        raise CredentialError("Current password is incorrect")

    admin.password_hash = hash_password(new_password)
    if settings.revoke_sessions_on_password_change:
        sessions.revoke_admin_sessions(db, admin.id, keep_session_id=session.id)
    db.commit()

    security_logger.info("Admin password changed", extra={"event": "password_changed", "admin_id": admin.id})
    return admin
