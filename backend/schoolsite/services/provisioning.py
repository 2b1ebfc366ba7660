"""Deployment-time provisioning of the admin credential."""
import logging
import secrets

from sqlalchemy.orm import Session

from schoolsite.config import get_settings
from schoolsite.models.admin import AdminCredential

logger = logging.getLogger(__name__)
settings = get_settings()


def placeholder_hash() -> str:
    """A tagged value that can never verify as a bcrypt hash of any password."""
    return settings.placeholder_hash_prefix + secrets.token_hex(16)


def ensure_admin_credential(db: Session) -> AdminCredential:
    """Create the admin credential in the uninitialized state if there is none."""
    admin = db.query(AdminCredential).first()
    if admin:
        return admin

    admin = AdminCredential(username=settings.admin_username, password_hash=placeholder_hash())
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Provisioned admin credential '{admin.username}' awaiting password initialization")
    return admin
