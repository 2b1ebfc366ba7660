"""Admin credential and session models."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from schoolsite.database import Base, utcnow


class AdminCredential(Base):
    """The single admin identity of a deployment.

    ``password_hash`` is either a placeholder (empty, or tagged with the
    configured placeholder prefix) or a real bcrypt hash.
    """

    __tablename__ = "admin_credentials"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    sessions = relationship("AdminSession", back_populates="admin", cascade="all, delete-orphan")


class AdminSession(Base):
    """One row per active admin login."""

    __tablename__ = "admin_sessions"
    __table_args__ = (
        Index("ix_admin_sessions_admin_expires", "admin_id", "expires_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    admin_id = Column(String(36), ForeignKey("admin_credentials.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    expires_at = Column(DateTime, nullable=False, index=True)
    # Audit only, never consulted for authorization
    ip_address = Column(String(45))
    user_agent = Column(String(512))

    admin = relationship("AdminCredential", back_populates="sessions")
