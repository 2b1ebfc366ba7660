"""Site content model."""
import uuid

from sqlalchemy import JSON, Column, DateTime, String, Text

from schoolsite.database import Base, utcnow


class SiteContent(Base):
    """Editable content for one section of the public site (hero, about, ...)."""

    __tablename__ = "site_content"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    section_key = Column(String(50), unique=True, nullable=False, index=True)
    title = Column(String(255))
    subtitle = Column(String(255))
    description = Column(Text)
    image_url = Column(String(1024))
    extra_data = Column(JSON)  # Section-specific stats, buttons, lists
    updated_by = Column(String(36))  # admin_credentials.id
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
