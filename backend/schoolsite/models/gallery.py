"""Gallery model."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from schoolsite.database import Base, utcnow


class GalleryItem(Base):
    """Image or video shown in the public gallery."""

    __tablename__ = "gallery"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    image_url = Column(String(1024), nullable=False)
    category = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)
    media_type = Column(String(20), nullable=False, default="image")
    created_by = Column(String(36))  # admin_credentials.id
    created_at = Column(DateTime, default=utcnow)
