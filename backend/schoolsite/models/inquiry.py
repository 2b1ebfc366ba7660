"""Admission inquiry model."""
import uuid

from sqlalchemy import Column, DateTime, Index, String, Text

from schoolsite.database import Base, utcnow

INQUIRY_STATUSES = ("pending", "approved", "rejected")


class AdmissionInquiry(Base):
    """Admission inquiry submitted from the public site."""

    __tablename__ = "admission_inquiries"
    __table_args__ = (
        Index("ix_admission_inquiries_status", "status"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_name = Column(String(100), nullable=False)
    parent_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    class_applying = Column(String(50), nullable=False)
    previous_school = Column(String(200))
    address = Column(Text)
    message = Column(Text)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime, default=utcnow, index=True)
    reviewed_at = Column(DateTime)
    reviewed_by = Column(String(36))  # admin_credentials.id
