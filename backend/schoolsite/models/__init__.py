"""SQLAlchemy models package."""
from schoolsite.models.admin import AdminCredential, AdminSession
from schoolsite.models.content import SiteContent
from schoolsite.models.gallery import GalleryItem
from schoolsite.models.inquiry import INQUIRY_STATUSES, AdmissionInquiry

__all__ = [
    "AdminCredential",
    "AdminSession",
    "AdmissionInquiry",
    "GalleryItem",
    "INQUIRY_STATUSES",
    "SiteContent",
]
