"""Public site endpoints (no auth required)."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from schoolsite.api.deps import get_db
from schoolsite.errors import NotFoundError
from schoolsite.models.content import SiteContent
from schoolsite.models.gallery import GalleryItem
from schoolsite.models.inquiry import AdmissionInquiry
from schoolsite.schemas.site import (
    GalleryItemResponse,
    InquiryCreate,
    InquiryCreated,
    SiteContentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public"])


@router.get("/site-content", response_model=list[SiteContentResponse])
def get_site_content(db: Session = Depends(get_db)):
    """Get every site content section."""
    return db.query(SiteContent).order_by(SiteContent.section_key).all()


@router.get("/site-content/{section_key}", response_model=SiteContentResponse)
def get_site_section(section_key: str, db: Session = Depends(get_db)):
    """Get one site content section."""
    section = db.query(SiteContent).filter(SiteContent.section_key == section_key).first()
    if not section:
        raise NotFoundError("Section not found")
    return section


@router.get("/gallery", response_model=list[GalleryItemResponse])
def get_gallery(db: Session = Depends(get_db)):
    """Get active gallery items in display order."""
    return db.query(GalleryItem).filter(
        GalleryItem.is_active.is_(True),
    ).order_by(GalleryItem.display_order, GalleryItem.created_at).all()


@router.post("/inquiries", response_model=InquiryCreated, status_code=status.HTTP_201_CREATED)
def submit_inquiry(inquiry_data: InquiryCreate, db: Session = Depends(get_db)):
    """Submit an admission inquiry."""
    inquiry = AdmissionInquiry(**inquiry_data.model_dump(), status="pending")
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)

    logger.info(f"Admission inquiry received for class {inquiry.class_applying}")
    return InquiryCreated(id=inquiry.id)
