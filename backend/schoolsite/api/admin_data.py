"""Admin data endpoint.

Every action runs behind the session gate and performs exactly one
whitelisted record operation. There is no generic passthrough: an action
not listed in ``DATA_ACTIONS`` is rejected.
"""
from collections.abc import Callable
from typing import Any
import logging

from fastapi import APIRouter, Depends
import pydantic
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schoolsite.api.deps import get_db, require_admin_session
from schoolsite.database import utcnow
from schoolsite.errors import InternalError, ValidationError
from schoolsite.models.admin import AdminSession
from schoolsite.models.content import SiteContent
from schoolsite.models.gallery import GalleryItem
from schoolsite.models.inquiry import INQUIRY_STATUSES, AdmissionInquiry
from schoolsite.schemas.data import (
    DashboardStats,
    DataRequest,
    GalleryItemCreate,
    GalleryItemUpdate,
    InquiryResponse,
    InquiryStatusUpdate,
    RecordId,
    SiteContentUpdate,
    UploadUrlRequest,
)
from schoolsite.services import storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-data"])

PayloadModel = type[pydantic.BaseModel]


def _parse(model: PayloadModel, data: Any):
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid data")
    try:
        return model.model_validate(data)
    except pydantic.ValidationError:
        raise ValidationError("Invalid data")


def _success(**extra) -> dict:
    return {"success": True, **extra}


# Admission inquiries

def _get_inquiries(db: Session, session: AdminSession, data: Any) -> dict:
    inquiries = db.query(AdmissionInquiry).order_by(AdmissionInquiry.created_at.desc()).all()
    return _success(data=[InquiryResponse.model_validate(i).model_dump(mode="json") for i in inquiries])


def _update_inquiry_status(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(InquiryStatusUpdate, data)
    if not payload.id or not payload.status:
        raise ValidationError("Inquiry ID and status are required")
    if payload.status not in INQUIRY_STATUSES:
        raise ValidationError("Invalid status")

    db.query(AdmissionInquiry).filter(AdmissionInquiry.id == payload.id).update(
        {
            "status": payload.status,
            "reviewed_at": utcnow(),
            "reviewed_by": session.admin_id,
        },
        synchronize_session=False,
    )
    db.commit()
    return _success()


def _delete_inquiry(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(RecordId, data)
    if not payload.id:
        raise ValidationError("Inquiry ID is required")

    db.query(AdmissionInquiry).filter(AdmissionInquiry.id == payload.id).delete(synchronize_session=False)
    db.commit()
    return _success()


def _get_dashboard_stats(db: Session, session: AdminSession, data: Any) -> dict:
    counts = dict(
        db.query(AdmissionInquiry.status, func.count(AdmissionInquiry.id))
        .group_by(AdmissionInquiry.status)
        .all()
    )
    stats = DashboardStats(
        total_inquiries=sum(counts.values()),
        pending_inquiries=counts.get("pending", 0),
        approved_inquiries=counts.get("approved", 0),
        rejected_inquiries=counts.get("rejected", 0),
        gallery_items=db.query(func.count(GalleryItem.id)).scalar() or 0,
    )
    return _success(data=stats.model_dump())


# Site content

def _update_site_content(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(SiteContentUpdate, data)
    if not payload.section_key:
        raise ValidationError("Section key is required")

    values = payload.model_dump(exclude_unset=True, exclude={"section_key"})
    values.update({"updated_by": session.admin_id, "updated_at": utcnow()})
    db.query(SiteContent).filter(SiteContent.section_key == payload.section_key).update(
        values,
        synchronize_session=False,
    )
    db.commit()
    return _success()


# Gallery

def _create_gallery_item(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(GalleryItemCreate, data)
    if not payload.title or not payload.image_url:
        raise ValidationError("Title and image URL are required")

    item = GalleryItem(
        title=payload.title,
        image_url=payload.image_url,
        category=payload.category or None,
        is_active=True if payload.is_active is None else payload.is_active,
        display_order=payload.display_order or 0,
        media_type=payload.media_type or "image",
        created_by=session.admin_id,
    )
    db.add(item)
    db.commit()
    return _success(id=item.id)


def _update_gallery_item(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(GalleryItemUpdate, data)
    if not payload.id:
        raise ValidationError("Gallery item ID is required")

    values = payload.model_dump(exclude_unset=True, exclude={"id"})
    # Only category may be cleared; the other columns are required.
    values = {key: value for key, value in values.items() if value is not None or key == "category"}
    if "category" in values:
        values["category"] = values["category"] or None
    if not values:
        raise ValidationError("No gallery fields to update")

    db.query(GalleryItem).filter(GalleryItem.id == payload.id).update(values, synchronize_session=False)
    db.commit()
    return _success()


def _delete_gallery_item(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(RecordId, data)
    if not payload.id:
        raise ValidationError("Gallery item ID is required")

    db.query(GalleryItem).filter(GalleryItem.id == payload.id).delete(synchronize_session=False)
    db.commit()
    return _success()


# Storage

def _get_upload_url(db: Session, session: AdminSession, data: Any) -> dict:
    payload = _parse(UploadUrlRequest, data)
    return _success(**storage.create_signed_upload(payload.file_name, payload.content_type, session.admin_id))


DATA_ACTIONS: dict[str, Callable[[Session, AdminSession, Any], dict]] = {
    "get-inquiries": _get_inquiries,
    "update-inquiry-status": _update_inquiry_status,
    "delete-inquiry": _delete_inquiry,
    "get-dashboard-stats": _get_dashboard_stats,
    "update-site-content": _update_site_content,
    "create-gallery-item": _create_gallery_item,
    "update-gallery-item": _update_gallery_item,
    "delete-gallery-item": _delete_gallery_item,
    "get-upload-url": _get_upload_url,
}


@router.post("/admin-data")
def admin_data_action(
    payload: DataRequest,
    db: Session = Depends(get_db),
):
    """Run one privileged data action for a valid admin session."""
    try:
        session = require_admin_session(db, payload.session_token)

        handler = DATA_ACTIONS.get(payload.action) if isinstance(payload.action, str) else None
        if handler is None:
            raise ValidationError("Invalid action")

        return handler(db, session, payload.data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Database error during admin data action '{payload.action}'")
        raise InternalError()
