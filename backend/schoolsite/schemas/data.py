"""Admin data API schemas.

Payload models list every field an action may touch. Anything else in the
request ``data`` object is dropped, so a valid session can only reach the
columns named here.
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class DataRequest(BaseModel):
    """Body of a call to the admin data endpoint.

    Left untyped so that the session gate, not body validation, answers
    first. Each action checks ``data`` against its own payload model.
    """

    action: Any = None
    session_token: Any = Field(None, alias="sessionToken")
    data: Any = None

    class Config:
        populate_by_name = True


class InquiryStatusUpdate(BaseModel):
    id: str | None = None
    status: str | None = None


class RecordId(BaseModel):
    id: str | None = None


class SiteContentUpdate(BaseModel):
    section_key: str | None = None
    title: str | None = None
    subtitle: str | None = None
    description: str | None = None
    image_url: str | None = None
    extra_data: Any = None


class GalleryItemCreate(BaseModel):
    title: str | None = None
    image_url: str | None = None
    category: str | None = None
    is_active: bool | None = None
    display_order: int | None = None
    media_type: str | None = None


class GalleryItemUpdate(GalleryItemCreate):
    id: str | None = None


class UploadUrlRequest(BaseModel):
    file_name: str | None = Field(None, alias="fileName")
    content_type: str | None = Field(None, alias="contentType")

    class Config:
        populate_by_name = True


class InquiryResponse(BaseModel):
    """Admission inquiry as shown in the admin panel."""

    id: str
    student_name: str
    parent_name: str
    email: str
    phone: str
    class_applying: str
    previous_school: str | None
    address: str | None
    message: str | None
    status: str
    created_at: datetime | None
    reviewed_at: datetime | None
    reviewed_by: str | None

    class Config:
        from_attributes = True


class DashboardStats(BaseModel):
    total_inquiries: int
    pending_inquiries: int
    approved_inquiries: int
    rejected_inquiries: int
    gallery_items: int
