"""Public site schemas."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator


class InquiryCreate(BaseModel):
    """Admission inquiry submitted from the public form."""

    student_name: str = Field(..., min_length=2, max_length=100)
    parent_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=15)
    class_applying: str = Field(..., min_length=1, max_length=50)
    previous_school: str | None = Field(None, max_length=200)
    address: str | None = Field(None, max_length=500)
    message: str | None = Field(None, max_length=1000)

    @field_validator("student_name", "parent_name", "email", "phone", mode="before")
    @classmethod
    def strip_required(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("previous_school", "address", "message", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class InquiryCreated(BaseModel):
    success: bool = True
    id: str


class GalleryItemResponse(BaseModel):
    """Gallery item."""

    id: str
    title: str
    image_url: str
    category: str | None
    is_active: bool
    display_order: int
    media_type: str
    created_at: datetime | None

    class Config:
        from_attributes = True


class SiteContentResponse(BaseModel):
    """Content of one site section."""

    id: str
    section_key: str
    title: str | None
    subtitle: str | None
    description: str | None
    image_url: str | None
    extra_data: Any = None
    updated_at: datetime | None

    class Config:
        from_attributes = True
