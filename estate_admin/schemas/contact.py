# ================================
# CONTACT SCHEMAS (schemas/contact.py)
# ================================

from typing import Optional, Literal
from datetime import datetime, date
from pydantic import Field, field_validator

from estate_admin.schemas.base import BaseSchema, BaseResponseSchema, TimestampMixin

ContactType = Literal["phone", "email", "address"]
InquiryStatus = Literal["new", "in_progress", "contacted", "resolved", "closed"]

class ContactInfoBase(BaseSchema):
    """Base contact info schema"""
    contact_type: ContactType
    contact_value: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=100)
    is_primary: bool = False

    @field_validator("contact_type", mode="before")
    @classmethod
    def lower_type(cls, v):
        return v.lower() if isinstance(v, str) else v

class ContactInfoCreate(ContactInfoBase):
    """Schema for adding contact info"""
    pass

class ContactInfoUpdate(ContactInfoBase):
    """Schema for editing contact info"""
    is_active: bool = True

class ContactInfo(BaseResponseSchema, TimestampMixin):
    """Contact info as served by the read API"""
    contact_type: str
    contact_value: str
    label: Optional[str] = None
    is_primary: bool = False
    is_active: bool = True

class ContactInquiry(BaseResponseSchema, TimestampMixin):
    """Inbound inquiry from the public site"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    status: str = "new"
    follow_up_date: Optional[datetime] = None

class InquiryFilter(BaseSchema):
    """Filters for the inquiry list"""
    status: Optional[InquiryStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class InquiryStatusUpdate(BaseSchema):
    status: InquiryStatus
