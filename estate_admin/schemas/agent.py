# ================================
# AGENT SCHEMAS (schemas/agent.py)
# ================================

from typing import Optional, Literal
from pydantic import Field, field_validator, model_validator

from estate_admin.schemas.base import BaseSchema, BaseResponseSchema, TimestampMixin
from estate_admin.schemas.document import AttachmentList

AgentReviewStatus = Literal["pending", "approved", "verified", "rejected"]

class Agent(BaseResponseSchema, TimestampMixin):
    """Agent with documents resolved into one attachment list"""
    name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    pan_number: Optional[str] = None
    aadhar_number: Optional[str] = None
    rera_id: Optional[str] = None
    agency_name: Optional[str] = None
    city: Optional[str] = None
    status: str = "pending"
    attachments: AttachmentList = Field(default_factory=AttachmentList)

    @model_validator(mode="before")
    @classmethod
    def resolve_documents(cls, values):
        if isinstance(values, dict) and "attachments" not in values:
            values = dict(values)
            # Imported here: the mapper depends on the schemas package
            from estate_admin.mappers.document_mapper import normalize_attachments
            values["attachments"] = normalize_attachments(values)
        return values

    @property
    def display_name(self) -> str:
        return self.full_name or self.name or self.email or self.id

class AgentProfileBase(BaseSchema):
    """Editable agent details"""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=10, max_length=15)
    pan_number: Optional[str] = Field(None, max_length=10)
    aadhar_number: Optional[str] = Field(None, max_length=14)
    rera_id: Optional[str] = None
    agency_name: Optional[str] = None
    city: Optional[str] = None

    @field_validator("pan_number", mode="before")
    @classmethod
    def upper_pan(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("aadhar_number", mode="before")
    @classmethod
    def compact_aadhar(cls, v):
        return v.replace(" ", "") if isinstance(v, str) else v

class AgentCreate(AgentProfileBase):
    pass

class AgentUpdate(AgentProfileBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    phone: Optional[str] = Field(None, min_length=10, max_length=15)

class AgentStatusUpdate(BaseSchema):
    """Review decision for an agent application"""
    status: AgentReviewStatus
