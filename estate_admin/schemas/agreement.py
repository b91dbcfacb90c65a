# ================================
# LEGAL AGREEMENT SCHEMAS (schemas/agreement.py)
# ================================

from typing import Optional, List, Literal
from datetime import date
from pydantic import Field, field_validator, model_validator

from estate_admin.schemas.base import BaseSchema, BaseResponseSchema, TimestampMixin

AgreementStatus = Literal["draft", "pending_signature", "signed", "executed"]
AgreementType = Literal["agreement_of_sale", "sale_deed", "lease_agreement", "rental_agreement", "other"]

# Business progression; displayed, not enforced
STATUS_ORDER = ("draft", "pending_signature", "signed", "executed")

MIN_SIGNATORIES = 2

def is_forward_transition(current: str, new: str) -> bool:
    """True when new status does not move the agreement backwards"""
    if current not in STATUS_ORDER or new not in STATUS_ORDER:
        return False
    return STATUS_ORDER.index(new) >= STATUS_ORDER.index(current)

def _clean_signatories(v):
    if v is None:
        return v
    return [s.strip() for s in v if s and s.strip()]

class AgreementBase(BaseSchema):
    """Base agreement schema"""
    agreement_type: AgreementType = "agreement_of_sale"
    document_name: str = Field(..., min_length=1, max_length=255)
    signatories: List[str]
    agreement_date: date
    valid_until: Optional[date] = None
    status: AgreementStatus = "draft"

    @field_validator("signatories", mode="before")
    @classmethod
    def drop_blank_signatories(cls, v):
        return _clean_signatories(v)

class AgreementCreate(AgreementBase):
    """Schema for creating an agreement; the file travels separately"""
    unit_id: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_agreement(self):
        if len(self.signatories) < MIN_SIGNATORIES:
            raise ValueError(f"At least {MIN_SIGNATORIES} signatories are required")
        if self.valid_until and self.valid_until < self.agreement_date:
            raise ValueError("Valid until cannot be before the agreement date")
        return self

class AgreementUpdate(BaseSchema):
    """Schema for updating an agreement; omitting the file keeps the old one"""
    agreement_type: Optional[AgreementType] = None
    document_name: Optional[str] = Field(None, min_length=1, max_length=255)
    signatories: Optional[List[str]] = None
    agreement_date: Optional[date] = None
    valid_until: Optional[date] = None
    status: Optional[AgreementStatus] = None

    @field_validator("signatories", mode="before")
    @classmethod
    def drop_blank_signatories(cls, v):
        return _clean_signatories(v)

    @model_validator(mode="after")
    def validate_agreement(self):
        if self.signatories is not None and len(self.signatories) < MIN_SIGNATORIES:
            raise ValueError(f"At least {MIN_SIGNATORIES} signatories are required")
        if self.agreement_date and self.valid_until and self.valid_until < self.agreement_date:
            raise ValueError("Valid until cannot be before the agreement date")
        return self

class LegalAgreement(BaseResponseSchema, TimestampMixin):
    """Agreement as served by the read API"""
    unit_id: str
    agreement_type: str = "agreement_of_sale"
    document_name: str = ""
    signatories: List[str] = Field(default_factory=list)
    agreement_date: Optional[date] = None
    valid_until: Optional[date] = None
    status: str = "draft"
    file_path: Optional[str] = None

    @field_validator("agreement_date", "valid_until", mode="before")
    @classmethod
    def date_part(cls, v):
        # Read API returns full timestamps
        if isinstance(v, str) and "T" in v:
            return v.split("T")[0]
        return v
