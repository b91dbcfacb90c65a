# ================================
# SCHEMAS PACKAGE INITIALIZATION (schemas/__init__.py)
# ================================

"""
Pydantic Schemas Package

Central imports for the request and response schemas
"""

# Base Schemas
from estate_admin.schemas.base import (
    BaseSchema,
    BaseResponseSchema,
    TimestampMixin,
    Page,
    SuccessResponse
)

# Documents
from estate_admin.schemas.document import Attachment, AttachmentList, FileUpload

# Real Estate Schemas
from estate_admin.schemas.business import (
    Project, ProjectCreate, ProjectUpdate, ProjectOption,
    Scheme, SchemeCreate, SchemeUpdate, SchemeOption,
    PurchasedUnit, UnitCreate, UnitUpdate, JointOwner
)
from estate_admin.schemas.agreement import LegalAgreement, AgreementCreate, AgreementUpdate

# People & Contact
from estate_admin.schemas.admin import Admin, AdminCreate, AdminUpdate, LoginRequest, LoginResult
from estate_admin.schemas.agent import Agent, AgentCreate, AgentUpdate, AgentStatusUpdate
from estate_admin.schemas.contact import (
    ContactInfo, ContactInfoCreate, ContactInfoUpdate,
    ContactInquiry, InquiryFilter, InquiryStatusUpdate
)
