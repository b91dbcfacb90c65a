# ================================
# REAL ESTATE SCHEMAS (schemas/business.py)
# ================================

from pydantic import Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import date

from estate_admin.schemas.base import BaseSchema, BaseResponseSchema, TimestampMixin

ProjectStatus = Literal["available", "sold_out", "coming_soon"]
PropertyType = Literal["commercial", "residential", "plot", "land", "mixed_use"]
SchemeType = Literal["single_payment", "installment"]
PaymentStatus = Literal["none", "advance_paid", "partially_paid", "fully_paid"]
UnitStatus = Literal["none", "payment_ongoing", "completed"]

# ================================
# Project Schemas
# ================================

class PricingDetails(BaseSchema):
    rent_per_sqft: float = Field(0, ge=0)
    sale_price_per_sqft: float = Field(0, ge=0)
    maintenance_per_sqft: float = Field(0, ge=0)

class GalleryImage(BaseSchema):
    url: str
    filename: Optional[str] = None
    alt_text: Optional[str] = None
    is_primary: bool = False
    sort_order: int = 0

class Amenity(BaseSchema):
    name: str
    description: str = ""
    icon: str = ""

def check_unit_counters(total, available, sold, reserved) -> None:
    """available + sold + reserved must never exceed total"""
    if None in (total, available, sold, reserved):
        return
    if available > total:
        raise ValueError("Available units cannot exceed total units")
    if available + sold + reserved > total:
        raise ValueError("Available, sold and reserved units cannot exceed total units")

class ProjectBase(BaseSchema):
    """Base schema for Project"""
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    long_description: Optional[str] = None
    website_url: Optional[str] = None
    status: ProjectStatus = "available"
    property_type: PropertyType = "residential"
    base_price: float = Field(0, ge=0)
    has_rental_income: bool = False
    pricing_details: PricingDetails = Field(default_factory=PricingDetails)
    quick_info: Optional[Dict[str, Any]] = None
    key_highlights: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    investment_highlights: List[str] = Field(default_factory=list)
    amenities: List[Amenity] = Field(default_factory=list)

    # Unit counters
    total_units: int = Field(1, ge=0)
    available_units: int = Field(0, ge=0)
    sold_units: int = Field(0, ge=0)
    reserved_units: int = Field(0, ge=0)

    rera_number: Optional[str] = None
    building_permission: Optional[str] = None

class ProjectCreate(ProjectBase):
    """Schema for creating a Project"""
    gallery_images: List[GalleryImage] = Field(default_factory=list)
    is_active: bool = True

    @model_validator(mode="after")
    def validate_units(self):
        check_unit_counters(self.total_units, self.available_units, self.sold_units, self.reserved_units)
        return self

class ProjectUpdate(BaseSchema):
    """Schema for updating a Project (any subset of fields)"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    long_description: Optional[str] = None
    website_url: Optional[str] = None
    status: Optional[ProjectStatus] = None
    property_type: Optional[PropertyType] = None
    base_price: Optional[float] = Field(None, ge=0)
    has_rental_income: Optional[bool] = None
    pricing_details: Optional[PricingDetails] = None
    key_highlights: Optional[List[str]] = None
    features: Optional[List[str]] = None
    investment_highlights: Optional[List[str]] = None
    amenities: Optional[List[Amenity]] = None

    total_units: Optional[int] = Field(None, ge=0)
    available_units: Optional[int] = Field(None, ge=0)
    sold_units: Optional[int] = Field(None, ge=0)
    reserved_units: Optional[int] = Field(None, ge=0)

    rera_number: Optional[str] = None
    building_permission: Optional[str] = None
    is_active: Optional[bool] = None
    deleted_images: Optional[List[str]] = None  # URLs of gallery images to remove

    @model_validator(mode="after")
    def validate_units(self):
        check_unit_counters(self.total_units, self.available_units, self.sold_units, self.reserved_units)
        return self

class Project(ProjectBase, BaseResponseSchema, TimestampMixin):
    """Project as served by the read API"""
    title: str = ""
    location: str = ""
    status: str = "available"
    property_type: str = "residential"
    gallery_images: List[GalleryImage] = Field(default_factory=list)
    is_active: bool = True

class ProjectOption(BaseSchema):
    """Minimal project for dropdowns"""
    id: str
    title: str

# ================================
# Scheme Schemas
# ================================

SCHEME_FIELD_GROUPS: Dict[str, tuple] = {
    "single_payment": ("balance_payment_days",),
    "installment": ("total_installments", "monthly_installment_amount"),
}

def check_payment_groups(values: Dict[str, Any], scheme_type: Optional[str]) -> None:
    """Exactly one payment field group may be populated"""
    populated = {
        name: [f for f in fields if values.get(f) is not None]
        for name, fields in SCHEME_FIELD_GROUPS.items()
    }
    if scheme_type is None:
        if all(populated.values()):
            raise ValueError("Single payment and installment fields cannot both be set")
        return

    for name, fields in SCHEME_FIELD_GROUPS.items():
        if name == scheme_type:
            missing = [f for f in fields if values.get(f) is None]
            if missing:
                raise ValueError(f"{', '.join(missing)} required for {scheme_type} schemes")
        elif populated[name]:
            raise ValueError(f"{', '.join(populated[name])} must be empty for {scheme_type} schemes")

class SchemeBase(BaseSchema):
    """Base schema for investment schemes"""
    scheme_type: SchemeType
    scheme_name: str = Field(..., min_length=1, max_length=255)
    area_sqft: float = Field(..., gt=0)
    booking_advance: float = Field(0, ge=0)
    balance_payment_days: Optional[int] = Field(None, gt=0)
    total_installments: Optional[int] = Field(None, gt=0)
    monthly_installment_amount: Optional[float] = Field(None, gt=0)
    rental_start_month: int = Field(1, ge=0)
    start_date: date
    end_date: Optional[date] = None

class SchemeCreate(SchemeBase):
    """Schema for creating a scheme; project_id is fixed from here on"""
    project_id: str = Field(..., min_length=1)
    is_active: bool = True

    @model_validator(mode="after")
    def validate_scheme(self):
        check_payment_groups(self.model_dump(), self.scheme_type)
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

class SchemeUpdate(BaseSchema):
    """Schema for updating a scheme (project_id is not updatable)"""
    scheme_type: Optional[SchemeType] = None
    scheme_name: Optional[str] = Field(None, min_length=1, max_length=255)
    area_sqft: Optional[float] = Field(None, gt=0)
    booking_advance: Optional[float] = Field(None, ge=0)
    balance_payment_days: Optional[int] = Field(None, gt=0)
    total_installments: Optional[int] = Field(None, gt=0)
    monthly_installment_amount: Optional[float] = Field(None, gt=0)
    rental_start_month: Optional[int] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def validate_scheme(self):
        check_payment_groups(self.model_dump(), self.scheme_type)
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

class Scheme(BaseResponseSchema, TimestampMixin):
    """Scheme as served by the read API"""
    project_id: str
    scheme_type: str
    scheme_name: str = ""
    area_sqft: float = 0
    booking_advance: Optional[float] = None
    balance_payment_days: Optional[int] = None
    total_installments: Optional[int] = None
    monthly_installment_amount: Optional[float] = None
    rental_start_month: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True

class SchemeOption(BaseSchema):
    """Minimal scheme for dropdowns"""
    id: str
    scheme_name: str
    project_id: Optional[str] = None

# ================================
# Purchased Unit Schemas
# ================================

class JointOwner(BaseSchema):
    user_profile_id: str = Field(..., min_length=1)
    relation: str = Field(..., min_length=1)
    share_percentage: Optional[float] = Field(None, ge=0, le=100)

def check_joint_owners(is_joint: Optional[bool], owners: Optional[List[JointOwner]]) -> None:
    if is_joint is None:
        return
    if is_joint and not owners:
        raise ValueError("At least one joint owner is required for joint ownership")
    if not is_joint and owners:
        raise ValueError("Joint owners are only allowed for joint ownership")
    if owners:
        total_share = sum(o.share_percentage or 0 for o in owners)
        if total_share > 100:
            raise ValueError("Joint owner shares cannot exceed 100%")

class UnitCreate(BaseSchema):
    """Schema for purchasing a unit"""
    project_id: str = Field(..., min_length=1)
    scheme_id: str = Field(..., min_length=1)
    unit_number: Optional[str] = Field(None, max_length=100)
    purchaser_user_id: Optional[str] = None
    user_profile_id: Optional[str] = None
    is_joint_ownership: bool = False
    joint_owners: Optional[List[JointOwner]] = None
    number_of_units: int = Field(1, ge=1)
    floor_number: Optional[int] = None
    purchase_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_ownership(self):
        check_joint_owners(self.is_joint_ownership, self.joint_owners)
        return self

class UnitUpdate(BaseSchema):
    """Schema for updating a purchased unit; balance_amount is server computed"""
    unit_number: Optional[str] = Field(None, max_length=100)
    is_joint_ownership: Optional[bool] = None
    joint_owners: Optional[List[JointOwner]] = None
    number_of_units: Optional[int] = Field(None, ge=1)
    user_paid: Optional[float] = Field(None, ge=0)
    payment_status: Optional[PaymentStatus] = None
    unit_status: Optional[UnitStatus] = None
    monthly_rental: Optional[float] = Field(None, ge=0)
    rental_start_date: Optional[date] = None
    floor_number: Optional[int] = None

    @model_validator(mode="after")
    def validate_ownership(self):
        check_joint_owners(self.is_joint_ownership, self.joint_owners)
        return self

class PurchasedUnit(BaseResponseSchema, TimestampMixin):
    """Purchased unit as served by the read API"""
    unit_number: Optional[str] = None
    project_id: str
    scheme_id: str
    purchaser_user_id: Optional[str] = None
    user_profile_id: Optional[str] = None
    is_joint_ownership: bool = False
    joint_owners: Optional[List[JointOwner]] = None
    number_of_units: int = 1
    total_area_sqft: Optional[float] = None
    total_investment: Optional[float] = None
    user_paid: Optional[float] = None
    balance_amount: Optional[float] = None
    purchase_date: Optional[date] = None
    monthly_rental: Optional[float] = None
    rental_start_date: Optional[date] = None
    payment_status: str = "none"
    unit_status: str = "none"
    floor_number: Optional[int] = None

    @field_validator("joint_owners", mode="before")
    @classmethod
    def empty_owners(cls, v):
        return v or None
