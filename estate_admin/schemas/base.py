# ================================
# BASE SCHEMAS (schemas/base.py)
# ================================

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any, Generic, TypeVar
from datetime import datetime

class BaseSchema(BaseModel):
    """Base schema with shared configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
        coerce_numbers_to_str=True,  # Some endpoints return numeric ids
        extra="ignore",  # Read API returns more fields than we model
    )

class BaseResponseSchema(BaseSchema):
    """Base schema for entities with an ID field"""
    id: str

class TimestampMixin(BaseModel):
    """Mixin for timestamp fields"""
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

# ================================
# PAGINATION SCHEMAS
# ================================

T = TypeVar("T")

class Page(BaseModel, Generic[T]):
    """Normalized paginated list response"""
    items: List[T] = Field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 1
    is_previous: bool = False
    is_next: bool = False

    @property
    def has_next(self) -> bool:
        return self.is_next

# ================================
# RESPONSE ENVELOPES
# ================================

class SuccessResponse(BaseSchema):
    """Standard write response: {message, data}"""
    success: Optional[bool] = None
    message: Optional[str] = None
    data: Optional[Any] = None
