# ================================
# ADMIN SCHEMAS (schemas/admin.py)
# ================================

from typing import Optional
from pydantic import Field

from estate_admin.schemas.base import BaseSchema, BaseResponseSchema, TimestampMixin

class Admin(BaseResponseSchema, TimestampMixin):
    name: str
    email: str

class AdminCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)

class AdminUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=6)

class LoginRequest(BaseSchema):
    email: str
    password: str = Field(..., min_length=1)

class LoginResult(BaseSchema):
    """Data part of a successful login response"""
    access_token: str
    id: str
    name: str
    email: str
