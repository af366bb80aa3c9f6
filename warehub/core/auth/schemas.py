from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from warehub.core.auth.policy import normalize_roles
from warehub.shared.schemas.common import ApiModel


class UserLogin(BaseModel):
    """Login payload"""
    email: str = Field(..., description="User email")
    password: str = Field(..., min_length=1, description="User password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "priya.merchant@example.com",
                "password": "Demo@1234"
            }
        }


class UserRegister(ApiModel):
    """Registration payload; a user may hold several roles"""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    roles: List[str] = Field(..., min_length=1)
    contact_number: Optional[str] = Field(None, max_length=50)

    @field_validator('name', 'email')
    @classmethod
    def strip_required(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()

    @field_validator('roles')
    @classmethod
    def validate_roles(cls, v):
        roles = normalize_roles(v)
        if not roles:
            raise ValueError('At least one role is required')
        return roles


class UserResponse(ApiModel):
    """Public user shape: role set plus the derived primary role"""
    id: int
    name: str
    email: str
    roles: List[str]
    role: str
    contact_number: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class TokenResponse(ApiModel):
    """Token plus user"""
    access_token: str
    token_type: str = "bearer"
    token: str
    user: UserResponse
