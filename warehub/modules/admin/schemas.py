# warehub/modules/admin/schemas.py
from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime

from warehub.shared.schemas.common import ApiModel


class AdminUserResponse(ApiModel):
    id: int
    name: str
    email: str
    roles: List[str]
    role: str
    contact_number: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoleGrantRequest(ApiModel):
    """Role to add to the user's set (existing roles are kept)"""
    role: str = Field(..., min_length=1)

    @field_validator('role')
    @classmethod
    def upper_role(cls, v):
        if not v.strip():
            raise ValueError('Role cannot be empty')
        return v.strip().upper()

    class Config:
        json_schema_extra = {"example": {"role": "WAREHOUSE_OWNER"}}
