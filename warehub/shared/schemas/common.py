# warehub/shared/schemas/common.py
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

class ApiModel(BaseModel):
    """Response/request base: snake_case in Python, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class BaseResponse(ApiModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class OkResponse(BaseModel):
    ok: bool = True

class UserSummary(ApiModel):
    id: int
    name: str
    email: str

class OwnerContact(UserSummary):
    contact_number: Optional[str] = None
