from pydantic import Field, field_validator
from typing import Optional, Dict, Any, List
from datetime import datetime

from warehub.shared.enums import ListingStatus
from warehub.shared.schemas.common import ApiModel, BaseResponse

WIZARD_JSON_FIELDS = (
    "address", "use", "amenities", "approvals",
    "qualifications", "pricing", "hours", "services",
)


def _normalize_status(v):
    if v is None:
        return v
    value = str(v).strip().upper()
    if value not in ListingStatus.__members__:
        raise ValueError(f"Unknown listing status: {v}")
    return value


class ListingCreate(ApiModel):
    title: Optional[str] = Field(None, max_length=255)
    status: Optional[str] = Field(None, description="DRAFT (default), PUBLISHED or ARCHIVED")
    description: Optional[str] = None
    address: Optional[Dict[str, Any]] = None
    use: Optional[Any] = None
    amenities: Optional[Any] = None
    approvals: Optional[Any] = None
    qualifications: Optional[Any] = None
    pricing: Optional[Any] = None
    hours: Optional[Any] = None
    services: Optional[Any] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _normalize_status(v)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Okhla Ambient Storage",
                "address": {"addressLine1": "A-12, Okhla Phase II", "city": "Delhi", "state": "DL", "zip": "110020"},
                "pricing": {"totalSqFt": 20000, "minSqFt": 1000, "ratePerSqFtPerMonth": 22.5}
            }
        }


class ListingUpdate(ListingCreate):
    """Partial update: only fields present in the body are applied"""
    pass


class ListingResponse(ApiModel):
    id: int
    owner_id: int
    status: str
    title: str
    description: Optional[str] = None
    address: Optional[Dict[str, Any]] = None
    use: Optional[Any] = None
    amenities: Optional[Any] = None
    approvals: Optional[Any] = None
    qualifications: Optional[Any] = None
    pricing: Optional[Any] = None
    hours: Optional[Any] = None
    services: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PromotionResult(ApiModel):
    listing_id: int
    promoted: bool
    reason: str
    warehouse_id: Optional[int] = None


class BackfillItem(ApiModel):
    listing_id: int
    action: str
    warehouse_id: Optional[int] = None
    warehouse: Optional[Dict[str, Any]] = None


class BackfillResponse(BaseResponse):
    dry_run: bool
    created: int
    skipped: int
    items: List[BackfillItem] = []
