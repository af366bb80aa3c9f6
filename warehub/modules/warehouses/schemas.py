from typing import Optional, List
from datetime import datetime

from warehub.shared.schemas.common import ApiModel, UserSummary


class WarehouseResponse(ApiModel):
    id: int
    owner_id: int
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    total_space: Optional[float] = None
    available_space: Optional[float] = None
    price_per_sqft: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_url: Optional[str] = None
    is_approved: bool
    is_disabled_by_admin: bool
    status: str
    source_listing_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdminWarehouseResponse(WarehouseResponse):
    owner: UserSummary


class WarehouseListResponse(ApiModel):
    warehouses: List[WarehouseResponse]


class WarehouseApprovalRequest(ApiModel):
    is_approved: bool = False


class WarehouseDisableRequest(ApiModel):
    is_disabled_by_admin: bool = True
