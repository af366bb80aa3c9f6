from pydantic import Field
from typing import Optional, List
from datetime import datetime

from warehub.shared.schemas.common import ApiModel, UserSummary, OwnerContact


class BookingCreate(ApiModel):
    warehouse_id: int = Field(..., gt=0)


class BookingTransitionRequest(ApiModel):
    status: str = Field(..., description="ACCEPTED, REJECTED or CANCELED (case-insensitive)")


class BookingMessageRequest(ApiModel):
    booking_id: int = Field(..., gt=0)
    message: str = Field("", max_length=5000)
    merchant_email: Optional[str] = Field(None, description="Overrides the merchant's account email")


class BookingCreatedResponse(ApiModel):
    id: int
    status: str
    created_at: datetime


class BookingTransitionResponse(ApiModel):
    id: int
    status: str
    updated_at: datetime


class StatusHistoryEntry(ApiModel):
    status: str
    date: datetime
    note: Optional[str] = None


class WarehouseRef(ApiModel):
    id: int
    name: str


class BookingWarehouse(WarehouseRef):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    owner: OwnerContact


class BookingDetailResponse(ApiModel):
    id: int
    status: str
    created_at: datetime
    updated_at: datetime
    status_history: List[StatusHistoryEntry]
    warehouse: BookingWarehouse
    merchant: UserSummary


class BookingListItem(ApiModel):
    id: int
    status: str
    created_at: datetime
    warehouse: WarehouseRef
    merchant: Optional[UserSummary] = None
