# warehub/shared/enums.py
from enum import Enum


class Role(str, Enum):
    MERCHANT = "MERCHANT"
    WAREHOUSE_OWNER = "WAREHOUSE_OWNER"
    ADMIN = "ADMIN"


class ListingStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class WarehouseStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"
