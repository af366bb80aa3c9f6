# warehub/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Float,
    Numeric, ForeignKey, JSON, func
)
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import JSONB

from warehub.config.database import Base
from warehub.shared.enums import ListingStatus, WarehouseStatus, BookingStatus

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# =====================================================
# TIMESTAMP MIXIN
# =====================================================
class TimestampMixin:
    """Adds created_at and updated_at columns"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# USERS
# =====================================================

class User(Base, TimestampMixin):
    """Marketplace user. Roles are a set of tags, not a single discriminator."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSONType, nullable=False, default=list)
    contact_number = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    listings = relationship("Listing", back_populates="owner")
    warehouses = relationship("Warehouse", back_populates="owner")
    bookings = relationship("Booking", back_populates="merchant")


# =====================================================
# LISTINGS (owner wizard drafts)
# =====================================================

class Listing(Base, TimestampMixin):
    """Owner-authored storage offer built by the multi-step wizard"""
    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ListingStatus.DRAFT.value, index=True)
    title = Column(String(255), nullable=False, default="Untitled Listing")
    description = Column(Text)

    # Wizard JSON blobs
    address = Column(JSONType, nullable=False)
    use = Column(JSONType)
    amenities = Column(JSONType)
    approvals = Column(JSONType)
    qualifications = Column(JSONType)
    pricing = Column(JSONType)
    hours = Column(JSONType)
    services = Column(JSONType)

    # Relationships
    owner = relationship("User", back_populates="listings")
    promoted_warehouse = relationship("Warehouse", back_populates="source_listing", uselist=False)


# =====================================================
# WAREHOUSES (bookable units)
# =====================================================

class Warehouse(Base, TimestampMixin):
    """Flattened, bookable storage unit (seeded or promoted from a listing)"""
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text)
    city = Column(String(120))
    state = Column(String(120))
    pincode = Column(String(20))
    type = Column(String(50))
    description = Column(Text)
    total_space = Column(Float)
    available_space = Column(Float)
    price_per_sqft = Column(Numeric(10, 2))
    latitude = Column(Float)
    longitude = Column(Float)
    image_url = Column(Text)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_disabled_by_admin = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=WarehouseStatus.PUBLISHED.value)

    # Provenance: one warehouse per promoted listing
    source_listing_id = Column(Integer, ForeignKey("listings.id"), nullable=True, unique=True)

    # Relationships
    owner = relationship("User", back_populates="warehouses")
    source_listing = relationship("Listing", back_populates="promoted_warehouse")
    bookings = relationship("Booking", back_populates="warehouse")

    @property
    def is_bookable(self) -> bool:
        return (
            self.status == WarehouseStatus.PUBLISHED.value
            and bool(self.is_approved)
            and not self.is_disabled_by_admin
        )


# =====================================================
# BOOKINGS
# =====================================================

class Booking(Base, TimestampMixin):
    """Merchant reservation request against a warehouse"""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    merchant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)

    # Relationships
    warehouse = relationship("Warehouse", back_populates="bookings")
    merchant = relationship("User", back_populates="bookings")
    events = relationship(
        "BookingEvent",
        back_populates="booking",
        order_by="BookingEvent.id",
        cascade="all, delete-orphan"
    )


class BookingEvent(Base):
    """Append-only audit entry for a booking (status change or owner note)"""
    __tablename__ = "booking_events"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    note = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    # Relationships
    booking = relationship("Booking", back_populates="events")
