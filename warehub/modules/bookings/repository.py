# warehub/modules/bookings/repository.py
from sqlalchemy.orm import Session, joinedload, selectinload
from typing import List, Optional
from datetime import datetime
import logging

from warehub.shared.database.models import Booking, BookingEvent, Warehouse
from .state_machine import INITIAL_STATUS

logger = logging.getLogger(__name__)


class BookingsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, booking_id: int) -> Optional[Booking]:
        """Booking with warehouse, owner, merchant and ordered events"""
        return self.db.query(Booking).options(
            joinedload(Booking.warehouse).joinedload(Warehouse.owner),
            joinedload(Booking.merchant),
            selectinload(Booking.events)
        ).filter(Booking.id == booking_id).first()

    def get_for_update(self, booking_id: int) -> Optional[Booking]:
        """Lock the booking row for the rest of the transaction"""
        return self.db.query(Booking).filter(
            Booking.id == booking_id
        ).with_for_update().first()

    def create_with_event(self, warehouse_id: int, merchant_id: int) -> Booking:
        """Booking row and its PENDING event, committed together"""
        now = datetime.now()
        booking = Booking(
            warehouse_id=warehouse_id,
            merchant_id=merchant_id,
            status=INITIAL_STATUS.value,
            created_at=now,
            updated_at=now
        )
        booking.events.append(BookingEvent(status=INITIAL_STATUS.value, created_at=now))

        try:
            self.db.add(booking)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        return booking

    def record_status(self, booking: Booking, status: str, note: Optional[str] = None) -> BookingEvent:
        """
        The only write path for booking status.

        Appends the event and sets booking.status in one commit. Notes pass
        the current status, so the booking row keeps its value.
        """
        now = datetime.now()
        event = BookingEvent(booking_id=booking.id, status=status, note=note, created_at=now)

        try:
            self.db.add(event)
            if booking.status != status:
                booking.status = status
                booking.updated_at = now
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        return event

    def list_by_merchant(self, merchant_id: int) -> List[Booking]:
        return self.db.query(Booking).options(
            joinedload(Booking.warehouse)
        ).filter(
            Booking.merchant_id == merchant_id
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def list_by_owner(self, owner_id: int) -> List[Booking]:
        return self.db.query(Booking).join(
            Warehouse, Booking.warehouse_id == Warehouse.id
        ).options(
            joinedload(Booking.warehouse),
            joinedload(Booking.merchant)
        ).filter(
            Warehouse.owner_id == owner_id
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def list_all(self) -> List[Booking]:
        return self.db.query(Booking).options(
            joinedload(Booking.warehouse),
            joinedload(Booking.merchant)
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).all()
