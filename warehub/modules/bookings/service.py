# warehub/modules/bookings/service.py
from typing import List, Optional
from fastapi import BackgroundTasks, HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
import logging

from .repository import BookingsRepository
from .schemas import (
    BookingCreatedResponse, BookingTransitionResponse, BookingDetailResponse,
    BookingListItem, StatusHistoryEntry, BookingWarehouse, WarehouseRef
)
from .state_machine import parse_status, ensure_transition, ui_status
from warehub.core.auth import policy
from warehub.core.exceptions import NotFound, Forbidden, InvalidInput, internal_error
from warehub.modules.warehouses.repository import WarehousesRepository
from warehub.shared.database.models import Booking, User
from warehub.shared.enums import Role
from warehub.shared.schemas.common import UserSummary, OwnerContact
from warehub.shared.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

OWNER_NOTE_PREFIX = "OWNER_MSG: "


class BookingsService:
    def __init__(self, db: Session, notifier: Optional[NotificationService] = None):
        self.db = db
        self.repository = BookingsRepository(db)
        self.warehouses = WarehousesRepository(db)
        self.notifier = notifier or NotificationService()

    # ==================== CREATE ====================

    async def create_booking(self, merchant: User, warehouse_id: int) -> BookingCreatedResponse:
        """New PENDING booking; the merchant role and a bookable warehouse are required"""
        if not policy.has_role(merchant.roles, Role.MERCHANT):
            raise Forbidden()

        warehouse = self.warehouses.get(warehouse_id)
        if not warehouse:
            raise NotFound("Warehouse not found")
        if not warehouse.is_bookable:
            raise InvalidInput("Warehouse not bookable")

        try:
            booking = self.repository.create_with_event(warehouse.id, merchant.id)
            logger.info(f"📦 Booking #{booking.id} created - merchant #{merchant.id}, warehouse #{warehouse.id}")

            return BookingCreatedResponse(
                id=booking.id,
                status=ui_status(booking.status),
                created_at=booking.created_at
            )
        except Exception:
            logger.exception("❌ Error creating booking")
            raise internal_error()

    # ==================== TRANSITIONS ====================

    async def transition_booking(self, booking_id: int, requested_status: str, actor: User) -> BookingTransitionResponse:
        """
        Move a booking to a new status.

        The row is locked while the transition is validated and written, so
        two concurrent requests cannot both act on a stale status.
        """
        try:
            booking = self.repository.get_for_update(booking_id)
            if not booking:
                raise NotFound()

            if not policy.can_manage_booking(actor, booking):
                raise Forbidden()

            target = parse_status(requested_status)
            ensure_transition(booking.status, target.value)

            previous = booking.status
            self.repository.record_status(booking, target.value)
            logger.info(f"🔄 Booking #{booking.id}: {previous} → {target.value} (by user #{actor.id})")

            return BookingTransitionResponse(
                id=booking.id,
                status=ui_status(booking.status),
                updated_at=booking.updated_at
            )

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Error updating booking #{booking_id}")
            raise internal_error()

    async def attach_booking_note(
        self,
        booking_id: int,
        note: str,
        actor: User,
        merchant_email: Optional[str] = None,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> None:
        """
        Owner -> merchant message.

        Recorded as an event carrying the current status; the booking status
        does not change. The email goes out after the response.
        """
        booking = self.repository.get(booking_id)
        if not booking:
            raise NotFound()
        if not policy.can_message_booking(actor, booking):
            raise Forbidden()

        text = note or ""
        try:
            self.repository.record_status(booking, booking.status, note=f"{OWNER_NOTE_PREFIX}{text}")
        except Exception:
            logger.exception(f"❌ Error saving note on booking #{booking_id}")
            raise internal_error()

        message = {
            "to": merchant_email or booking.merchant.email,
            "subject": f"Message about booking #{booking.id}",
            "body": text,
        }
        if background_tasks is not None:
            background_tasks.add_task(self.notifier.send, message)
        else:
            await run_in_threadpool(self.notifier.send, message)

        logger.info(f"✉️ Note attached to booking #{booking.id} by owner #{actor.id}")

    # ==================== READS ====================

    async def get_booking_detail(self, booking_id: int, viewer: User) -> BookingDetailResponse:
        booking = self.repository.get(booking_id)
        if not booking:
            raise NotFound()
        if not policy.can_view_booking(viewer, booking):
            raise Forbidden()

        warehouse = booking.warehouse
        owner = warehouse.owner

        return BookingDetailResponse(
            id=booking.id,
            status=ui_status(booking.status),
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            status_history=[
                StatusHistoryEntry(status=ui_status(event.status), date=event.created_at, note=event.note)
                for event in booking.events
            ],
            warehouse=BookingWarehouse(
                id=warehouse.id,
                name=warehouse.name,
                address=warehouse.address,
                city=warehouse.city,
                state=warehouse.state,
                pincode=warehouse.pincode,
                owner=OwnerContact(
                    id=owner.id,
                    name=owner.name,
                    email=owner.email,
                    contact_number=owner.contact_number
                )
            ),
            merchant=UserSummary(id=booking.merchant.id, name=booking.merchant.name, email=booking.merchant.email)
        )

    async def list_for_merchant(self, merchant_id: int, viewer: User) -> List[BookingListItem]:
        if not policy.can_access_merchant_scope(viewer, merchant_id):
            raise Forbidden()
        return [self._list_item(b, include_merchant=False) for b in self.repository.list_by_merchant(merchant_id)]

    async def list_for_owner(self, owner_id: int, viewer: User) -> List[BookingListItem]:
        if not policy.can_access_owner_scope(viewer, owner_id):
            raise Forbidden()
        return [self._list_item(b, include_merchant=True) for b in self.repository.list_by_owner(owner_id)]

    async def list_all(self) -> List[BookingListItem]:
        return [self._list_item(b, include_merchant=True) for b in self.repository.list_all()]

    def _list_item(self, booking: Booking, include_merchant: bool) -> BookingListItem:
        merchant = None
        if include_merchant:
            merchant = UserSummary(id=booking.merchant.id, name=booking.merchant.name, email=booking.merchant.email)
        return BookingListItem(
            id=booking.id,
            status=ui_status(booking.status),
            created_at=booking.created_at,
            warehouse=WarehouseRef(id=booking.warehouse.id, name=booking.warehouse.name),
            merchant=merchant
        )
