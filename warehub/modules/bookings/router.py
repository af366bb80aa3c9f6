# warehub/modules/bookings/router.py
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session
from typing import List

from warehub.config.database import get_db
from warehub.core.auth.dependencies import get_current_user, get_merchant_user, get_owner_user
from warehub.shared.schemas.common import OkResponse
from warehub.shared.services.notification_service import NotificationService, get_notification_service
from .service import BookingsService
from .schemas import (
    BookingCreate, BookingTransitionRequest, BookingMessageRequest,
    BookingCreatedResponse, BookingTransitionResponse, BookingDetailResponse, BookingListItem
)

router = APIRouter()


@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    current_user = Depends(get_merchant_user),
    db: Session = Depends(get_db)
):
    """
    Request a warehouse

    **Requires:** MERCHANT role; the warehouse must be published, approved
    and not disabled by an admin.
    """
    service = BookingsService(db)
    return await service.create_booking(current_user, payload.warehouse_id)


@router.post("/message", response_model=OkResponse)
async def message_merchant(
    payload: BookingMessageRequest,
    background_tasks: BackgroundTasks,
    current_user = Depends(get_owner_user),
    notifier: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db)
):
    """Owner note to the merchant: recorded in the history and emailed"""
    service = BookingsService(db, notifier)
    await service.attach_booking_note(
        payload.booking_id,
        payload.message,
        current_user,
        merchant_email=payload.merchant_email,
        background_tasks=background_tasks
    )
    return OkResponse()


@router.get("/merchant/{merchant_id}", response_model=List[BookingListItem])
async def list_merchant_bookings(
    merchant_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = BookingsService(db)
    return await service.list_for_merchant(merchant_id, current_user)


@router.get("/owner/{owner_id}", response_model=List[BookingListItem])
async def list_owner_bookings(
    owner_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = BookingsService(db)
    return await service.list_for_owner(owner_id, current_user)


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Booking detail with status history (admin, merchant or warehouse owner)"""
    service = BookingsService(db)
    return await service.get_booking_detail(booking_id, current_user)


@router.put("/{booking_id}", response_model=BookingTransitionResponse)
async def transition_booking(
    booking_id: int,
    payload: BookingTransitionRequest,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Change booking status (warehouse owner or admin)

    **Allowed:**
    - pending → accepted | rejected | canceled
    - accepted → canceled
    """
    service = BookingsService(db)
    return await service.transition_booking(booking_id, payload.status, current_user)
