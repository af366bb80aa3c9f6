# warehub/modules/listings/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from warehub.config.database import get_db
from warehub.core.auth.dependencies import get_owner_user
from .service import ListingsService
from .schemas import ListingCreate, ListingUpdate, ListingResponse

router = APIRouter()


@router.get("", response_model=List[ListingResponse])
async def list_my_listings(
    current_user = Depends(get_owner_user),
    db: Session = Depends(get_db)
):
    """Draft and published listings of the authenticated owner"""
    service = ListingsService(db)
    return await service.list_my_listings(current_user.id)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_my_listing(
    listing_id: int,
    current_user = Depends(get_owner_user),
    db: Session = Depends(get_db)
):
    service = ListingsService(db)
    return await service.get_my_listing(listing_id, current_user.id)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    payload: ListingCreate,
    current_user = Depends(get_owner_user),
    db: Session = Depends(get_db)
):
    """
    Start a listing in the wizard

    **Defaults:**
    - status DRAFT
    - placeholder address when none is sent
    """
    service = ListingsService(db)
    return await service.create_listing(current_user.id, payload)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: int,
    patch: ListingUpdate,
    current_user = Depends(get_owner_user),
    db: Session = Depends(get_db)
):
    """
    Update a listing you own

    **Publishing:** moving the listing to PUBLISHED creates its warehouse
    (once). The warehouse stays hidden until an admin approves it.
    """
    service = ListingsService(db)
    return await service.update_listing(listing_id, current_user.id, patch)
