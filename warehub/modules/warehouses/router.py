# warehub/modules/warehouses/router.py
from fastapi import APIRouter, Depends, Query, File, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional

from warehub.config.database import get_db
from warehub.core.auth.dependencies import get_current_user, get_owner_user
from warehub.shared.schemas.common import OkResponse
from warehub.shared.services.cloudinary_service import CloudinaryService, get_image_storage
from .service import WarehousesService
from .schemas import WarehouseResponse, WarehouseListResponse

router = APIRouter()


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(
    take: Optional[int] = Query(None, description="Max results (default 24, capped at 100)"),
    db: Session = Depends(get_db)
):
    """Latest published, approved and enabled warehouses"""
    service = WarehousesService(db)
    return await service.list_latest(take)


@router.get("/search", response_model=List[WarehouseResponse])
async def search_warehouses(
    q: Optional[str] = Query(None, description="Matches name, city, state, pincode, address or type"),
    min_sqft: Optional[str] = Query(None, alias="minSqFt"),
    max_sqft: Optional[str] = Query(None, alias="maxSqFt"),
    db: Session = Depends(get_db)
):
    """
    Search bookable warehouses

    **Filters:**
    - q: case-insensitive substring
    - minSqFt / maxSqFt: bounds on available space; blank values are ignored
    """
    service = WarehousesService(db)
    return await service.search(q, min_sqft, max_sqft)


@router.get("/owner/{owner_id}", response_model=List[WarehouseResponse])
async def list_owner_warehouses(
    owner_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All warehouses of an owner, including pending approval (owner or admin)"""
    service = WarehousesService(db)
    return await service.list_by_owner(owner_id, current_user)


@router.get("/{warehouse_id}", response_model=WarehouseResponse)
async def get_warehouse(
    warehouse_id: int,
    db: Session = Depends(get_db)
):
    service = WarehousesService(db)
    return await service.get_warehouse(warehouse_id)


@router.post("/{warehouse_id}/image", response_model=WarehouseResponse, status_code=status.HTTP_201_CREATED)
async def upload_warehouse_image(
    warehouse_id: int,
    image: UploadFile = File(..., description="JPEG, PNG or WEBP cover image"),
    current_user = Depends(get_owner_user),
    storage: CloudinaryService = Depends(get_image_storage),
    db: Session = Depends(get_db)
):
    """Upload or replace the cover image of an owned warehouse"""
    service = WarehousesService(db)
    return await service.upload_image(warehouse_id, image, current_user, storage)


@router.delete("/{warehouse_id}", response_model=OkResponse)
async def delete_warehouse(
    warehouse_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a warehouse without bookings (owner or admin)"""
    service = WarehousesService(db)
    await service.delete_warehouse(warehouse_id, current_user)
    return OkResponse()
