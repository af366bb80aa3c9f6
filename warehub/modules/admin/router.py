# warehub/modules/admin/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from warehub.config.database import get_db
from warehub.core.auth.dependencies import get_admin_user
from warehub.modules.bookings.schemas import BookingListItem
from warehub.modules.listings.schemas import BackfillResponse
from warehub.modules.warehouses.schemas import (
    AdminWarehouseResponse, WarehouseApprovalRequest, WarehouseDisableRequest
)
from warehub.shared.schemas.common import OkResponse
from .service import AdminService
from .schemas import AdminUserResponse, RoleGrantRequest

router = APIRouter()

# ==================== USERS ====================

@router.get("/users", response_model=List[AdminUserResponse])
async def list_users(
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """All users, newest first, with their derived primary role"""
    service = AdminService(db)
    return await service.list_users()


@router.put("/users/{user_id}/role", response_model=AdminUserResponse)
async def grant_user_role(
    user_id: int,
    payload: RoleGrantRequest,
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Add a role to a user

    Existing roles are kept; roles are a set, never replaced.
    """
    service = AdminService(db)
    return await service.grant_role(user_id, payload.role, current_user)


@router.delete("/users/{user_id}", response_model=OkResponse)
async def delete_user(
    user_id: int,
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    service = AdminService(db)
    await service.delete_user(user_id, current_user)
    return OkResponse()

# ==================== WAREHOUSES ====================

@router.get("/warehouses", response_model=List[AdminWarehouseResponse])
async def list_warehouses(
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Every warehouse regardless of approval, with its owner"""
    service = AdminService(db)
    return await service.list_warehouses()


@router.put("/warehouses/{warehouse_id}/approve", response_model=AdminWarehouseResponse)
async def approve_warehouse(
    warehouse_id: int,
    payload: WarehouseApprovalRequest,
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Set or clear the approval gate (`{"isApproved": true}`)"""
    service = AdminService(db)
    return await service.set_approval(warehouse_id, payload.is_approved, current_user)


@router.put("/warehouses/{warehouse_id}/disable", response_model=AdminWarehouseResponse)
async def disable_warehouse(
    warehouse_id: int,
    payload: WarehouseDisableRequest,
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Hide a warehouse from search and booking (`{"isDisabledByAdmin": true}`)"""
    service = AdminService(db)
    return await service.set_disabled(warehouse_id, payload.is_disabled_by_admin, current_user)


@router.delete("/warehouses/{warehouse_id}", response_model=OkResponse)
async def delete_warehouse(
    warehouse_id: int,
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    service = AdminService(db)
    await service.delete_warehouse(warehouse_id, current_user)
    return OkResponse()

# ==================== BOOKINGS / LISTINGS ====================

@router.get("/bookings", response_model=List[BookingListItem])
async def list_bookings(
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    service = AdminService(db)
    return await service.list_bookings()


@router.post("/listings/backfill", response_model=BackfillResponse)
async def backfill_listings(
    dry_run: bool = Query(False, description="Report without writing"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Promote published listings that never got a warehouse

    **Idempotent:** listings already promoted are reported as skipped.
    """
    service = AdminService(db)
    return await service.run_backfill(dry_run)
