# warehub/modules/admin/service.py
from typing import List
from fastapi import HTTPException
from sqlalchemy.orm import Session
import logging

from .repository import AdminRepository
from .schemas import AdminUserResponse
from warehub.core.auth.policy import normalize_roles, primary_role
from warehub.core.exceptions import NotFound, InvalidInput, Conflict, internal_error
from warehub.modules.bookings.service import BookingsService
from warehub.modules.bookings.schemas import BookingListItem
from warehub.modules.listings.service import ListingsService
from warehub.modules.listings.schemas import BackfillResponse
from warehub.modules.warehouses.repository import WarehousesRepository
from warehub.modules.warehouses.schemas import AdminWarehouseResponse
from warehub.shared.database.models import User

logger = logging.getLogger(__name__)


def _admin_user(user: User) -> AdminUserResponse:
    return AdminUserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        roles=list(user.roles or []),
        role=primary_role(user.roles),
        contact_number=user.contact_number,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at
    )


class AdminService:
    """
    Admin moderation: user roles, warehouse approval and the listing backfill
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = AdminRepository(db)
        self.warehouses = WarehousesRepository(db)

    # ==================== USERS ====================

    async def list_users(self) -> List[AdminUserResponse]:
        return [_admin_user(u) for u in self.repository.list_users()]

    async def grant_role(self, user_id: int, role: str, admin: User) -> AdminUserResponse:
        """Add ``role`` to the user's set; granting a held role is a no-op"""
        user = self.repository.get_user(user_id)
        if not user:
            raise NotFound("User not found")

        try:
            wanted = normalize_roles([role])
        except ValueError as e:
            raise InvalidInput(str(e))

        current = list(user.roles or [])
        if wanted[0] in current:
            return _admin_user(user)

        try:
            user = self.repository.set_user_roles(user, normalize_roles(current + wanted))
            logger.info(f"🔑 Admin #{admin.id} granted {wanted[0]} to user #{user.id}")
            return _admin_user(user)
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Error updating roles of user #{user_id}")
            raise internal_error()

    async def delete_user(self, user_id: int, admin: User) -> None:
        """Delete a user unless bookings reference them"""
        if user_id == admin.id:
            raise InvalidInput("Admins cannot delete their own account")

        user = self.repository.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        if self.repository.user_has_bookings(user.id):
            raise Conflict("User has bookings and cannot be deleted")

        try:
            self.repository.delete_user(user)
            logger.info(f"🗑️ Admin #{admin.id} deleted user #{user_id}")
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Error deleting user #{user_id}")
            raise internal_error()

    # ==================== WAREHOUSES ====================

    async def list_warehouses(self) -> List[AdminWarehouseResponse]:
        return [
            AdminWarehouseResponse.model_validate(w)
            for w in self.repository.list_warehouses_with_owner()
        ]

    async def set_approval(self, warehouse_id: int, is_approved: bool, admin: User) -> AdminWarehouseResponse:
        return await self._set_flag(warehouse_id, "is_approved", is_approved, admin)

    async def set_disabled(self, warehouse_id: int, is_disabled: bool, admin: User) -> AdminWarehouseResponse:
        return await self._set_flag(warehouse_id, "is_disabled_by_admin", is_disabled, admin)

    async def _set_flag(self, warehouse_id: int, column: str, value: bool, admin: User) -> AdminWarehouseResponse:
        warehouse = self.warehouses.get(warehouse_id)
        if not warehouse:
            raise NotFound("Warehouse not found")

        try:
            warehouse = self.warehouses.update(warehouse, {column: bool(value)})
            logger.info(f"🏭 Admin #{admin.id} set {column}={bool(value)} on warehouse #{warehouse.id}")
            return AdminWarehouseResponse.model_validate(warehouse)
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Error updating warehouse #{warehouse_id}")
            raise internal_error()

    async def delete_warehouse(self, warehouse_id: int, admin: User) -> None:
        warehouse = self.warehouses.get(warehouse_id)
        if not warehouse:
            raise NotFound("Warehouse not found")
        if self.warehouses.has_bookings(warehouse.id):
            raise Conflict("Warehouse has bookings and cannot be deleted")

        self.warehouses.delete(warehouse)
        logger.info(f"🗑️ Admin #{admin.id} deleted warehouse #{warehouse_id}")

    # ==================== BOOKINGS / LISTINGS ====================

    async def list_bookings(self) -> List[BookingListItem]:
        return await BookingsService(self.db).list_all()

    async def run_backfill(self, dry_run: bool) -> BackfillResponse:
        return await ListingsService(self.db).run_backfill(dry_run)
