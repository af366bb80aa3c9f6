# warehub/modules/warehouses/service.py
from typing import List, Optional
from fastapi import UploadFile
from sqlalchemy.orm import Session
import logging

from .repository import WarehousesRepository
from .schemas import WarehouseResponse, WarehouseListResponse
from warehub.core.auth import policy
from warehub.core.exceptions import NotFound, Forbidden, InvalidInput, Conflict
from warehub.shared.coercion import to_number_or_none
from warehub.shared.database.models import User
from warehub.shared.services.cloudinary_service import CloudinaryService

logger = logging.getLogger(__name__)

DEFAULT_TAKE = 24
MAX_TAKE = 100


def _parse_bound(raw: Optional[str], name: str) -> Optional[float]:
    """Blank means no bound; anything else must be numeric"""
    if raw is None or str(raw).strip() == "":
        return None
    value = to_number_or_none(raw)
    if value is None:
        raise InvalidInput(f"{name} must be a number")
    return value


class WarehousesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = WarehousesRepository(db)

    def _get_or_404(self, warehouse_id: int):
        warehouse = self.repository.get(warehouse_id)
        if not warehouse:
            raise NotFound()
        return warehouse

    async def list_latest(self, take: Optional[int]) -> WarehouseListResponse:
        if not take or take < 1:
            take = DEFAULT_TAKE
        take = min(take, MAX_TAKE)
        warehouses = self.repository.list_latest(take)
        return WarehouseListResponse(warehouses=[WarehouseResponse.model_validate(w) for w in warehouses])

    async def search(self, q: Optional[str], min_sqft: Optional[str], max_sqft: Optional[str]) -> List[WarehouseResponse]:
        q = (q or "").strip() or None
        rows = self.repository.search(
            q=q,
            min_sqft=_parse_bound(min_sqft, "minSqFt"),
            max_sqft=_parse_bound(max_sqft, "maxSqFt")
        )
        return [WarehouseResponse.model_validate(w) for w in rows]

    async def list_by_owner(self, owner_id: int, viewer: User) -> List[WarehouseResponse]:
        if not policy.can_access_owner_scope(viewer, owner_id):
            raise Forbidden()
        return [WarehouseResponse.model_validate(w) for w in self.repository.list_by_owner(owner_id)]

    async def get_warehouse(self, warehouse_id: int) -> WarehouseResponse:
        return WarehouseResponse.model_validate(self._get_or_404(warehouse_id))

    async def delete_warehouse(self, warehouse_id: int, actor: User) -> None:
        """Owner or admin; warehouses with bookings are kept for the booking history"""
        warehouse = self._get_or_404(warehouse_id)
        if not policy.can_manage_warehouse(actor, warehouse):
            raise Forbidden()
        if self.repository.has_bookings(warehouse.id):
            raise Conflict("Warehouse has bookings and cannot be deleted")

        self.repository.delete(warehouse)
        logger.info(f"🗑️ Warehouse #{warehouse_id} deleted by user #{actor.id}")

    async def upload_image(
        self,
        warehouse_id: int,
        image_file: UploadFile,
        actor: User,
        storage: CloudinaryService
    ) -> WarehouseResponse:
        """Replace the warehouse cover image"""
        warehouse = self._get_or_404(warehouse_id)
        if not policy.owns_warehouse(actor, warehouse):
            raise Forbidden()

        previous_url = warehouse.image_url
        image_url = await storage.upload_warehouse_image(image_file, warehouse.id, actor.id)
        warehouse = self.repository.update(warehouse, {"image_url": image_url})

        if previous_url:
            await storage.delete_image(previous_url)

        return WarehouseResponse.model_validate(warehouse)
