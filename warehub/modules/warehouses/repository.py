# warehub/modules/warehouses/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import and_, or_
from typing import List, Dict, Any, Optional
import logging

from warehub.shared.database.models import Warehouse, Booking
from warehub.shared.enums import WarehouseStatus
from warehub.core.exceptions import Conflict

logger = logging.getLogger(__name__)

SEARCHABLE_COLUMNS = (
    Warehouse.name, Warehouse.city, Warehouse.state,
    Warehouse.pincode, Warehouse.address, Warehouse.type,
)


class WarehousesRepository:
    def __init__(self, db: Session):
        self.db = db

    def _publicly_visible(self):
        return and_(
            Warehouse.status == WarehouseStatus.PUBLISHED.value,
            Warehouse.is_approved.is_(True),
            Warehouse.is_disabled_by_admin.is_(False)
        )

    def get(self, warehouse_id: int) -> Optional[Warehouse]:
        return self.db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()

    def list_latest(self, take: int) -> List[Warehouse]:
        """Latest publicly visible warehouses"""
        return self.db.query(Warehouse).filter(
            self._publicly_visible()
        ).order_by(Warehouse.created_at.desc(), Warehouse.id.desc()).limit(take).all()

    def list_by_owner(self, owner_id: int) -> List[Warehouse]:
        return self.db.query(Warehouse).filter(
            Warehouse.owner_id == owner_id
        ).order_by(Warehouse.created_at.desc(), Warehouse.id.desc()).all()

    def search(
        self,
        q: Optional[str] = None,
        min_sqft: Optional[float] = None,
        max_sqft: Optional[float] = None
    ) -> List[Warehouse]:
        """Case-insensitive text search plus available-space bounds"""
        conditions = [self._publicly_visible()]

        if q:
            pattern = f"%{q}%"
            conditions.append(or_(*[column.ilike(pattern) for column in SEARCHABLE_COLUMNS]))
        if min_sqft is not None:
            conditions.append(Warehouse.available_space >= min_sqft)
        if max_sqft is not None:
            conditions.append(Warehouse.available_space <= max_sqft)

        return self.db.query(Warehouse).filter(
            and_(*conditions)
        ).order_by(Warehouse.created_at.desc(), Warehouse.id.desc()).all()

    # ==================== PROMOTION SUPPORT ====================

    def find_promoted(self, owner_id: int, listing_id: int, marker: str) -> Optional[Warehouse]:
        """Warehouse already derived from this listing, by FK or by description marker"""
        return self.db.query(Warehouse).filter(
            Warehouse.owner_id == owner_id,
            or_(
                Warehouse.source_listing_id == listing_id,
                Warehouse.description.ilike(f"%{marker}%")
            )
        ).first()

    def create_promoted(self, warehouse_data: Dict[str, Any]) -> Warehouse:
        """
        Insert a promoted warehouse in its own transaction.

        Raises:
            Conflict: another writer already promoted the same listing
        """
        warehouse = Warehouse(**warehouse_data)
        self.db.add(warehouse)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                f"⚠️ Listing #{warehouse_data.get('source_listing_id')} already promoted by a concurrent request"
            )
            raise Conflict("Listing already promoted")
        self.db.refresh(warehouse)
        return warehouse

    # ==================== MUTATIONS ====================

    def update(self, warehouse: Warehouse, changes: Dict[str, Any]) -> Warehouse:
        for key, value in changes.items():
            setattr(warehouse, key, value)
        self.db.commit()
        self.db.refresh(warehouse)
        return warehouse

    def has_bookings(self, warehouse_id: int) -> bool:
        return self.db.query(Booking.id).filter(Booking.warehouse_id == warehouse_id).first() is not None

    def delete(self, warehouse: Warehouse) -> None:
        self.db.delete(warehouse)
        self.db.commit()
