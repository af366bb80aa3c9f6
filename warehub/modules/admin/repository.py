# warehub/modules/admin/repository.py
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from warehub.shared.database.models import User, Listing, Warehouse, Booking


class AdminRepository:
    """
    Data access for admin moderation: users and warehouses across all owners
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== USERS ====================

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def set_user_roles(self, user: User, roles: List[str]) -> User:
        # Reassign a new list so the JSON column is flagged dirty
        user.roles = list(roles)
        self.db.commit()
        self.db.refresh(user)
        return user

    def user_has_bookings(self, user_id: int) -> bool:
        """Bookings made by the user or against any of their warehouses"""
        as_merchant = self.db.query(Booking.id).filter(Booking.merchant_id == user_id).first()
        if as_merchant is not None:
            return True
        as_owner = self.db.query(Booking.id).join(
            Warehouse, Booking.warehouse_id == Warehouse.id
        ).filter(Warehouse.owner_id == user_id).first()
        return as_owner is not None

    def delete_user(self, user: User) -> None:
        """Remove the user with their warehouses and listings in one commit"""
        self.db.query(Warehouse).filter(Warehouse.owner_id == user.id).delete(synchronize_session=False)
        self.db.query(Listing).filter(Listing.owner_id == user.id).delete(synchronize_session=False)
        self.db.delete(user)
        self.db.commit()

    # ==================== WAREHOUSES ====================

    def list_warehouses_with_owner(self) -> List[Warehouse]:
        return self.db.query(Warehouse).options(
            joinedload(Warehouse.owner)
        ).order_by(Warehouse.created_at.desc(), Warehouse.id.desc()).all()
