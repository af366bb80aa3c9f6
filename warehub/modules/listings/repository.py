# warehub/modules/listings/repository.py
from sqlalchemy.orm import Session
from typing import List, Dict, Any, Optional

from warehub.shared.database.models import Listing
from warehub.shared.enums import ListingStatus


class ListingsRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_owner(self, owner_id: int) -> List[Listing]:
        """Owner's listings, most recently edited first"""
        return self.db.query(Listing).filter(
            Listing.owner_id == owner_id
        ).order_by(Listing.updated_at.desc(), Listing.id.desc()).all()

    def get_owned(self, listing_id: int, owner_id: int) -> Optional[Listing]:
        return self.db.query(Listing).filter(
            Listing.id == listing_id,
            Listing.owner_id == owner_id
        ).first()

    def list_published(self) -> List[Listing]:
        return self.db.query(Listing).filter(
            Listing.status == ListingStatus.PUBLISHED.value
        ).order_by(Listing.updated_at.asc(), Listing.id.asc()).all()

    def create(self, owner_id: int, listing_data: Dict[str, Any]) -> Listing:
        listing = Listing(owner_id=owner_id, **listing_data)
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        return listing

    def update(self, listing: Listing, changes: Dict[str, Any]) -> Listing:
        """Apply a partial update and commit it on its own"""
        changes.pop("owner_id", None)
        for key, value in changes.items():
            setattr(listing, key, value)
        self.db.commit()
        self.db.refresh(listing)
        return listing
