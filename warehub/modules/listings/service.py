# warehub/modules/listings/service.py
from typing import List
from datetime import datetime
from sqlalchemy.orm import Session
from fastapi import HTTPException
import logging

from .repository import ListingsRepository
from .promotion import PromotionEngine
from .schemas import ListingCreate, ListingUpdate, ListingResponse, BackfillResponse, WIZARD_JSON_FIELDS
from warehub.core.exceptions import NotFound, InvalidInput, internal_error
from warehub.shared.enums import ListingStatus

logger = logging.getLogger(__name__)


class ListingsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ListingsRepository(db)
        self.promotion = PromotionEngine(db)

    async def list_my_listings(self, owner_id: int) -> List[ListingResponse]:
        listings = self.repository.list_by_owner(owner_id)
        return [ListingResponse.model_validate(listing) for listing in listings]

    async def get_my_listing(self, listing_id: int, owner_id: int) -> ListingResponse:
        listing = self.repository.get_owned(listing_id, owner_id)
        if not listing:
            raise NotFound("Listing not found")
        return ListingResponse.model_validate(listing)

    async def create_listing(self, owner_id: int, payload: ListingCreate) -> ListingResponse:
        """Create a listing (DRAFT unless a status is given)"""
        try:
            data = payload.model_dump(exclude_unset=True)
            status = data.pop("status", None) or ListingStatus.DRAFT.value

            address = data.get("address")
            if not isinstance(address, dict):
                # address is required; give drafts a placeholder
                data["address"] = {
                    "addressLine1": f"Draft {datetime.now().strftime('%Y-%m-%d %H:%M')}",
                    "city": "", "state": "", "zip": ""
                }
            if not (data.get("title") or "").strip():
                data["title"] = "Untitled Listing"

            listing = self.repository.create(owner_id, {**data, "status": status})
            logger.info(f"📝 Listing #{listing.id} created by owner #{owner_id} ({status})")

            # Created straight into PUBLISHED counts as a publish edge
            self.promotion.promote_on_transition(listing, None, status)
            self.db.refresh(listing)

            return ListingResponse.model_validate(listing)

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("❌ Error creating listing")
            raise internal_error()

    async def update_listing(self, listing_id: int, owner_id: int, patch: ListingUpdate) -> ListingResponse:
        """
        Partial update of an owned listing.

        The listing is committed first. If the request moves it into
        PUBLISHED, promotion runs afterwards as a separate, best-effort step.
        """
        existing = self.repository.get_owned(listing_id, owner_id)
        if not existing:
            raise NotFound("Listing not found")

        if "address" in patch.model_fields_set and not isinstance(patch.address, dict):
            raise InvalidInput("address must be an object")

        try:
            previous_status = existing.status
            requested = patch.model_dump(exclude_unset=True)

            changes = {}
            if isinstance(requested.get("title"), str):
                changes["title"] = requested["title"]
            if requested.get("status"):
                changes["status"] = requested["status"]
            for field in WIZARD_JSON_FIELDS + ("description",):
                if field in requested:
                    changes[field] = requested[field]

            updated = self.repository.update(existing, changes)
            logger.info(f"✏️ Listing #{listing_id} updated: {sorted(changes.keys())}")

            result = self.promotion.promote_on_transition(updated, previous_status, requested.get("status"))
            if result.promoted:
                logger.info(f"   🏭 Promoted to warehouse #{result.warehouse_id}")
            self.db.refresh(updated)

            return ListingResponse.model_validate(updated)

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Error updating listing #{listing_id}")
            raise internal_error()

    async def run_backfill(self, dry_run: bool) -> BackfillResponse:
        try:
            return self.promotion.run_backfill(dry_run=dry_run)
        except Exception:
            self.db.rollback()
            logger.exception("❌ Backfill failed")
            raise internal_error()
