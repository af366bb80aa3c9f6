# warehub/modules/listings/promotion.py
"""
Listing -> Warehouse promotion.

When a listing moves into PUBLISHED it is converted, once, into a flat
bookable warehouse. The derived warehouse carries two provenance links back to
its listing:

- the ``[origin:listing:<id>]`` marker appended to its description
- the ``source_listing_id`` column, unique across warehouses

Either link found on one of the owner's warehouses means the listing was
already promoted. The unique column also makes the database reject a second
insert from a concurrent publish request.

Field mapping is best-effort: missing address parts and unparseable numbers
become None instead of failing the listing save.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from warehub.core.exceptions import Conflict
from warehub.modules.warehouses.repository import WarehousesRepository
from warehub.shared.coercion import to_number_or_none, text_or_none
from warehub.shared.database.models import Listing
from warehub.shared.enums import ListingStatus, WarehouseStatus
from .repository import ListingsRepository
from .schemas import PromotionResult, BackfillItem, BackfillResponse

logger = logging.getLogger(__name__)

ORIGIN_MARKER_TEMPLATE = "[origin:listing:{listing_id}]"

# warehouses.price_per_sqft is Numeric(10, 2)
PRICE_PER_SQFT_LIMIT = 10 ** 8

# PromotionResult.reason values
NOT_PUBLISHING = "not_publishing"
ALREADY_PROMOTED = "already_promoted"
CREATED = "created"
FAILED = "failed"


def origin_marker(listing_id: int) -> str:
    return ORIGIN_MARKER_TEMPLATE.format(listing_id=listing_id)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def should_promote(previous_status: Optional[str], requested_status: Optional[str]) -> bool:
    """Promotion fires on the edge into PUBLISHED, never on a steady state"""
    published = ListingStatus.PUBLISHED.value
    return requested_status == published and previous_status != published


def build_warehouse_data(listing: Listing) -> Dict[str, Any]:
    """
    Map a listing's wizard JSON onto warehouse columns.

    Total and available space both start at pricing.totalSqFt; available
    space is not tracked separately at promotion time.
    """
    address = _as_dict(listing.address)
    pricing = _as_dict(listing.pricing)
    marker = origin_marker(listing.id)

    name = text_or_none(listing.title) or f"Listing {listing.id}"
    base_description = (listing.description or "").strip()
    description = f"{base_description}\n\n{marker}" if base_description else marker

    total_space = to_number_or_none(pricing.get("totalSqFt"))

    return {
        "owner_id": listing.owner_id,
        "name": name,
        "address": text_or_none(address.get("addressLine1")),
        "city": text_or_none(address.get("city")),
        "state": text_or_none(address.get("state")),
        "pincode": text_or_none(address.get("zip")),
        "price_per_sqft": to_number_or_none(pricing.get("ratePerSqFtPerMonth"), max_abs=PRICE_PER_SQFT_LIMIT),
        "total_space": total_space,
        "available_space": total_space,
        "description": description,
        # Admin approval gates public booking
        "is_approved": False,
        "is_disabled_by_admin": False,
        "status": WarehouseStatus.PUBLISHED.value,
        "source_listing_id": listing.id,
    }


class PromotionEngine:
    """Creates at most one warehouse per published listing"""

    def __init__(self, db: Session):
        self.db = db
        self.listings = ListingsRepository(db)
        self.warehouses = WarehousesRepository(db)

    def find_existing(self, listing: Listing):
        return self.warehouses.find_promoted(listing.owner_id, listing.id, origin_marker(listing.id))

    def promote_on_transition(
        self,
        listing: Listing,
        previous_status: Optional[str],
        requested_status: Optional[str]
    ) -> PromotionResult:
        """Run promotion if this update moved the listing into PUBLISHED"""
        if not should_promote(previous_status, requested_status):
            return PromotionResult(listing_id=listing.id, promoted=False, reason=NOT_PUBLISHING)
        return self.promote(listing)

    def promote(self, listing: Listing) -> PromotionResult:
        """
        Create the warehouse for ``listing`` unless it already exists.

        Runs after the listing itself has been committed. Any failure here is
        rolled back and logged; it never propagates to the listing update.
        """
        try:
            existing = self.find_existing(listing)
            if existing:
                logger.info(f"ℹ️ Listing #{listing.id} already promoted (warehouse #{existing.id}) - skip")
                return PromotionResult(
                    listing_id=listing.id, promoted=False,
                    reason=ALREADY_PROMOTED, warehouse_id=existing.id
                )

            warehouse = self.warehouses.create_promoted(build_warehouse_data(listing))
            logger.info(f"🏭 Listing #{listing.id} promoted to warehouse #{warehouse.id}")
            return PromotionResult(
                listing_id=listing.id, promoted=True,
                reason=CREATED, warehouse_id=warehouse.id
            )

        except Conflict:
            return PromotionResult(listing_id=listing.id, promoted=False, reason=ALREADY_PROMOTED)
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Promotion failed for listing #{listing.id}")
            return PromotionResult(listing_id=listing.id, promoted=False, reason=FAILED)

    def run_backfill(self, dry_run: bool = False) -> BackfillResponse:
        """
        Promote every PUBLISHED listing that has no warehouse yet.

        In dry-run mode nothing is written; listings that would be promoted
        are still counted as created so the report shows the impact.
        """
        listings = self.listings.list_published()
        logger.info(f"🔎 Backfill: {len(listings)} published listing(s), dry_run={dry_run}")

        created = 0
        skipped = 0
        items = []

        for listing in listings:
            existing = self.find_existing(listing)
            if existing:
                skipped += 1
                items.append(BackfillItem(listing_id=listing.id, action="skipped", warehouse_id=existing.id))
                continue

            if dry_run:
                data = build_warehouse_data(listing)
                created += 1
                items.append(BackfillItem(listing_id=listing.id, action="would_create", warehouse=data))
                continue

            result = self.promote(listing)
            if result.promoted:
                created += 1
                items.append(BackfillItem(listing_id=listing.id, action="created", warehouse_id=result.warehouse_id))
            else:
                skipped += 1
                items.append(BackfillItem(listing_id=listing.id, action=result.reason, warehouse_id=result.warehouse_id))

        logger.info(f"✅ Backfill done: {created} created, {skipped} skipped")

        return BackfillResponse(
            success=True,
            message=f"{created} created, {skipped} skipped",
            dry_run=dry_run,
            created=created,
            skipped=skipped,
            items=items
        )
