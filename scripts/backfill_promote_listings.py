#!/usr/bin/env python3
"""
Promote every PUBLISHED listing that has no warehouse yet.

Run from the project root:
    python scripts/backfill_promote_listings.py            # writes
    DRY_RUN=1 python scripts/backfill_promote_listings.py  # report only
    python scripts/backfill_promote_listings.py --dry-run

Safe to re-run: listings already promoted are skipped.
"""
import argparse
import os
import sys

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from warehub.config.database import SessionLocal, dispose_engine
from warehub.core.logging import configure_logging
from warehub.modules.listings.promotion import PromotionEngine


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Backfill warehouses from published listings")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=os.getenv("DRY_RUN") == "1",
        help="report what would be created without writing (also DRY_RUN=1)"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()

    db = SessionLocal()
    try:
        report = PromotionEngine(db).run_backfill(dry_run=args.dry_run)

        for item in report.items:
            if item.action == "would_create":
                print(f"- Listing #{item.listing_id}: DRY RUN → would create warehouse with {item.warehouse}")
            elif item.action == "created":
                print(f"- Listing #{item.listing_id}: created warehouse #{item.warehouse_id}")
            elif item.action == "skipped":
                print(f"- Listing #{item.listing_id}: already promoted (warehouse id {item.warehouse_id}) → skip")
            else:
                print(f"- Listing #{item.listing_id}: {item.action}")

        print(f"✅ Done. {report.created} created, {report.skipped} skipped.")
        return 0

    except Exception as e:
        db.rollback()
        print(f"❌ Backfill failed: {e}")
        return 1

    finally:
        db.close()
        dispose_engine()


if __name__ == "__main__":
    sys.exit(main())
