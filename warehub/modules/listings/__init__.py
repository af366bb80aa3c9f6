# warehub/modules/listings/__init__.py
"""
Listings module - owner wizard and promotion to warehouses

- Owners create and edit draft listings (JSON wizard blobs)
- Publishing a listing promotes it once into a bookable warehouse
- Backfill promotes published listings that were never promoted

Layout:
- router.py: endpoints
- service.py: business logic
- promotion.py: listing -> warehouse promotion
- repository.py: data access
- schemas.py: request/response models
"""

from .router import router
from .service import ListingsService
from .promotion import PromotionEngine

__all__ = [
    "router",
    "ListingsService",
    "PromotionEngine"
]
