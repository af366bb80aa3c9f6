# warehub/modules/warehouses/__init__.py
"""
Warehouses module - bookable storage spaces

- Public catalogue and search (published, approved, not disabled)
- Owner view of their own warehouses
- Cover image upload to Cloudinary
- Rows created from listings by the promotion engine

Layout:
- router.py: endpoints
- service.py: business logic
- repository.py: data access
- schemas.py: request/response models
"""

from .router import router
from .service import WarehousesService
from .repository import WarehousesRepository

__all__ = [
    "router",
    "WarehousesService",
    "WarehousesRepository"
]
