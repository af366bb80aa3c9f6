# warehub/modules/admin/__init__.py
"""
Admin module - marketplace moderation

- Users: list with primary role, grant roles, delete
- Warehouses: approve, disable, delete
- Bookings: read-only overview
- Listings: backfill promotion of published listings

Layout:
- router.py: endpoints
- service.py: business logic
- repository.py: data access
- schemas.py: request/response models
"""

from .router import router as admin_router
from .service import AdminService
from .repository import AdminRepository

__all__ = [
    "admin_router",
    "AdminService",
    "AdminRepository"
]
