# warehub/modules/bookings/__init__.py
"""
Bookings module - merchant reservations and their status workflow

- Merchants request approved warehouses (PENDING)
- Owners/admins accept, reject or cancel
- Every change and owner note is appended to the booking history

Layout:
- router.py: endpoints
- service.py: business logic
- state_machine.py: allowed status transitions
- repository.py: data access
- schemas.py: request/response models
"""

from .router import router
from .service import BookingsService
from .repository import BookingsRepository

__all__ = [
    "router",
    "BookingsService",
    "BookingsRepository"
]
