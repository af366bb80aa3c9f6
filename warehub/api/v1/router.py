# warehub/api/v1/router.py
from fastapi import APIRouter
from warehub.api.v1.auth import router as auth_router
from warehub.modules.listings import router as listings_router
from warehub.modules.warehouses import router as warehouses_router
from warehub.modules.bookings import router as bookings_router
from warehub.modules.admin import admin_router


# Main API v1 router
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])

api_router.include_router(
    listings_router,
    prefix="/listings",
    tags=["Listings - Owner wizard"]
)

api_router.include_router(
    warehouses_router,
    prefix="/warehouses",
    tags=["Warehouses"]
)

api_router.include_router(
    bookings_router,
    prefix="/bookings",
    tags=["Bookings"]
)

api_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["Admin - Moderation"]
)


@api_router.get("/")
async def api_root():
    """API v1 index"""
    return {
        "message": "WareHub API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "listings": "/api/v1/listings",
            "warehouses": "/api/v1/warehouses",
            "bookings": "/api/v1/bookings",
            "admin": "/api/v1/admin"
        }
    }
