# warehub/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from warehub.config.settings import settings
from warehub.config.database import dispose_engine
from warehub.core.logging import configure_logging
from warehub.core.middleware import setup_middleware
from warehub.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    logger.info("🚀 WareHub API starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"⏰ Token expire: {settings.access_token_expire_minutes} minutes")
    logger.info(f"🗄️  Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'local'}")
    if not settings.smtp_configured:
        logger.warning("⚠️ SMTP not configured - merchant emails will be skipped")

    yield

    # Shutdown
    dispose_engine()
    logger.info("🛑 WareHub API shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Warehouse rental marketplace: listings, warehouses and bookings",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "🚀 WareHub API",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

# Health check for the hosting platform
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": "production" if not settings.debug else "development"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "warehub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
