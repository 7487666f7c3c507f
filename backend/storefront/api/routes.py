"""Top-level API router."""

import logging

from fastapi import APIRouter

from storefront.api import admin, catalog, orders, payments, users
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.models.request import HealthResponse

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    mongodb_status = "connected" if await mongodb.ping() else "disconnected"

    return HealthResponse(
        status="healthy" if mongodb_status == "connected" else "degraded",
        version=settings.app_version,
        services={
            "mongodb": mongodb_status,
            "stripe": "configured" if settings.stripe_secret_key else "not_configured",
        },
    )


router.include_router(users.router)
router.include_router(users.cart_router)
router.include_router(catalog.router)
router.include_router(orders.router)
router.include_router(payments.router)
router.include_router(admin.router)
