"""Storefront API application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.errors import register_exception_handlers
from storefront.api.middleware import LoggingMiddleware, RateLimitMiddleware
from storefront.api.routes import router
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the MongoDB connection for the lifetime of the app."""
    logger.info("Starting %s (%s)", settings.app_name, settings.environment)
    await mongodb.connect()
    try:
        yield
    finally:
        await mongodb.disconnect()
        logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="E-commerce backend: catalog, carts, orders, payments and reviews",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
# Webhook deliveries are never throttled
app.add_middleware(
    RateLimitMiddleware,
    requests_per_period=settings.rate_limit_requests,
    period=settings.rate_limit_period,
    exempt_paths=[f"{settings.api_prefix}/payment/webhook"],
)

register_exception_handlers(app)
app.include_router(router)


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
