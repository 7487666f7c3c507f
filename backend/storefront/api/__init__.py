"""API package."""

from storefront.api.middleware import LoggingMiddleware, RateLimitMiddleware
from storefront.api.routes import router

__all__ = [
    "router",
    "LoggingMiddleware",
    "RateLimitMiddleware",
]
