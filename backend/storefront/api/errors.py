"""Exception handlers mapping storefront errors to JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.exceptions import StorefrontError

logger = logging.getLogger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Answer with the error's status and ``{"error": message}``."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": "An unexpected error occurred"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
