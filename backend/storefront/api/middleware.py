"""API middleware for request processing."""

import logging
import time
import uuid
from collections import deque
from typing import Callable, Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

_IDLE_EVICTION_SECONDS = 300


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its outcome and a correlation id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        started = time.monotonic()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "%s %s failed after %.3fs: %s",
                request.method,
                request.url.path,
                time.monotonic() - started,
                e,
                extra={"request_id": request_id},
            )
            raise

        elapsed = time.monotonic() - started
        logger.info(
            "%s %s -> %s in %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            extra={
                "request_id": request_id,
                "customer": request.headers.get("X-User-ID", "-"),
                "status_code": response.status_code,
                "process_time_s": round(elapsed, 3),
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.3f}"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window request limit per caller.

    Callers are keyed by ``X-User-ID`` when present, otherwise by client
    address. Paths in ``exempt_paths`` are never limited.
    """

    def __init__(
        self,
        app,
        requests_per_period: int = 100,
        period: int = 60,
        exempt_paths: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.requests_per_period = requests_per_period
        self.period = period
        self.exempt_paths = frozenset(exempt_paths)
        self._windows: dict[str, deque[float]] = {}
        self._next_eviction = time.monotonic() + _IDLE_EVICTION_SECONDS

    @staticmethod
    def _caller(request: Request) -> str:
        user_id = request.headers.get("X-User-ID")
        if user_id:
            return f"user:{user_id}"
        return f"ip:{request.client.host if request.client else 'unknown'}"

    def _evict_idle(self, now: float) -> None:
        if now < self._next_eviction:
            return
        idle_before = now - _IDLE_EVICTION_SECONDS
        for caller in [c for c, w in self._windows.items() if not w or w[-1] < idle_before]:
            del self._windows[caller]
        self._next_eviction = now + _IDLE_EVICTION_SECONDS

    def _allow(self, caller: str, now: float) -> bool:
        window = self._windows.setdefault(caller, deque())
        while window and window[0] <= now - self.period:
            window.popleft()
        if len(window) >= self.requests_per_period:
            return False
        window.append(now)
        return True

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        now = time.monotonic()
        self._evict_idle(now)
        caller = self._caller(request)

        if not self._allow(caller, now):
            logger.warning("Rate limit exceeded for %s on %s", caller, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded", "retry_after": self.period},
                headers={"Retry-After": str(self.period)},
            )

        return await call_next(request)
