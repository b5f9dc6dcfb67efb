"""
Fixed-window request rate limiting.

Each client IP gets a counter per window (``now // window``); the request that
pushes the counter past ``limit`` and every later one in the same window is
rejected. Counters live in process memory, so limits are per instance.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """In-memory fixed-window counter keyed by an arbitrary string"""

    def __init__(
        self,
        limit: int,
        window: int,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            limit: Maximum number of requests per window
            window: Window length in seconds
            clock: Time source, replaceable in tests
        """
        self.limit = limit
        self.window = window
        self._clock = clock
        self._counters: Dict[str, Tuple[int, int]] = {}
        self._lock = threading.Lock()

    def now(self) -> int:
        return int(self._clock())

    def hit(self, key: str) -> Tuple[bool, int, int]:
        """
        Count one request for ``key``.

        Returns:
            Tuple of (allowed, remaining, reset_time)
        """
        now = self.now()
        window_id = now // self.window
        reset_time = (window_id + 1) * self.window

        with self._lock:
            current_window, count = self._counters.get(key, (window_id, 0))
            if current_window != window_id:
                count = 0
            count += 1
            self._counters[key] = (window_id, count)
            if len(self._counters) > 10000:
                self._evict(window_id)

        return count <= self.limit, max(self.limit - count, 0), reset_time

    def _evict(self, window_id: int) -> None:
        stale = [k for k, (w, _) in self._counters.items() if w != window_id]
        for k in stale:
            del self._counters[k]

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()


def client_ip(request: Request, trust_proxy: bool = False) -> str:
    """Resolve the client address, honouring X-Forwarded-For behind a proxy"""
    if trust_proxy:
        forwarded: Optional[str] = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply a FixedWindowRateLimiter to every request"""

    def __init__(self, app, limiter: FixedWindowRateLimiter, trust_proxy: bool = False,
                 enabled: bool = True):
        super().__init__(app)
        self.limiter = limiter
        self.trust_proxy = trust_proxy
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next):
        if not self.enabled:
            return await call_next(request)

        key = client_ip(request, self.trust_proxy)
        allowed, remaining, reset_time = self.limiter.hit(key)
        reset_in = max(reset_time - self.limiter.now(), 0)
        headers = {
            "RateLimit-Limit": str(self.limiter.limit),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset_in),
        }

        if not allowed:
            logger.warning(f"Rate limit exceeded for {key} on {request.url.path}")
            headers["Retry-After"] = str(reset_in)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests",
                    "message": "Too many requests from this IP, please try again later.",
                },
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
