"""
Middleware for the application.

Card rendering is CPU bound, so card requests go through a per-IP rate limiter
before reaching the route. Cheap routes (docs, brand assets, debug) are left alone.
"""
import time
from cachetools import TTLCache
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import logger


class GlobalRateLimiterMiddleware(BaseHTTPMiddleware):
    """
    Middleware to rate limit the card route.

    Each client IP owns a token bucket kept in an in-memory TTL cache. A bucket holds
    at most `max_requests` tokens and refills linearly over `window_seconds`, so a
    client that stops calling gets its full allowance back after one window.

    Parameters:
    ----------
    app : FastAPI
        The FastAPI application.
    max_requests : int
        The bucket size, i.e. the burst a single IP may send.
    window_seconds : int
        The time needed to refill an empty bucket.
    limited_paths : tuple[str, ...] | None
        Path prefixes the limiter applies to. Other paths pass through without
        spending a token. `None` limits every path.
    """
    # pylint: disable=R0903

    def __init__(
        self,
        app: FastAPI,
        max_requests: int,
        window_seconds: int,
        limited_paths: tuple[str, ...] | None = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.limited_paths = limited_paths
        self.refill_rate = max_requests / window_seconds
        self.buckets = TTLCache(maxsize=1000, ttl=window_seconds)

    def is_limited(self, path: str) -> bool:
        """Whether requests to `path` spend tokens."""
        return self.limited_paths is None or path.startswith(self.limited_paths)

    def _take_token(self, client_ip: str, now: float) -> bool:
        tokens, last_seen = self.buckets.get(client_ip, (self.max_requests, now))
        tokens = min(self.max_requests, tokens + (now - last_seen) * self.refill_rate)
        if tokens < 1:
            self.buckets[client_ip] = (tokens, now)
            return False
        self.buckets[client_ip] = (tokens - 1, now)
        return True

    async def dispatch(self, request: Request, call_next):
        if not self.is_limited(request.url.path):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        if not self._take_token(client_ip, time.time()):
            logger.warning(f"Rate limit exceeded for IP {client_ip} on {request.url.path}")
            return Response(status_code=429, content="Too Many Requests")
        return await call_next(request)
