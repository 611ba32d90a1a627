"""
QuickNotes Backend — Rate Limiting Middleware
===============================================

What:  Per-IP sliding window rate limiter.
How:   SlidingWindow keeps recent request timestamps per client key;
       RateLimitMiddleware asks it whether the next request may pass.

Sliding window:
    - timestamps older than `window` seconds are forgotten on each hit
    - a client already at `limit` hits is refused until its oldest hit ages out
    - refusals are answered with 429 and a Retry-After header

State lives in process memory, so each uvicorn worker counts on its own.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from quicknotes.config import settings

logger = logging.getLogger(__name__)


class SlidingWindow:
    """Counts hits per key over the last `window` seconds."""

    # Forget idle keys once this many have accumulated
    PRUNE_THRESHOLD = 1000

    def __init__(self, limit: int, window: int):
        self.limit = limit
        self.window = window
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        """
        Record a hit for `key`.

        Returns None when the hit is allowed, otherwise the number of
        seconds until the client may try again (the hit is not recorded).
        """
        now = time.time() if now is None else now
        hits = self._hits[key]
        cutoff = now - self.window
        while hits and hits[0] <= cutoff:
            hits.popleft()

        if len(hits) >= self.limit:
            return int(hits[0] + self.window - now) + 1

        hits.append(now)
        if len(self._hits) >= self.PRUNE_THRESHOLD:
            self.prune(cutoff)
        return None

    def prune(self, cutoff: float) -> int:
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            del self._hits[key]
        if idle:
            logger.debug("Forgot %d idle rate-limit clients", len(idle))
        return len(idle)

    def __len__(self) -> int:
        return len(self._hits)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects clients that exceed `max_requests` per `window` seconds.

    Defaults come from RATE_LIMIT_REQUESTS / RATE_LIMIT_WINDOW.
    Health probes and the API docs are never limited.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window: Optional[int] = None,
    ):
        super().__init__(app)
        self.limiter = SlidingWindow(
            limit=max_requests or settings.rate_limit_requests,
            window=window or settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        # Behind a proxy this is the proxy's address
        client_ip = request.client.host if request.client else "unknown"

        retry_after = self.limiter.hit(client_ip)
        if retry_after is None:
            return await call_next(request)

        logger.warning(
            "Rate limit hit by %s: %d requests per %ds allowed",
            client_ip,
            self.limiter.limit,
            self.limiter.window,
        )
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": f"Too many requests. Retry in {retry_after} seconds.",
                "details": {"retry_after": retry_after},
            },
            headers={"Retry-After": str(retry_after)},
        )
