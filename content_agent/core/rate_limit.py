"""
Simple in-memory rate limiter for API endpoints.

One RateLimiter lives on app.state per application instance.
"""
import logging
import threading
import time
from typing import Dict, List

from fastapi import Request

from content_agent.core.config import TRUST_PROXY_HEADERS
from content_agent.core.exceptions import RateLimited

logger = logging.getLogger(__name__)


def get_client_ip(request: Request, trust_proxy_headers: bool = TRUST_PROXY_HEADERS) -> str:
    """Extract client IP address from request."""
    # Forwarded IP (from proxy/load balancer), only when the proxy is trusted
    if trust_proxy_headers:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP in the chain
            return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


class RateLimiter:
    """Sliding-window request counter keyed by client IP."""

    def __init__(self, max_requests: int = 10, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, List[float]] = {}
        self._last_sweep = time.time()
        self._lock = threading.Lock()

    def check(self, key: str) -> None:
        """
        Record a request for key.

        Raises:
            RateLimited: 429 if rate limit exceeded
        """
        now = time.time()
        cutoff = now - self.window_seconds

        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            hits = [timestamp for timestamp in self._hits.get(key, []) if timestamp > cutoff]
            if len(hits) >= self.max_requests:
                self._hits[key] = hits
                logger.warning(f"Rate limit exceeded for IP: {key} ({len(hits)} requests in {self.window_seconds}s)")
                raise RateLimited(
                    f"Rate limit exceeded. Maximum {self.max_requests} requests per {self.window_seconds} seconds.",
                    details={"retry_after_seconds": self.window_seconds},
                )
            hits.append(now)
            self._hits[key] = hits

        logger.debug(f"Rate limit check passed for IP: {key} ({len(hits)}/{self.max_requests})")

    def _sweep(self, cutoff: float) -> None:
        """Drop keys with no hits inside the window; caller holds the lock."""
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def limit_auth_requests(request: Request) -> None:
    """Dependency guarding login/registration with the app's auth limiter."""
    limiter: RateLimiter = request.app.state.auth_rate_limiter
    limiter.check(get_client_ip(request))
