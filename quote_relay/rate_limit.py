"""
Per-client rate limiting for quote submissions.

Fixed trailing window keyed on client IP:
  • window – 10 minutes (RATE_LIMIT_WINDOW_SECONDS)
  • limit  – 5 requests (RATE_LIMIT_MAX_REQUESTS)

Every request is recorded, including rejected ones, so a client that keeps
hammering the endpoint stays blocked until it backs off for a full window.

Buckets live in a ``RateLimitStore``.  The default store is process-local,
so each instance of the service enforces its own window.  Any failure inside
the limiter admits the request (fail-open).

slowapi is not used here: it does not count rejected requests and its
storage cannot be swapped for a ``RateLimitStore``.  Replacing this module
with it changes when a blocked client is admitted again.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Protocol

from quote_relay.config import (
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from quote_relay.errors import RateLimitError
from quote_relay.events import HttpEvent

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def client_identifier(event: HttpEvent) -> str:
    """X-Forwarded-For (first hop), then Client-IP, then ``"unknown"``."""
    forwarded = event.header("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    client_ip = event.header("client-ip")
    if client_ip and client_ip.strip():
        return client_ip.strip()
    return UNKNOWN_CLIENT


class RateLimitStore(Protocol):
    """Storage for per-key request timestamps."""

    def get(self, key: str) -> list[float]: ...

    def set(self, key: str, timestamps: list[float]) -> None: ...

    def prune(self, key: str, cutoff: float) -> list[float]:
        """Drop timestamps at or before *cutoff* and return what is left."""
        ...


class InMemoryRateLimitStore:
    """Dict-backed store.  Buckets are never evicted once created."""

    def __init__(self) -> None:
        self._buckets: dict[str, list[float]] = {}

    def get(self, key: str) -> list[float]:
        return list(self._buckets.get(key, ()))

    def set(self, key: str, timestamps: list[float]) -> None:
        self._buckets[key] = list(timestamps)

    def prune(self, key: str, cutoff: float) -> list[float]:
        kept = [ts for ts in self._buckets.get(key, ()) if ts > cutoff]
        self._buckets[key] = kept
        return list(kept)

    def clear(self) -> None:
        self._buckets.clear()

    def __len__(self) -> int:
        return len(self._buckets)


class RateLimiter:
    def __init__(
        self,
        store: RateLimitStore | None = None,
        *,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        enabled: bool = RATE_LIMIT_ENABLED,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store: RateLimitStore = store if store is not None else InMemoryRateLimitStore()
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.enabled = enabled
        self._clock = clock

    def hit(self, key: str) -> tuple[bool, int]:
        """Record one request for *key*.

        Returns ``(allowed, retry_after_seconds)``; ``retry_after`` is 0
        when the request is allowed.
        """
        now = self._clock()
        bucket = self.store.prune(key, now - self.window_seconds)
        bucket.append(now)
        self.store.set(key, bucket)

        if len(bucket) <= self.max_requests:
            return True, 0

        # Admitted again once the max-th most recent hit leaves the window
        reopens_at = bucket[-self.max_requests] + self.window_seconds
        return False, max(1, math.ceil(reopens_at - now))

    def check(self, event: HttpEvent) -> None:
        """Admit or reject the request carried by *event*.

        Raises:
            RateLimitError: the client is over the limit.
        """
        if not self.enabled:
            return

        try:
            key = client_identifier(event)
            allowed, retry_after = self.hit(key)
        except Exception:
            logger.exception("Rate limiter failed, admitting request")
            return

        if not allowed:
            logger.warning("Rate limit exceeded for %s (retry in %ds)", key, retry_after)
            raise RateLimitError(retry_after=retry_after)

    def reset(self) -> None:
        """Forget every bucket (stores without ``clear`` are replaced)."""
        clear = getattr(self.store, "clear", None)
        if callable(clear):
            clear()
        else:
            self.store = InMemoryRateLimitStore()


# ── Singleton instance ────────────────────────────────────────────────────
limiter = RateLimiter()
