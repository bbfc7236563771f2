"""
In-memory expiring cache.

Used by the gateway authenticator to avoid re-validating the same bearer
token on every request. Entries are keyed by a SHA-256 hash of the raw key
so secrets are never held as dictionary keys.
"""

import asyncio
import hashlib
import time
from collections.abc import Callable
from typing import Any


def cache_key(raw: str) -> str:
    """Return a deterministic hex digest for the given raw key."""
    return hashlib.sha256(raw.encode()).hexdigest()


class ExpiringStore:
    """Key/value store whose entries expire ``ttl_seconds`` after being set.

    When an event loop is running, removal is scheduled with
    ``loop.call_later`` at insert time; expiry is re-checked on every read
    so entries never outlive their TTL. The clock is injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        """Return cached data if present and unexpired, otherwise None."""
        hashed = cache_key(key)
        entry = self._entries.get(hashed)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[hashed]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        hashed = cache_key(key)
        expires_at = self._clock() + ttl
        self._entries[hashed] = (expires_at, value)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.call_later(ttl, self._expire, hashed, expires_at)

    def _expire(self, hashed: str, expires_at: float) -> None:
        entry = self._entries.get(hashed)
        # A later set() for the same key replaces the deadline.
        if entry is not None and entry[0] == expires_at:
            del self._entries[hashed]

