"""Sliding-window rate limiter for inbound HTTP requests."""

import logging
import time
from collections import deque
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` per client within ``window_seconds``.

    Each client id gets its own window; timestamps older than the window are
    dropped on every check. Clients with no hit inside the window are swept
    at most once per window, so idle callers do not accumulate.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def check(self, client_id: str = "default") -> bool:
        """Record a request and return False if it exceeds the limit."""
        now = self._clock()
        self._sweep(now)
        hits = self._hits.setdefault(client_id, deque())
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def retry_after(self, client_id: str = "default") -> int:
        """Seconds until the oldest hit in the window expires."""
        hits = self._hits.get(client_id)
        if not hits:
            return 0
        return max(0, int(hits[0] + self.window_seconds - self._clock()) + 1)

    def _sweep(self, now: float) -> None:
        # Every stored window holds at least one hit; the newest is last.
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        stale = [
            client_id
            for client_id, hits in self._hits.items()
            if now - hits[-1] >= self.window_seconds
        ]
        for client_id in stale:
            del self._hits[client_id]
        if stale:
            logger.debug("Dropped %d idle rate-limit windows", len(stale))
