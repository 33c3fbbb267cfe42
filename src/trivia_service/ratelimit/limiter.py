"""
Sliding-window rate limiter keyed by client address.

State is process-wide and guarded by a mutex, so admit() is safe to call
from any request task. Keys whose window has emptied are removed by a
periodic sweep task instead of inline, which bounds memory without making
admit() scan the whole map.
"""

import asyncio
import threading
import time
from collections import deque
from typing import Callable, Mapping, Optional

import structlog


logger = structlog.get_logger(__name__)


class SlidingWindowRateLimiter:
    """
    Admit at most `limit` requests per key in any trailing `window` seconds.

    Rejected attempts are not recorded, so a client that keeps retrying while
    limited does not extend its own lockout.
    """

    def __init__(
        self,
        limit: int = 10,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            limit: Maximum admissions per key within the window
            window: Window length in seconds
            clock: Monotonic time source (injectable for tests)
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window <= 0:
            raise ValueError("window must be > 0")

        self.limit = limit
        self.window = window
        self._clock = clock
        self._timestamps: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, timestamps: deque[float], now: float) -> None:
        # Timestamps are appended in order, so expired ones sit at the left.
        cutoff = now - self.window
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()

    def admit(self, client_key: str) -> bool:
        """Record an admission for client_key and return True, or return False if limited."""
        with self._lock:
            now = self._clock()
            timestamps = self._timestamps.setdefault(client_key, deque())
            self._prune(timestamps, now)

            if len(timestamps) >= self.limit:
                return False

            timestamps.append(now)
            return True

    def retry_after(self, client_key: str) -> float:
        """Seconds until client_key regains one admission (0 if not limited)."""
        with self._lock:
            timestamps = self._timestamps.get(client_key)
            if not timestamps or len(timestamps) < self.limit:
                return 0.0
            return max(0.0, timestamps[0] + self.window - self._clock())

    def sweep(self) -> int:
        """Drop expired timestamps and remove keys left empty. Returns keys removed."""
        with self._lock:
            now = self._clock()
            stale = []
            for key, timestamps in self._timestamps.items():
                self._prune(timestamps, now)
                if not timestamps:
                    stale.append(key)
            for key in stale:
                del self._timestamps[key]
            return len(stale)

    def reset(self, client_key: Optional[str] = None) -> None:
        """Forget one key, or every key when client_key is None."""
        with self._lock:
            if client_key is None:
                self._timestamps.clear()
            else:
                self._timestamps.pop(client_key, None)

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._timestamps)

    async def run_sweeper(self, interval: float = 300.0) -> None:
        """Sweep every `interval` seconds until cancelled."""
        logger.info("Rate limiter sweeper started", interval_seconds=interval)
        try:
            while True:
                await asyncio.sleep(interval)
                removed = self.sweep()
                if removed:
                    logger.debug(
                        "Rate limiter sweep",
                        removed_keys=removed,
                        tracked_keys=self.tracked_keys,
                    )
        except asyncio.CancelledError:
            logger.info("Rate limiter sweeper stopped")
            raise


def client_key_from_headers(headers: Mapping[str, str], peer_host: Optional[str]) -> str:
    """
    Derive the rate-limit key for a request.

    Uses the first X-Forwarded-For entry when present (the service normally
    sits behind a proxy), then the socket peer, then "unknown".
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return peer_host or "unknown"
