"""
Fixed-window rate limiting for the send-email function.

Each client identifier gets a counter and a window start. A request is
admitted while the counter is below the cap; once the window has elapsed
the counter starts over. Rejected requests never touch the counter.

State is process-local: every running instance enforces its own quota and
the map starts empty whenever the process is recycled. Concurrent requests
from the same client may both be admitted at the edge of the cap; the
bound is best-effort, not exact.

Memory is bounded: records are kept in LRU order and, once max_keys
identifiers are tracked, adding a new one first sweeps expired records and
then evicts the least recently used identifier.

Environment variables
---------------------
RATE_LIMIT_MAX              Requests admitted per window (default: 10).
RATE_LIMIT_WINDOW_SECONDS   Window length in seconds (default: 3600).
RATE_LIMIT_MAX_KEYS         Identifiers tracked at once (default: 10000).
"""

import logging
import os
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 10
DEFAULT_WINDOW_SECONDS = 60 * 60
DEFAULT_MAX_KEYS = 10_000

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitRecord:
    count: int
    window_start: float


class FixedWindowRateLimiter:
    """
    Per-identifier fixed-window counter.

    Args:
        max_requests: cap per identifier per window.
        window_seconds: window length.
        max_keys: number of identifiers tracked before LRU eviction.
        clock: time source returning seconds; injectable for tests.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_keys: int = DEFAULT_MAX_KEYS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if max_keys < 1:
            raise ValueError("max_keys must be at least 1")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._records: "OrderedDict[str, RateLimitRecord]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._records)

    def _expired(self, record: RateLimitRecord, now: float) -> bool:
        return now - record.window_start > self.window_seconds

    def admit(self, client_id: str) -> bool:
        """Return True and count the request if the client is under its cap."""
        now = self._clock()
        record = self._records.get(client_id)

        if record is None:
            self._make_room(now)
            self._records[client_id] = RateLimitRecord(count=1, window_start=now)
            return True

        self._records.move_to_end(client_id)

        if self._expired(record, now):
            record.count = 1
            record.window_start = now
            return True

        if record.count >= self.max_requests:
            return False

        record.count += 1
        return True

    def _make_room(self, now: float) -> None:
        if len(self._records) < self.max_keys:
            return

        self._sweep(now)
        while len(self._records) >= self.max_keys:
            evicted, _ = self._records.popitem(last=False)
            logger.debug(f"Rate limiter full, evicted least recently used client {evicted}")

    def _sweep(self, now: float) -> int:
        expired = [key for key, record in self._records.items() if self._expired(record, now)]
        for key in expired:
            del self._records[key]
        return len(expired)

    def sweep(self) -> int:
        """Drop every record whose window has elapsed. Returns how many were dropped."""
        return self._sweep(self._clock())

    def get_record(self, client_id: str) -> Optional[RateLimitRecord]:
        return self._records.get(client_id)

    def reset(self) -> None:
        self._records.clear()


def client_id_from_headers(headers: Mapping[str, str]) -> str:
    """
    Derive the rate-limit key for a request.

    Order: first x-forwarded-for entry, then cf-connecting-ip, then the
    shared "unknown" bucket.
    """
    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    if first:
        return first

    connecting_ip = (headers.get("cf-connecting-ip") or "").strip()
    if connecting_ip:
        return connecting_ip

    return UNKNOWN_CLIENT


def _build_default_limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(
        max_requests=int(os.getenv("RATE_LIMIT_MAX", str(DEFAULT_MAX_REQUESTS))),
        window_seconds=float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(DEFAULT_WINDOW_SECONDS))),
        max_keys=int(os.getenv("RATE_LIMIT_MAX_KEYS", str(DEFAULT_MAX_KEYS))),
    )


# Process-wide limiter used by the send-email endpoint
rate_limiter = _build_default_limiter()
