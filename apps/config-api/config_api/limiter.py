"""
File: limiter.py
Purpose: In-process, fixed-window rate limiter for API requests.

Counters live in this process only (no cross-instance coordination). A burst at a
window boundary can let through up to 2x the budget; that is the fixed-window
trade-off. Tracked identities are bounded by an LRU so the table cannot grow
without limit.
"""

import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Hashable, NamedTuple


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


class RateDecision(NamedTuple):
    allowed: bool
    retry_after: int = 0  # seconds, only meaningful when not allowed


class FixedWindowRateLimiter:
    """Allow max_requests per identity per window_secs."""

    def __init__(self, max_requests: int = 100, window_secs: float = 60, max_clients: int = 10000,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_secs = window_secs
        self.max_clients = max_clients
        self._clock = clock
        self._entries: "OrderedDict[Hashable, RateLimitEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def allow(self, identity: Hashable) -> RateDecision:
        """Count one request for identity and decide whether it may proceed."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(identity)
            if entry is None:
                self._entries[identity] = RateLimitEntry(count=1, reset_at=now + self.window_secs)
                self._evict()
                return RateDecision(True)
            self._entries.move_to_end(identity)
            if now > entry.reset_at:
                entry.count = 1
                entry.reset_at = now + self.window_secs
                return RateDecision(True)
            if entry.count >= self.max_requests:
                return RateDecision(False, math.ceil(entry.reset_at - now))
            entry.count += 1
            return RateDecision(True)

    def _evict(self) -> None:
        while len(self._entries) > self.max_clients:
            self._entries.popitem(last=False)

    def entry(self, identity: Hashable):
        """Snapshot of the current entry for identity (None if untracked)."""
        with self._lock:
            e = self._entries.get(identity)
            return None if e is None else RateLimitEntry(e.count, e.reset_at)

    def __len__(self) -> int:
        return len(self._entries)
