"""Sliding-Window Rate Limiter — per-client request budgets kept in memory.

Invariants:
    - A request is admitted iff fewer than max_requests timestamps fall in (now - window, now]
    - Rejected requests are not recorded (they don't extend the lockout)
    - Stale timestamps are pruned on every call; empty buckets are dropped
    - retry_after = ceil(oldest_in_window + window - now), at least 1 second

Design Decisions:
    - Lazy pruning over a background sweeper: no thread to manage, same sliding-window contract
    - Clock injectable for deterministic tests
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one check; carries everything needed for headers."""
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int = 0


class SlidingWindowRateLimiter:
    """In-memory sliding-window limiter keyed by client identity."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 900,
        clock: Callable[[], float] = time.time,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def check(self, client_key: str) -> RateLimitDecision:
        """Record a request for client_key if it fits the window."""
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            self._prune(window_start)
            recent = self._requests.get(client_key, [])

            if len(recent) >= self.max_requests:
                retry_after = max(1, math.ceil(recent[0] + self.window_seconds - now))
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    reset_at=recent[0] + self.window_seconds,
                    retry_after=retry_after,
                )

            recent.append(now)
            self._requests[client_key] = recent
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - len(recent),
                reset_at=now + self.window_seconds,
            )

    def _prune(self, window_start: float) -> None:
        for key in list(self._requests):
            valid = [t for t in self._requests[key] if t > window_start]
            if valid:
                self._requests[key] = valid
            else:
                del self._requests[key]

    def tracked_clients(self) -> int:
        return len(self._requests)
