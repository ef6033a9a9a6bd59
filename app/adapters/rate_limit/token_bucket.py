"""In-memory token bucket admission limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: refill, decision and deduction share one critical section.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable

from app.adapters.rate_limit.base import AbstractAdmissionLimiter, AdmissionResult


class TokenBucketLimiter(AbstractAdmissionLimiter):
    """Global token bucket that admits or rejects requests immediately.

    The bucket starts full. Tokens refill continuously in proportion to the
    time elapsed since the last refill and never exceed ``capacity``. Each
    admitted request consumes one token.
    """

    def __init__(
        self,
        *,
        capacity: int,
        refill_per_second: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the token bucket.

        Args:
            capacity: Maximum number of tokens (burst size).
            refill_per_second: Tokens added per second; 0 disables refill.
            clock: Monotonic time source in seconds.

        Raises:
            ValueError: If capacity or refill_per_second are invalid.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if refill_per_second < 0:
            raise ValueError("refill_per_second must be >= 0")

        self._capacity = capacity
        self._rate = float(refill_per_second)
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = float(capacity)
        self._last_refill = clock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def refill_per_second(self) -> float:
        return self._rate

    def _refill_locked(self, now: float) -> None:
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(float(self._capacity), self._tokens + elapsed * self._rate)
        # A clock that steps backwards must not mint tokens later on.
        self._last_refill = max(self._last_refill, now)

    def _retry_after_locked(self) -> int | None:
        if self._rate <= 0:
            return None
        return max(1, int(math.ceil((1.0 - self._tokens) / self._rate)))

    def acquire(self) -> AdmissionResult:
        with self._lock:
            self._refill_locked(self._clock())

            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return AdmissionResult(
                    allowed=True,
                    capacity=self._capacity,
                    remaining=int(self._tokens),
                    retry_after_seconds=None,
                )

            return AdmissionResult(
                allowed=False,
                capacity=self._capacity,
                remaining=0,
                retry_after_seconds=self._retry_after_locked(),
            )

    def available_tokens(self) -> float:
        """Current token count after refilling; does not consume anything."""
        with self._lock:
            self._refill_locked(self._clock())
            return self._tokens
