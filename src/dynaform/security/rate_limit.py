"""
Submission rate limiting.

The in-memory service keeps a list of attempt timestamps per identifier
and counts those inside the sliding window. Callers check first and
record afterwards.
"""

import logging
import threading
import time
from datetime import timedelta
from typing import Callable, Protocol, runtime_checkable

from dynaform.security.models import RateLimitResult

logger = logging.getLogger("dynaform.security")


@runtime_checkable
class RateLimitService(Protocol):
    async def check_limit(self, identifier: str, max_attempts: int, window: timedelta) -> RateLimitResult:
        ...

    async def record_attempt(self, identifier: str) -> None:
        ...


class InMemoryRateLimitService:
    """
    Sliding-window limiter held in process memory.

    Example:
        limiter = InMemoryRateLimitService()
        result = await limiter.check_limit("10.0.0.1", 5, timedelta(minutes=1))
        if result.is_allowed:
            await limiter.record_attempt("10.0.0.1")
    """

    cleanup_interval = timedelta(hours=1)

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._attempts: dict[str, list[float]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    async def check_limit(self, identifier: str, max_attempts: int, window: timedelta) -> RateLimitResult:
        now = self._clock()
        cutoff = now - window.total_seconds()
        with self._lock:
            self._maybe_cleanup(now)
            attempts = [t for t in self._attempts.get(identifier, []) if t > cutoff]
            self._attempts[identifier] = attempts

        count = len(attempts)
        if count < max_attempts:
            return RateLimitResult(is_allowed=True, remaining_attempts=max_attempts - count)

        retry_after = timedelta(seconds=max(0.0, attempts[0] + window.total_seconds() - now))
        logger.info(f"Rate limit reached for {identifier}; retry after {retry_after}")
        return RateLimitResult(is_allowed=False, remaining_attempts=0, retry_after=retry_after)

    async def record_attempt(self, identifier: str) -> None:
        with self._lock:
            self._attempts.setdefault(identifier, []).append(self._clock())

    def cleanup(self, max_age: timedelta | None = None) -> int:
        """Drop attempts older than ``max_age`` (one hour by default); returns identifiers removed."""
        with self._lock:
            return self._cleanup(self._clock(), max_age or self.cleanup_interval)

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup >= self.cleanup_interval.total_seconds():
            self._cleanup(now, self.cleanup_interval)

    def _cleanup(self, now: float, max_age: timedelta) -> int:
        cutoff = now - max_age.total_seconds()
        removed = 0
        for identifier in list(self._attempts):
            recent = [t for t in self._attempts[identifier] if t > cutoff]
            if recent:
                self._attempts[identifier] = recent
            else:
                del self._attempts[identifier]
                removed += 1
        self._last_cleanup = now
        return removed
