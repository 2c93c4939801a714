"""
Rate Limiter

In-memory fixed-window counters keyed by ``action:client``. A window starts
on the first request for a key and lasts until its reset timestamp; the
next request after that opens a fresh window.

Counting is best-effort and process-local: there is no locking and nothing
is shared between worker processes.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    window_ms: int
    max_requests: int


# Predefined limits
LOGIN = RateLimitRule(window_ms=15 * 60 * 1000, max_requests=5)
PASSWORD_RESET = RateLimitRule(window_ms=60 * 60 * 1000, max_requests=3)
SIGNUP = RateLimitRule(window_ms=60 * 60 * 1000, max_requests=5)
GENERAL = RateLimitRule(window_ms=60 * 1000, max_requests=60)


@dataclass
class RateLimitCounter:
    count: int
    reset_time: int  # epoch ms


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: int  # epoch ms
    retry_after: Optional[int] = None  # seconds, only set when denied


class RateLimiter:
    """
    Request counter per identifier.

    Args:
        clock: returns the current time in seconds (defaults to time.time)
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._counters: Dict[str, RateLimitCounter] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def check(self, identifier: str, window_ms: int, max_requests: int) -> RateLimitResult:
        """
        Count one request against ``identifier`` and evaluate the limit.

        The request is counted before the limit is evaluated, so the call that
        goes over the limit is itself recorded.
        """
        now = self._now_ms()
        counter = self._counters.get(identifier)

        if counter is None or now >= counter.reset_time:
            counter = RateLimitCounter(count=0, reset_time=now + window_ms)

        counter.count += 1
        self._counters[identifier] = counter

        allowed = counter.count <= max_requests
        retry_after = None
        if not allowed:
            retry_after = math.ceil((counter.reset_time - now) / 1000)

        return RateLimitResult(
            allowed=allowed,
            remaining=max(0, max_requests - counter.count),
            reset_time=counter.reset_time,
            retry_after=retry_after,
        )

    def check_rule(self, action: str, client: str, rule: RateLimitRule) -> RateLimitResult:
        return self.check(f"{action}:{client}", rule.window_ms, rule.max_requests)

    def cleanup(self) -> int:
        """Drop counters whose window has ended. Returns the number removed."""
        now = self._now_ms()
        expired = [key for key, counter in self._counters.items() if now >= counter.reset_time]
        for key in expired:
            del self._counters[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired rate limit counters")
        return len(expired)

    def reset(self) -> None:
        self._counters.clear()

    def __len__(self) -> int:
        return len(self._counters)
