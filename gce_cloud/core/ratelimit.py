"""
GCE Cloud - Rate Limiting

Every adapter call, and every poll of a long-running operation, passes
through RateLimiter.accept() before the request is sent. The policy is
pluggable:

    NopRateLimiter()                      # never blocks
    TokenBucketRateLimiter(qps=5, burst=10)

Custom policies implement accept(ctx, key) and either return (allowed),
block, or raise ThrottledError.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from gce_cloud.core.exceptions import ThrottledError
from gce_cloud.meta.version import Version

logger = logging.getLogger('gce_cloud')


@dataclass(frozen=True)
class RateLimitKey:
    """
    Describes the call about to be made.

    Attributes:
        operation: 'Get', 'List', 'Insert', 'Delete' or a custom verb
        version: API version of the call
        target: Resource object type (e.g. 'Address')
    """
    operation: str
    version: Version
    target: str

    def __str__(self):
        return f"{self.operation} {self.version.value}/{self.target}"


class RateLimiter(ABC):
    """Gate that every API call passes through."""

    @abstractmethod
    def accept(self, ctx, key: RateLimitKey):
        """
        Allow the call to proceed, blocking if needed.

        Args:
            ctx: CallContext of the caller
            key: Description of the call

        Raises:
            ThrottledError: If the call is refused
            CancelledError: If ctx ends while waiting
        """
        pass


class NopRateLimiter(RateLimiter):
    """Accepts everything immediately."""

    def accept(self, ctx, key: RateLimitKey):
        return None


class TokenBucketRateLimiter(RateLimiter):
    """
    Token bucket shared by all calls.

    Allows bursting up to `burst` calls, then refills at `qps` tokens per
    second. Waiting callers sleep through their context so cancellation
    wakes them.

    Example:
        limiter = TokenBucketRateLimiter(qps=5, burst=10, max_wait=30)
    """

    def __init__(self, qps: float, burst: int = 1, max_wait: Optional[float] = None):
        """
        Args:
            qps: Refill rate (tokens per second), must be > 0
            burst: Bucket capacity
            max_wait: Longest a caller may wait before ThrottledError;
                None waits as long as the context allows
        """
        if qps <= 0:
            raise ValueError("qps must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")

        self.qps = qps
        self.burst = burst
        self.max_wait = max_wait
        self._tokens = float(burst)
        self._last_refill = time.monotonic()
        self._lock = threading.Lock()

    def _reserve(self) -> float:
        """Take a token if available; return seconds to wait otherwise."""
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_refill
            self._tokens = min(self.burst, self._tokens + elapsed * self.qps)
            self._last_refill = now

            if self._tokens >= 1:
                self._tokens -= 1
                return 0.0

            return (1 - self._tokens) / self.qps

    def accept(self, ctx, key: RateLimitKey):
        start_time = time.monotonic()

        while True:
            ctx.check()

            wait_time = self._reserve()
            if wait_time == 0:
                return

            waited = time.monotonic() - start_time
            if self.max_wait is not None and waited + wait_time > self.max_wait:
                raise ThrottledError(key, f"no token within {self.max_wait}s")

            remaining = ctx.remaining()
            if remaining is not None and wait_time > remaining:
                raise ThrottledError(key, "no token before context deadline")

            logger.debug(f"Rate limited {key}, waiting {wait_time:.2f}s")
            ctx.wait(wait_time)
