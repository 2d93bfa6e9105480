from __future__ import annotations

import threading
import time


class RateLimiter:
    """Thread-safe token-bucket rate limiter.

    Tokens refill at ``rate`` per second up to ``burst``. Calling acquire()
    blocks the current thread until a token is available and consumes it, so
    with burst=1 successive acquisitions are at least 1/rate seconds apart."""

    def __init__(self, rate: float = 5.0, burst: int = 1) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")
        self._rate = float(rate)
        self._burst = float(burst)
        self._tokens = float(burst)
        self._updated = time.monotonic()
        self._lock = threading.Lock()

    @property
    def min_interval(self) -> float:
        return 1.0 / self._rate

    def _refill(self, now: float) -> None:
        elapsed = now - self._updated
        if elapsed > 0:
            self._tokens = min(self._burst, self._tokens + elapsed * self._rate)
        self._updated = now

    def acquire(self) -> None:
        """Block until a request is permitted, then consume one token."""
        with self._lock:
            self._refill(time.monotonic())
            if self._tokens < 1.0:
                time.sleep((1.0 - self._tokens) / self._rate)
                self._refill(time.monotonic())
                # sleep may return marginally early
                self._tokens = max(self._tokens, 1.0)
            self._tokens -= 1.0
