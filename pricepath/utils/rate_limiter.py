"""Rate limiting for the X API request window."""

import threading
import time
from collections import deque
from typing import Callable


class RateLimiter:
    """Sliding-window rate limiter.

    Allows at most ``max_calls`` calls in any ``window_seconds`` span.
    ``clock`` and ``sleep`` are injectable for tests.
    """

    def __init__(
        self,
        max_calls: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_calls <= 0:
            raise ValueError("max_calls must be positive")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = threading.Lock()

    def _evict(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()

    def wait(self) -> float:
        """Block until a request is allowed. Returns seconds slept."""
        with self._lock:
            now = self._clock()
            self._evict(now)
            slept = 0.0
            if len(self._timestamps) >= self.max_calls:
                slept = self.window_seconds - (now - self._timestamps[0])
                if slept > 0:
                    self._sleep(slept)
                now = self._clock()
                self._evict(now)
            self._timestamps.append(now)
            return max(slept, 0.0)
