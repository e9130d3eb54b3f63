import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class AdaptiveRateLimiter:
    """Token bucket rate limiter that backs off when the server throttles us.

    Tokens are added at `rate` per second up to `burst`; every request takes
    one. A 429 halves the rate. Once `cooldown_seconds` have passed since the
    last change, a successful response may raise it by half again, never
    above `max_rate`.

    Example:
        >>> limiter = AdaptiveRateLimiter(max_rate=5.0)
        >>> limiter.wait()  # takes one token
        True
    """

    RAMP_FACTOR = 1.5

    def __init__(
        self,
        max_rate: float = 5.0,
        cooldown_seconds: float = 10.0,
        min_rate: float = 0.01,
        burst: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_rate <= 0:
            raise ValueError("max_rate must be positive")
        self._max_rate = float(max_rate)
        self._min_rate = min(float(min_rate), self._max_rate)
        self._cooldown = float(cooldown_seconds)
        self._burst = max(1, int(burst))
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

        now = clock()
        self._rate = self._max_rate
        self._tokens = float(self._burst)
        self._last_refill = now
        self._last_adjusted = now

    @property
    def rate(self) -> float:
        with self._lock:
            return self._rate

    @property
    def max_rate(self) -> float:
        return self._max_rate

    def set_rate(self, rate: float) -> None:
        with self._lock:
            self._refill(self._clock())
            self._rate = max(self._min_rate, float(rate))

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._last_refill)
        self._last_refill = now
        self._tokens = min(float(self._burst), self._tokens + elapsed * self._rate)

    def wait(self, stop_event: Optional[threading.Event] = None) -> bool:
        """Block until a request may be made.

        Returns False if `stop_event` was set before a permit was granted.
        """
        while True:
            if stop_event is not None and stop_event.is_set():
                return False
            with self._lock:
                self._refill(self._clock())
                if self._tokens >= 1.0:
                    self._tokens -= 1.0
                    return True
                delay = (1.0 - self._tokens) / self._rate
            if stop_event is not None:
                if stop_event.wait(delay):
                    return False
            else:
                self._sleep(delay)

    def throttle_down(self) -> float:
        """Halve the rate after a 429 and restart the cooldown window."""
        with self._lock:
            now = self._clock()
            self._refill(now)
            self._rate = max(self._min_rate, self._rate / 2)
            self._last_adjusted = now
            new_rate = self._rate
        logger.info("Reducing rate limit to %.2f r/s", new_rate)
        return new_rate

    def maybe_ramp_up(self) -> Optional[float]:
        """Raise the rate if it is capped below the ceiling and the cooldown has passed.

        Returns the new rate, or None if nothing changed.
        """
        with self._lock:
            now = self._clock()
            if self._rate >= self._max_rate or now - self._last_adjusted < self._cooldown:
                return None
            self._refill(now)
            self._rate = min(self._max_rate, self._rate * self.RAMP_FACTOR)
            self._last_adjusted = now
            new_rate = self._rate
        logger.info("Increasing rate limit to %.2f r/s", new_rate)
        return new_rate
