"""
Rate Limiter - Minimum delay between two update checks.
"""

import logging
import time
from typing import Callable, Optional

DEFAULT_REQUEST_DELAY = 2.0


class RateLimiter:
    """Blocks until a minimum interval has passed since the last check."""

    def __init__(
        self,
        min_interval: float = DEFAULT_REQUEST_DELAY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_mark: Optional[float] = None
        self.logger = logging.getLogger('RateLimiter')

    def wait(self) -> float:
        """
        Wait until the next check may start.

        Returns:
            Seconds actually slept
        """
        if self._last_mark is None:
            return 0.0

        remaining = self.min_interval - (self._clock() - self._last_mark)
        if remaining <= 0:
            return 0.0

        self.logger.debug(f"Waiting {remaining:.2f}s before next check")
        self._sleep(remaining)
        return remaining

    def mark(self) -> None:
        """Record that a check has just been reported."""
        self._last_mark = self._clock()
