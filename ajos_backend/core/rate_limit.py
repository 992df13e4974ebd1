"""
Fixed-window request counter guarding outgoing backend calls
"""

import time
from typing import Callable, Optional

from core.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Allow at most max_requests calls per window; extra calls are refused, not queued"""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        if max_requests < 0:
            raise ValueError("max_requests must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._window_started = self._clock()
        self._count = 0

    def _roll_window(self) -> None:
        now = self._clock()
        if now - self._window_started >= self.window_seconds:
            self._window_started = now
            self._count = 0

    def can_make_request(self) -> bool:
        """Consume one slot in the current window; False when the window is full"""
        self._roll_window()
        if self._count >= self.max_requests:
            logger.warning(
                f"Rate limit exceeded ({self.max_requests} requests per "
                f"{self.window_seconds:g}s), request dropped"
            )
            return False
        self._count += 1
        return True

    @property
    def remaining(self) -> int:
        self._roll_window()
        return max(0, self.max_requests - self._count)

    def reset(self) -> None:
        self._window_started = self._clock()
        self._count = 0
