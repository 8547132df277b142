"""Fixed-window request limiter keyed by caller identity."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Tuple

from consigliere.errors import RateLimitExceeded


logger = logging.getLogger("uvicorn.error")


class FixedWindowRateLimiter:
    """Allow ``limit`` hits per identity per ``window`` seconds.

    Windows start at an identity's first hit. Expired windows are swept on
    access so idle identities do not accumulate. A ``limit`` of 0 disables
    limiting.
    """

    def __init__(self, limit: int = 5, window: float = 60.0, *, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, identity: str) -> None:
        """Record one request, raising ``RateLimitExceeded`` once the window is full."""

        if self.limit <= 0:
            return
        now = self._clock()
        with self._lock:
            self._sweep(now)
            started, count = self._windows.get(identity, (now, 0))
            if count >= self.limit:
                retry_after = max(0.0, started + self.window - now)
                logger.info("Rate limit hit for %s; retry in %.1fs", identity, retry_after)
                raise RateLimitExceeded(identity, retry_after)
            self._windows[identity] = (started, count + 1)

    def allow(self, identity: str) -> bool:
        try:
            self.hit(identity)
        except RateLimitExceeded:
            return False
        return True

    def _sweep(self, now: float) -> None:
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window]
        for key in expired:
            del self._windows[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
