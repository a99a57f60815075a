"""Minimum-interval gate for tmux calls.

PUBLIC API:
  - Throttle: Blocks callers until the interval since the last call has passed
"""

import threading
import time
from typing import Optional


class Throttle:
    """Enforce a minimum interval between successive callers.

    Args:
        interval: Seconds between calls. Zero or less disables the throttle.
    """

    def __init__(self, interval: float):
        self.interval = max(interval, 0.0)
        self._lock = threading.Lock()
        self._next = 0.0

    def wait(self, cancel: Optional[threading.Event] = None) -> bool:
        """Block until the caller may proceed.

        Returns:
            False if `cancel` was set before the slot came up.
        """
        if cancel is not None and cancel.is_set():
            return False
        if self.interval <= 0:
            return True
        while True:
            with self._lock:
                now = time.monotonic()
                delay = self._next - now
                if delay <= 0:
                    self._next = now + self.interval
                    return True
            if cancel is None:
                time.sleep(min(delay, self.interval))
            elif cancel.wait(min(delay, self.interval)):
                return False
