from __future__ import annotations

import threading


class CancellableTimer:
    """Sleeps measured in time units that ``cancel()`` cuts short.

    Once cancelled the timer stays cancelled: every later ``wait`` returns
    ``False`` at once.
    """

    def __init__(self, time_unit: float = 1.0) -> None:
        self.time_unit = time_unit
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def wait(self, units: float) -> bool:
        """Return True when the full wait elapsed, False when cancelled."""
        return not self._cancelled.wait(max(0.0, units * self.time_unit))

    def cancel(self) -> None:
        self._cancelled.set()
