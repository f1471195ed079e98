"""
Tick clocks that pace the evaluation window.

The trainer calls clock.wait(ticks, dt) at every suspension point in
the Evaluating phase: once per tick in real-time mode, once per burst
in batched mode. The clock decides how much wall-clock time that
suspension takes; it never changes what is simulated.
"""
import time
from typing import Optional


class NullClock:
    """Never waits. Used for offline runs and tests."""

    def wait(self, ticks: int, dt: float) -> None:
        pass


class RealTimeClock:
    """
    Keep simulated time in step with wall-clock time.

    Each wait lasts until `ticks * dt / time_scale` seconds have passed
    since the previous wait returned. Time already spent computing the
    ticks counts towards that; if the simulation is slower than real
    time the clock does not try to catch up.
    """

    def __init__(self, time_scale: float = 1.0):
        """
        Initialize the clock.

        Args:
            time_scale: Simulated seconds per wall-clock second.
        """
        if time_scale <= 0:
            raise ValueError(f"time_scale must be positive, got {time_scale}")
        self.time_scale = time_scale
        self._last: Optional[float] = None

    def wait(self, ticks: int, dt: float) -> None:
        now = time.monotonic()
        if self._last is None:
            self._last = now

        deadline = self._last + ticks * dt / self.time_scale
        if deadline > now:
            time.sleep(deadline - now)
            now = deadline

        self._last = now
