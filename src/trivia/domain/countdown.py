import time
from collections.abc import Callable


class Countdown:
    """
    Clock-driven countdown handle.

    It never mutates the run itself; it only reports how many whole tick
    intervals have elapsed since the last poll. Once cancelled it reports
    nothing until started again.
    """

    def __init__(
        self,
        limit: int,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.interval = interval
        self._clock = clock
        self._active = False
        self._next_tick_at = 0.0
        self._ticks_left = 0

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True
        self._ticks_left = self.limit
        self._next_tick_at = self._clock() + self.interval

    def cancel(self) -> None:
        self._active = False
        self._ticks_left = 0

    def due_ticks(self) -> int:
        if not self._active:
            return 0

        now = self._clock()
        if now < self._next_tick_at:
            return 0

        elapsed = int((now - self._next_tick_at) // self.interval) + 1
        due = min(elapsed, self._ticks_left)
        self._ticks_left -= due
        self._next_tick_at += elapsed * self.interval
        return due
