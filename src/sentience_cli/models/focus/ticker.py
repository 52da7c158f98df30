"""Host-owned one-second tick source for the timer engine."""

import time
from collections.abc import Callable


class Ticker:
    """Counts whole seconds elapsed on a monotonic clock.

    The host polls the ticker from its render loop and calls
    ``engine.tick()`` once per due second, so a slow frame never loses or
    gains time. The ticker must be closed when the host goes away; use it
    as a context manager::

        with Ticker() as ticker:
            while running:
                for _ in range(ticker.poll()):
                    engine.tick()
    """

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.monotonic
        self._anchor: float | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        return self._anchor is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Ticker is closed")

    def resume(self) -> None:
        """Start counting from now. No-op when already running."""
        self._check_open()
        if self._anchor is None:
            self._anchor = self._clock()

    def pause(self) -> None:
        """Stop counting. A partial second is discarded."""
        self._check_open()
        self._anchor = None

    def poll(self) -> int:
        """Number of whole seconds elapsed since the last poll (0 when paused)."""
        self._check_open()
        if self._anchor is None:
            return 0
        due = int(self._clock() - self._anchor)
        if due > 0:
            self._anchor += due
        return due

    def seconds_until_next(self) -> float:
        """Time until the next whole second is due (1.0 when paused)."""
        self._check_open()
        if self._anchor is None:
            return 1.0
        elapsed = self._clock() - self._anchor
        return max(0.0, 1.0 - (elapsed - int(elapsed)))

    def close(self) -> None:
        """Release the tick source. Safe to call more than once."""
        self._anchor = None
        self._closed = True

    def __enter__(self) -> "Ticker":
        self._check_open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
