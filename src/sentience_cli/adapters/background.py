"""Fire-and-forget wrapper around a session store."""

import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime

from sentience_cli.models.focus.intervals import FocusInterval
from sentience_cli.models.focus.store import SessionStore

logger = logging.getLogger(__name__)


class BackgroundSessionStore(SessionStore):
    """Run ``append`` on a single worker thread so slow backends never block ticks.

    Reads go straight to the wrapped store after pending writes are flushed.
    Failed writes are logged on the worker and queued; the thread that owns
    the timer collects them with ``drain_failures()`` (the engine does this
    on every tick) and reports them to its host.
    """

    def __init__(self, inner: SessionStore):
        super().__init__(inner.scope)
        self.inner = inner
        self._executor: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="focus-store"
        )
        self._pending: list[Future] = []
        self._failures: queue.SimpleQueue[tuple[FocusInterval, Exception]] = (
            queue.SimpleQueue()
        )

    def _write(self, interval: FocusInterval) -> None:
        try:
            self.inner.append(interval)
        except Exception as e:
            logger.error("Background write of %s failed: %s", interval.id, e)
            self._failures.put((interval, e))

    def append(self, interval: FocusInterval) -> None:
        if self._executor is None:
            raise RuntimeError("BackgroundSessionStore is closed")
        self._pending = [f for f in self._pending if not f.done()]
        self._pending.append(self._executor.submit(self._write, interval))

    def flush(self) -> None:
        """Wait for every pending write to finish."""
        for future in list(self._pending):
            future.result()
        self._pending.clear()

    def drain_failures(self) -> list[tuple[FocusInterval, Exception]]:
        failures = []
        while True:
            try:
                failures.append(self._failures.get_nowait())
            except queue.Empty:
                return failures

    def list_intervals(self) -> list[FocusInterval]:
        self.flush()
        return self.inner.list_intervals()

    def query_by_date_range(self, start: datetime, end: datetime) -> list[FocusInterval]:
        self.flush()
        return self.inner.query_by_date_range(start, end)

    def clear(self) -> None:
        self.flush()
        self.inner.clear()

    def close(self) -> None:
        """Drain pending writes, stop the worker and close the wrapped store.

        Failures of the drained writes stay queued for ``drain_failures()``.
        """
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._pending.clear()
        self.inner.close()
