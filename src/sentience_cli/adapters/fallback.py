"""Remote session store that falls back to a local file.

Intervals go to the REST API while the server is reachable. When its health
check fails, or a write to it fails, intervals are kept in the local store
instead so a completed phase is never dropped because the network is down.
"""

from __future__ import annotations

import logging

from sentience_cli.models.focus.exceptions import PersistenceError
from sentience_cli.models.focus.intervals import FocusInterval
from sentience_cli.models.focus.store import SessionStore

from .rest_api import RemoteSessionStore

logger = logging.getLogger(__name__)


class FallbackSessionStore(SessionStore):
    """Write to ``primary`` while it is available, otherwise to ``fallback``.

    Availability is checked once, on first use. After a failed remote write
    the primary is treated as unavailable for the rest of the session.
    Reads merge both stores.
    """

    def __init__(self, primary: RemoteSessionStore, fallback: SessionStore):
        super().__init__(primary.scope)
        self.primary = primary
        self.fallback = fallback
        self._available: bool | None = None

    @property
    def primary_available(self) -> bool:
        if self._available is None:
            self._available = self.primary.is_available()
            if not self._available:
                logger.warning(
                    "Focus server %s unreachable, saving sessions locally",
                    self.primary.endpoint,
                )
        return self._available

    def append(self, interval: FocusInterval) -> None:
        if self.primary_available:
            try:
                self.primary.append(interval)
                return
            except PersistenceError as e:
                logger.warning("Remote save of %s failed, saving locally: %s", interval.id, e)
                self._available = False
        self.fallback.append(interval)

    def list_intervals(self) -> list[FocusInterval]:
        merged: dict[str, FocusInterval] = {}
        if self.primary_available:
            try:
                for interval in self.primary.list_intervals():
                    merged[interval.id] = interval
            except PersistenceError as e:
                logger.warning("Could not list remote sessions: %s", e)
        for interval in self.fallback.list_intervals():
            merged.setdefault(interval.id, interval)
        return sorted(merged.values(), key=lambda i: i.date)

    def clear(self) -> None:
        if self.primary_available:
            self.primary.clear()
        self.fallback.clear()

    def close(self) -> None:
        try:
            self.primary.close()
        finally:
            self.fallback.close()
