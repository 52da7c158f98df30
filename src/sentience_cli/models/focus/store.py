"""Session store abstraction for completed focus intervals.

The store is an append-only log of FocusInterval records for one scope
(a user id or a device key). Statistics are derived from the log on demand.
Concrete backends live here (memory, JSON file) and in
``sentience_cli.adapters`` (SQLite, REST API).
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from .exceptions import PersistenceError
from .intervals import FocusInterval, parse_timestamp
from .stats import DEFAULT_WEEKLY_GOAL_MINUTES, FocusStats, compute_stats

DEFAULT_SCOPE = "device"


class SessionStore(ABC):
    """Abstract base class for focus interval persistence.

    Implementations must make ``append`` idempotent on the interval id and
    must raise PersistenceError for any read or write failure.
    """

    def __init__(self, scope: str = DEFAULT_SCOPE):
        self.scope = scope

    @abstractmethod
    def append(self, interval: FocusInterval) -> None:
        """Append an interval. Appending an id that already exists is a no-op."""

    @abstractmethod
    def list_intervals(self) -> list[FocusInterval]:
        """Return every interval of this scope in insertion order."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every interval of this scope."""

    def query_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[FocusInterval]:
        """Return intervals whose date falls in [start, end)."""
        start = parse_timestamp(start)
        end = parse_timestamp(end)
        return [i for i in self.list_intervals() if start <= i.date < end]

    def compute_stats(
        self,
        now: datetime | None = None,
        weekly_goal_minutes: int = DEFAULT_WEEKLY_GOAL_MINUTES,
    ) -> FocusStats:
        """Aggregate statistics recomputed from the stored log."""
        return compute_stats(
            self.list_intervals(), now=now, weekly_goal_minutes=weekly_goal_minutes
        )

    def flush(self) -> None:
        """Wait for writes that have been accepted but not yet stored."""

    def drain_failures(self) -> list[tuple[FocusInterval, Exception]]:
        """Appends that failed after ``append`` returned, oldest first.

        Stores that write synchronously raise from ``append`` instead and
        never have any.
        """
        return []

    def close(self) -> None:
        """Release any resources held by the store."""


class InMemorySessionStore(SessionStore):
    """Volatile store, used for ephemeral timers and tests."""

    def __init__(self, scope: str = DEFAULT_SCOPE):
        super().__init__(scope)
        self._intervals: dict[str, FocusInterval] = {}

    def append(self, interval: FocusInterval) -> None:
        if interval.id in self._intervals:
            return
        self._intervals[interval.id] = interval

    def list_intervals(self) -> list[FocusInterval]:
        return list(self._intervals.values())

    def clear(self) -> None:
        self._intervals.clear()


class JsonSessionStore(SessionStore):
    """Store backed by a JSON file.

    File layout: a mapping from scope key to the insertion-ordered list of
    interval records of that scope::

        {"device": [{"id": "...", "date": "...", "type": "work", ...}]}
    """

    def __init__(self, path: Path | None = None, scope: str = DEFAULT_SCOPE):
        super().__init__(scope)
        if path is None:
            from platformdirs import user_data_dir

            path = Path(user_data_dir("sentience_cli")) / "focus_sessions.json"

        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> dict[str, list[dict]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected layout in {self.path}")
        return data

    def _write_all(self, data: dict[str, list[dict]]) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".focus-", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            self.path.chmod(0o600)
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e

    def append(self, interval: FocusInterval) -> None:
        data = self._read_all()
        records = data.setdefault(self.scope, [])
        if any(r.get("id") == interval.id for r in records):
            return
        records.append(interval.to_dict())
        self._write_all(data)

    def list_intervals(self) -> list[FocusInterval]:
        records = self._read_all().get(self.scope, [])
        try:
            return [FocusInterval.from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Corrupt focus record in {self.path}: {e}") from e

    def clear(self) -> None:
        data = self._read_all()
        if self.scope in data:
            del data[self.scope]
            self._write_all(data)
