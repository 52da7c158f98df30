"""Focus interval store with SQLite storage."""

import sqlite3
from datetime import datetime
from pathlib import Path

from sentience_cli.models.focus.exceptions import PersistenceError
from sentience_cli.models.focus.intervals import FocusInterval, parse_timestamp
from sentience_cli.models.focus.store import DEFAULT_SCOPE, SessionStore


class SqliteSessionStore(SessionStore):
    """Manages focus intervals in a SQLite database."""

    def __init__(self, db_path: Path | None = None, scope: str = DEFAULT_SCOPE):
        """Initialize the store and its schema."""
        super().__init__(scope)
        if db_path is None:
            from platformdirs import user_data_dir

            data_dir = Path(user_data_dir("sentience_cli"))
            db_path = data_dir / "focus_sessions.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS focus_intervals (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        id TEXT NOT NULL UNIQUE,
                        scope TEXT NOT NULL,
                        date TEXT NOT NULL,
                        duration_seconds INTEGER NOT NULL CHECK(duration_seconds > 0),
                        duration_minutes INTEGER NOT NULL,
                        type TEXT NOT NULL CHECK(type IN ('work', 'break'))
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_intervals_scope_date
                    ON focus_intervals(scope, date)
                    """
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open {self.db_path}: {e}") from e

    @staticmethod
    def _row_to_interval(row: sqlite3.Row) -> FocusInterval:
        return FocusInterval(
            id=row["id"],
            scope=row["scope"],
            date=parse_timestamp(row["date"]),
            duration_seconds=row["duration_seconds"],
            type=row["type"],
        )

    def append(self, interval: FocusInterval) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT OR IGNORE INTO focus_intervals (
                        id, scope, date, duration_seconds, duration_minutes, type
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        interval.id,
                        self.scope,
                        interval.date.isoformat(),
                        interval.duration_seconds,
                        interval.duration_minutes,
                        interval.type,
                    ),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not save interval {interval.id}: {e}") from e

    def list_intervals(self) -> list[FocusInterval]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM focus_intervals WHERE scope = ? ORDER BY seq",
                    (self.scope,),
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read intervals: {e}") from e
        return [self._row_to_interval(row) for row in rows]

    def clear(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM focus_intervals WHERE scope = ?", (self.scope,)
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not clear intervals: {e}") from e

    def delete_older_than(self, cutoff: datetime) -> int:
        """
        Delete intervals completed before ``cutoff``.

        Returns:
            Number of intervals deleted
        """
        cutoff = parse_timestamp(cutoff)
        stale = [i.id for i in self.list_intervals() if i.date < cutoff]
        if not stale:
            return 0
        try:
            with self._connect() as conn:
                conn.executemany(
                    "DELETE FROM focus_intervals WHERE id = ?", [(i,) for i in stale]
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not prune intervals: {e}") from e
        return len(stale)
