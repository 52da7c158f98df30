"""Tests for the SQLite session store."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from sentience_cli.adapters.sqlite_store import SqliteSessionStore
from sentience_cli.models.focus.exceptions import PersistenceError
from tests.conftest import make_interval

UTC = timezone.utc


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "focus.db"


class TestSqliteSessionStore:
    def test_schema_created(self, db_path):
        SqliteSessionStore(db_path=db_path)
        with sqlite3.connect(db_path) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert "focus_intervals" in tables

    def test_append_and_list(self, db_path):
        store = SqliteSessionStore(db_path=db_path)
        work = make_interval("work", 25, datetime(2024, 3, 13, 11, tzinfo=UTC))
        brk = make_interval("break", 5, datetime(2024, 3, 13, 10, tzinfo=UTC))
        store.append(work)
        store.append(brk)
        assert store.list_intervals() == [work, brk]

    def test_append_is_idempotent(self, db_path):
        store = SqliteSessionStore(db_path=db_path)
        interval = make_interval()
        store.append(interval)
        store.append(interval)
        assert len(store.list_intervals()) == 1

    def test_persists_across_instances(self, db_path):
        interval = make_interval()
        SqliteSessionStore(db_path=db_path).append(interval)
        assert SqliteSessionStore(db_path=db_path).list_intervals() == [interval]

    def test_stores_minutes_alongside_seconds(self, db_path):
        SqliteSessionStore(db_path=db_path).append(make_interval("work", 25))
        with sqlite3.connect(db_path) as conn:
            row = conn.execute(
                "SELECT duration_seconds, duration_minutes FROM focus_intervals"
            ).fetchone()
        assert row == (1500, 25)

    def test_scopes_are_isolated(self, db_path):
        alice = SqliteSessionStore(db_path=db_path, scope="alice")
        bob = SqliteSessionStore(db_path=db_path, scope="bob")
        alice.append(make_interval(scope="alice"))
        bob.append(make_interval(scope="bob"))
        alice.clear()
        assert alice.list_intervals() == []
        assert len(bob.list_intervals()) == 1

    def test_query_by_date_range(self, db_path):
        store = SqliteSessionStore(db_path=db_path)
        inside = make_interval(date=datetime(2024, 3, 12, tzinfo=UTC))
        outside = make_interval(date=datetime(2024, 3, 1, tzinfo=UTC))
        store.append(inside)
        store.append(outside)
        result = store.query_by_date_range(
            datetime(2024, 3, 10, tzinfo=UTC), datetime(2024, 3, 17, tzinfo=UTC)
        )
        assert result == [inside]

    def test_delete_older_than(self, db_path):
        store = SqliteSessionStore(db_path=db_path)
        old = make_interval(date=datetime(2023, 1, 1, tzinfo=UTC))
        recent = make_interval(date=datetime(2024, 3, 12, tzinfo=UTC))
        store.append(old)
        store.append(recent)
        assert store.delete_older_than(datetime(2024, 1, 1, tzinfo=UTC)) == 1
        assert store.list_intervals() == [recent]
        assert store.delete_older_than(datetime(2024, 1, 1, tzinfo=UTC)) == 0

    def test_unreadable_database_raises(self, tmp_path):
        bad = tmp_path / "not-a-db"
        bad.write_bytes(b"this is not sqlite" * 100)
        with pytest.raises(PersistenceError):
            SqliteSessionStore(db_path=bad)
