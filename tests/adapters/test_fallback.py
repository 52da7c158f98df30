"""Tests for the remote store with a local JSON fallback."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from sentience_cli.adapters.fallback import FallbackSessionStore
from sentience_cli.adapters.rest_api import RemoteSessionStore
from sentience_cli.models.focus.store import JsonSessionStore
from tests.adapters.test_rest_api import ENDPOINT, FakeServer
from tests.conftest import make_interval

UTC = timezone.utc


@pytest.fixture()
def server():
    return FakeServer()


@pytest.fixture()
def local(tmp_path):
    return JsonSessionStore(path=tmp_path / "focus_sessions.json", scope="user-1")


def _store(handler, local) -> FallbackSessionStore:
    client = httpx.Client(base_url=ENDPOINT, transport=httpx.MockTransport(handler))
    remote = RemoteSessionStore(ENDPOINT, client=client, scope="user-1")
    return FallbackSessionStore(remote, local)


def _unreachable(request):
    raise httpx.ConnectError("connection refused", request=request)


class TestFallbackSessionStore:
    def test_writes_to_server_when_healthy(self, server, local):
        store = _store(server.handler, local)
        store.append(make_interval())
        assert len(server.records) == 1
        assert local.list_intervals() == []
        assert store.scope == "user-1"

    def test_unreachable_server_writes_locally(self, local):
        store = _store(_unreachable, local)
        interval = make_interval()
        store.append(interval)
        assert [i.id for i in local.list_intervals()] == [interval.id]
        assert store.primary_available is False

    def test_failed_health_check_skips_server(self, server, local):
        server.healthy = False
        store = _store(server.handler, local)
        store.append(make_interval())
        assert server.records == []
        assert len(local.list_intervals()) == 1
        assert [r.url.path for r in server.requests] == ["/api/health"]

    def test_failed_remote_write_falls_back_and_sticks(self, server, local):
        store = _store(server.handler, local)
        assert store.primary_available
        server.fail_with = 503
        store.append(make_interval())
        server.fail_with = None
        store.append(make_interval())

        assert server.records == []
        assert len(local.list_intervals()) == 2

    def test_list_merges_both_stores_by_date(self, server, local):
        local.append(make_interval("break", 5, datetime(2024, 3, 13, 11, tzinfo=UTC)))
        store = _store(server.handler, local)
        store.append(make_interval("work", 25, datetime(2024, 3, 13, 10, tzinfo=UTC)))

        intervals = store.list_intervals()
        assert [i.type for i in intervals] == ["work", "break"]

    def test_list_uses_local_copy_when_server_list_fails(self, server, local):
        local.append(make_interval())
        store = _store(server.handler, local)
        assert store.primary_available
        server.fail_with = 500
        assert len(store.list_intervals()) == 1

    def test_clear_clears_both(self, server, local):
        local.append(make_interval())
        store = _store(server.handler, local)
        store.append(make_interval())
        store.clear()
        assert server.records == []
        assert local.list_intervals() == []

    def test_compute_stats_counts_local_sessions_offline(self, local):
        store = _store(_unreachable, local)
        now = datetime(2024, 3, 13, 12, tzinfo=UTC)
        store.append(make_interval("work", 25, datetime(2024, 3, 13, 10, tzinfo=UTC)))
        stats = store.compute_stats(now=now)
        assert stats.total_sessions == 1
