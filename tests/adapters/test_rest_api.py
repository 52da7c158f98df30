"""Tests for the REST API session store, using httpx.MockTransport."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from sentience_cli.adapters.rest_api import RemoteSessionStore
from sentience_cli.models.focus.exceptions import NetworkError, PersistenceError
from tests.conftest import make_interval

UTC = timezone.utc
ENDPOINT = "http://api.test/api"


class FakeServer:
    """Minimal in-memory focus-sessions resource."""

    def __init__(self):
        self.records: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.next_id = 1
        self.fail_with: int | None = None
        self.healthy = True

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": "boom"})

        path = request.url.path
        if request.method == "GET" and path == "/api/health":
            return httpx.Response(200 if self.healthy else 503, json={"status": "ok"})
        if request.method == "GET" and path == "/api/focus-sessions":
            newest_first = sorted(self.records, key=lambda r: r["date"], reverse=True)
            return httpx.Response(200, json=newest_first)
        if request.method == "POST" and path == "/api/focus-sessions":
            record = {"_id": f"srv-{self.next_id}", **json.loads(request.content)}
            self.next_id += 1
            self.records.append(record)
            return httpx.Response(201, json=record)
        if request.method == "DELETE" and path.startswith("/api/focus-sessions/"):
            record_id = path.rsplit("/", 1)[-1]
            self.records = [r for r in self.records if r["_id"] != record_id]
            return httpx.Response(204)
        return httpx.Response(404)


@pytest.fixture()
def server():
    return FakeServer()


@pytest.fixture()
def store(server):
    client = httpx.Client(base_url=ENDPOINT, transport=httpx.MockTransport(server.handler))
    store = RemoteSessionStore(ENDPOINT, token="secret", client=client)
    yield store
    store.close()


class TestRemoteSessionStore:
    def test_append_posts_minutes(self, store, server):
        store.append(make_interval("work", 25, datetime(2024, 3, 13, 10, tzinfo=UTC)))
        [request] = server.requests
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {
            "date": "2024-03-13T10:00:00+00:00",
            "duration": 25,
            "type": "work",
        }

    def test_append_is_idempotent(self, store, server):
        interval = make_interval()
        store.append(interval)
        store.append(interval)
        assert len(server.records) == 1

    def test_list_returns_oldest_first(self, store):
        store.append(make_interval("work", 25, datetime(2024, 3, 13, 10, tzinfo=UTC)))
        store.append(make_interval("break", 5, datetime(2024, 3, 13, 11, tzinfo=UTC)))
        intervals = store.list_intervals()
        assert [i.type for i in intervals] == ["work", "break"]
        assert intervals[0].id == "srv-1"
        assert intervals[0].duration_seconds == 1500

    def test_clear_deletes_every_record(self, store, server):
        store.append(make_interval())
        store.append(make_interval())
        store.clear()
        assert server.records == []
        assert [r.method for r in server.requests].count("DELETE") == 2

    def test_http_error_becomes_persistence_error(self, store, server):
        server.fail_with = 500
        with pytest.raises(PersistenceError, match="500") as exc_info:
            store.append(make_interval())
        assert not isinstance(exc_info.value, NetworkError)

    def test_failed_append_can_be_retried(self, store, server):
        interval = make_interval()
        server.fail_with = 503
        with pytest.raises(PersistenceError):
            store.append(interval)
        server.fail_with = None
        store.append(interval)
        assert len(server.records) == 1

    def test_connect_error_becomes_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = httpx.Client(base_url=ENDPOINT, transport=httpx.MockTransport(handler))
        store = RemoteSessionStore(ENDPOINT, client=client)
        with pytest.raises(NetworkError, match="refused"):
            store.list_intervals()
        assert not store.is_available()

    def test_unexpected_payload(self):
        client = httpx.Client(
            base_url=ENDPOINT,
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"x": 1})),
        )
        with pytest.raises(PersistenceError):
            RemoteSessionStore(ENDPOINT, client=client).list_intervals()

    def test_malformed_record(self):
        client = httpx.Client(
            base_url=ENDPOINT,
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[{"_id": "1"}])),
        )
        with pytest.raises(PersistenceError):
            RemoteSessionStore(ENDPOINT, client=client).list_intervals()

    def test_no_auth_header_without_token(self, server):
        client = httpx.Client(base_url=ENDPOINT, transport=httpx.MockTransport(server.handler))
        RemoteSessionStore(ENDPOINT, client=client).list_intervals()
        assert "Authorization" not in server.requests[0].headers

    def test_health_check(self, store, server):
        assert store.is_available()
        assert server.requests[-1].url.path == "/api/health"
        server.healthy = False
        assert not store.is_available()
