"""REST API session store.

Talks to the Sentience backend ``focus-sessions`` resource:

    GET    {endpoint}/focus-sessions        list the user's sessions (newest first)
    POST   {endpoint}/focus-sessions        create {date, duration, type}
    DELETE {endpoint}/focus-sessions/{id}   delete one session
    GET    {endpoint}/health                liveness check

The server stores durations in whole minutes and assigns its own ``_id``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sentience_cli.models.focus.exceptions import NetworkError, PersistenceError
from sentience_cli.models.focus.intervals import FocusInterval, parse_timestamp
from sentience_cli.models.focus.store import DEFAULT_SCOPE, SessionStore

logger = logging.getLogger(__name__)

RESOURCE = "/focus-sessions"
HEALTH = "/health"


class RemoteSessionStore(SessionStore):
    """Session store backed by the Sentience REST API."""

    def __init__(
        self,
        endpoint: str,
        token: str | None = None,
        timeout: float = 30,
        scope: str = DEFAULT_SCOPE,
        client: httpx.Client | None = None,
    ):
        super().__init__(scope)
        self.endpoint = endpoint.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client = client
        # Local ids already submitted; the server assigns its own ids so
        # duplicate submissions are filtered here.
        self._submitted_ids: set[str] = set()

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.endpoint,
                timeout=self.timeout,
                follow_redirects=True,
            )
        self._client.headers.update(self._get_headers())
        return self._client

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._get_client().request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                f"{method} {url} failed with status {e.response.status_code}"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"{method} {url} failed: {e}") from e
        return response

    def is_available(self) -> bool:
        """Whether the server answers its health check."""
        try:
            response = self._get_client().get(HEALTH)
        except httpx.HTTPError as e:
            logger.debug("Health check against %s failed: %s", self.endpoint, e)
            return False
        return response.is_success

    def _record_to_interval(self, record: dict) -> FocusInterval:
        return FocusInterval(
            id=str(record["_id"]),
            scope=self.scope,
            date=parse_timestamp(record["date"]),
            duration_seconds=int(record["duration"]) * 60,
            type=record["type"],
        )

    def _fetch_records(self) -> list[dict]:
        data = self._request("GET", RESOURCE).json()
        if not isinstance(data, list):
            raise PersistenceError("Unexpected response listing focus sessions")
        return data

    def append(self, interval: FocusInterval) -> None:
        if interval.id in self._submitted_ids:
            return
        payload = {
            "date": interval.date.isoformat(),
            "duration": interval.duration_minutes,
            "type": interval.type,
        }
        self._request("POST", RESOURCE, json=payload)
        self._submitted_ids.add(interval.id)
        logger.debug("Saved %s interval %s to %s", interval.type, interval.id, self.endpoint)

    def list_intervals(self) -> list[FocusInterval]:
        records = self._fetch_records()
        try:
            intervals = [self._record_to_interval(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Malformed focus session from server: {e}") from e
        # Server returns newest first; the store contract is insertion order.
        return sorted(intervals, key=lambda i: i.date)

    def clear(self) -> None:
        for record in self._fetch_records():
            self._request("DELETE", f"{RESOURCE}/{record['_id']}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
