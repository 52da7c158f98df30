"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from sentience_cli.models.focus.intervals import FocusInterval


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path_factory):
    """Keep the rotating log file out of the real user log directory."""
    log_dir = str(tmp_path_factory.mktemp("logs"))
    with patch("sentience_cli.utils.logger.user_log_dir", return_value=log_dir):
        yield log_dir


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from sentience_cli.services.config_service import get_config_service

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    get_config_service.cache_clear()
    with patch("sentience_cli.services.config_service.user_config_dir", return_value=config_dir):
        with patch("sentience_cli.services.config_service.user_data_dir", return_value=data_dir):
            yield get_config_service()
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Interval helpers
# ---------------------------------------------------------------------------

UTC = timezone.utc


def make_interval(
    phase: str = "work",
    minutes: int = 25,
    date: datetime | None = None,
    interval_id: str | None = None,
    scope: str = "device",
) -> FocusInterval:
    """Build a completed interval without going through the engine."""
    interval = FocusInterval.create(
        phase=phase,
        duration_seconds=minutes * 60,
        scope=scope,
        date=date or datetime(2024, 3, 13, 10, 0, tzinfo=UTC),
    )
    if interval_id is None:
        return interval
    return FocusInterval(
        id=interval_id,
        scope=interval.scope,
        date=interval.date,
        duration_seconds=interval.duration_seconds,
        type=interval.type,
    )


@pytest.fixture()
def interval_factory():
    return make_interval


@pytest.fixture()
def fixed_clock():
    """A controllable clock for the timer engine, starting 2024-03-13 09:00 UTC."""

    class Clock:
        def __init__(self):
            self.now = datetime(2024, 3, 13, 9, 0, tzinfo=UTC)

        def __call__(self) -> datetime:
            return self.now

        def advance(self, seconds: int) -> None:
            self.now += timedelta(seconds=seconds)

    return Clock()
