"""Tests for the host-owned tick source."""

from __future__ import annotations

import pytest

from sentience_cli.models.focus.ticker import Ticker


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


class TestTicker:
    def test_paused_by_default(self, clock):
        ticker = Ticker(clock=clock)
        clock.now += 5
        assert ticker.running is False
        assert ticker.poll() == 0

    def test_counts_whole_seconds(self, clock):
        ticker = Ticker(clock=clock)
        ticker.resume()
        clock.now += 0.6
        assert ticker.poll() == 0
        clock.now += 0.6
        assert ticker.poll() == 1
        clock.now += 2.9
        assert ticker.poll() == 3

    def test_slow_frame_does_not_lose_time(self, clock):
        ticker = Ticker(clock=clock)
        ticker.resume()
        total = 0
        for step in (0.25, 0.75, 1.5, 0.5, 2.0):
            clock.now += step
            total += ticker.poll()
        assert total == 5

    def test_pause_discards_partial_second(self, clock):
        ticker = Ticker(clock=clock)
        ticker.resume()
        clock.now += 0.8
        ticker.pause()
        ticker.resume()
        clock.now += 0.5
        assert ticker.poll() == 0

    def test_resume_is_idempotent(self, clock):
        ticker = Ticker(clock=clock)
        ticker.resume()
        clock.now += 0.7
        ticker.resume()
        clock.now += 0.5
        assert ticker.poll() == 1

    def test_seconds_until_next(self, clock):
        ticker = Ticker(clock=clock)
        assert ticker.seconds_until_next() == 1.0
        ticker.resume()
        clock.now += 0.25
        assert ticker.seconds_until_next() == pytest.approx(0.75)

    def test_closed_ticker_rejects_use(self, clock):
        ticker = Ticker(clock=clock)
        ticker.close()
        ticker.close()
        assert ticker.closed
        with pytest.raises(RuntimeError):
            ticker.poll()
        with pytest.raises(RuntimeError):
            ticker.resume()

    def test_context_manager_closes(self, clock):
        with Ticker(clock=clock) as ticker:
            ticker.resume()
        assert ticker.closed
        assert ticker.running is False
