"""Focus mode - Pomodoro timer engine and focus session storage."""

from .events import (
    PersistenceFailedEvent,
    PhaseCompletedEvent,
    SettingsRejectedEvent,
    TickEvent,
)
from .exceptions import ConfigurationError, FocusError, NotifierError, PersistenceError
from .intervals import FocusInterval, Phase
from .stats import FocusStats, compute_stats
from .store import InMemorySessionStore, JsonSessionStore, SessionStore
from .ticker import Ticker
from .timer import TimerConfig, TimerEngine, TimerState

__all__ = [
    "ConfigurationError",
    "FocusError",
    "FocusInterval",
    "FocusStats",
    "InMemorySessionStore",
    "JsonSessionStore",
    "NotifierError",
    "PersistenceError",
    "PersistenceFailedEvent",
    "Phase",
    "PhaseCompletedEvent",
    "SessionStore",
    "SettingsRejectedEvent",
    "TickEvent",
    "Ticker",
    "TimerConfig",
    "TimerEngine",
    "TimerState",
    "compute_stats",
]
