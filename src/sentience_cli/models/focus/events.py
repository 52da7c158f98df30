"""Events emitted by the timer engine to its host."""

from dataclasses import dataclass

from .intervals import FocusInterval, Phase


@dataclass(frozen=True)
class TickEvent:
    """One second elapsed on a running timer."""

    phase: Phase
    remaining_seconds: int


@dataclass(frozen=True)
class PhaseCompletedEvent:
    """A phase counted down to zero; the engine continues with ``next_phase``."""

    interval: FocusInterval
    next_phase: Phase
    sessions_completed: int

    @property
    def phase(self) -> Phase:
        return self.interval.type


@dataclass(frozen=True)
class SettingsRejectedEvent:
    """apply_settings() was called with invalid durations."""

    reason: str


@dataclass(frozen=True)
class PersistenceFailedEvent:
    """A completed interval could not be saved. The timer kept going."""

    interval: FocusInterval
    reason: str


TimerEvent = TickEvent | PhaseCompletedEvent | SettingsRejectedEvent | PersistenceFailedEvent
