"""Pomodoro timer engine: alternating Work and Break phases.

The engine is driven by its host: the host calls ``tick()`` once per elapsed
second while the timer is running (see ``ticker.Ticker``) and renders
``get_snapshot()``. Every completed phase is appended to the session store
exactly once and the engine automatically continues into the next phase.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Literal, NoReturn

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from .events import (
    PersistenceFailedEvent,
    PhaseCompletedEvent,
    SettingsRejectedEvent,
    TickEvent,
    TimerEvent,
)
from .exceptions import ConfigurationError
from .intervals import PHASES, FocusInterval, Phase
from .notifier import Notifier
from .store import DEFAULT_SCOPE, SessionStore

logger = logging.getLogger(__name__)

TimerStatus = Literal["idle", "running", "paused"]
Listener = Callable[[TimerEvent], None]


class TimerConfig(BaseModel):
    """Validated work/break durations, in seconds."""

    model_config = ConfigDict(frozen=True)

    work_duration_seconds: StrictInt = Field(default=25 * 60, gt=0)
    break_duration_seconds: StrictInt = Field(default=5 * 60, gt=0)

    def duration_for(self, phase: Phase) -> int:
        """Configured duration of a phase."""
        if phase == "work":
            return self.work_duration_seconds
        return self.break_duration_seconds

    @classmethod
    def from_minutes(cls, work_minutes: int, break_minutes: int) -> "TimerConfig":
        """Build a config from minute values, raising ConfigurationError if invalid."""
        try:
            return cls(
                work_duration_seconds=work_minutes * 60,
                break_duration_seconds=break_minutes * 60,
            )
        except ValidationError as e:
            raise ConfigurationError(_describe_validation_error(e)) from e


@dataclass(frozen=True)
class TimerState:
    """Read-only snapshot of the engine."""

    phase: Phase
    remaining_seconds: int
    is_active: bool
    sessions_completed: int
    total_focus_seconds: int
    status: TimerStatus = "idle"
    phase_duration_seconds: int = 0

    @property
    def elapsed_seconds(self) -> int:
        return self.phase_duration_seconds - self.remaining_seconds

    @property
    def progress(self) -> float:
        """Fraction of the current phase already elapsed (0.0 - 1.0)."""
        if self.phase_duration_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, self.elapsed_seconds / self.phase_duration_seconds))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "config"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


class TimerEngine:
    """Countdown through alternating Work/Break phases.

    State machine::

        idle --start--> running --pause--> paused --start--> running
        any  --reset--> idle (phase=work, counters kept)

    All calls are expected from a single thread; listeners are invoked
    synchronously in the order events occur.
    """

    def __init__(
        self,
        config: TimerConfig | None = None,
        store: SessionStore | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._config = config or TimerConfig()
        self._store = store
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._listeners: list[Listener] = []

        self._status: TimerStatus = "idle"
        self._phase: Phase = "work"
        self._phase_duration = self._config.work_duration_seconds
        self._remaining = self._phase_duration
        self._sessions_completed = 0
        self._total_focus_seconds = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status == "running"

    @property
    def scope(self) -> str:
        return self._store.scope if self._store is not None else DEFAULT_SCOPE

    def get_snapshot(self) -> TimerState:
        """Return a read-only copy of the current state."""
        return TimerState(
            phase=self._phase,
            remaining_seconds=self._remaining,
            is_active=self._status == "running",
            sessions_completed=self._sessions_completed,
            total_focus_seconds=self._total_focus_seconds,
            status=self._status,
            phase_duration_seconds=self._phase_duration,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register an event listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start or resume the countdown. No-op when already running."""
        if self._status == "running":
            return
        logger.debug(
            "Timer %s -> running (%s, %ss left)", self._status, self._phase, self._remaining
        )
        self._status = "running"

    def pause(self) -> None:
        """Pause a running countdown, keeping the remaining time."""
        if self._status != "running":
            return
        logger.debug("Timer paused (%s, %ss left)", self._phase, self._remaining)
        self._status = "paused"

    def reset(self) -> None:
        """Return to idle at the start of a Work phase. Counters are kept."""
        self._status = "idle"
        self._phase = "work"
        self._phase_duration = self._config.work_duration_seconds
        self._remaining = self._phase_duration
        logger.debug("Timer reset")

    def apply_settings(self, config: TimerConfig | Mapping[str, Any]) -> TimerConfig:
        """
        Replace the work/break durations.

        When idle the countdown is reset to the new duration immediately;
        otherwise the current phase keeps its length and the new durations
        apply from the next phase transition.

        Raises:
            ConfigurationError: A duration is missing or not a positive integer.
                Config and state are left unchanged.
        """
        data = config.model_dump() if isinstance(config, TimerConfig) else dict(config)
        missing = [name for name in TimerConfig.model_fields if name not in data]
        if missing:
            self._reject(f"{', '.join(missing)}: Field required")
        try:
            new_config = TimerConfig.model_validate(data)
        except ValidationError as e:
            self._reject(_describe_validation_error(e), e)

        self._config = new_config
        if self._status == "idle":
            self._phase_duration = new_config.duration_for(self._phase)
            self._remaining = self._phase_duration
        logger.debug(
            "Applied settings work=%ss break=%ss",
            new_config.work_duration_seconds,
            new_config.break_duration_seconds,
        )
        return new_config

    def _reject(self, reason: str, cause: Exception | None = None) -> NoReturn:
        logger.warning("Rejected timer settings: %s", reason)
        self._emit(SettingsRejectedEvent(reason=reason))
        raise ConfigurationError(reason) from cause

    def tick(self) -> TimerState:
        """Advance the countdown by one second. No-op unless running.

        Background write failures reported by the store since the last call
        are emitted first, as PersistenceFailedEvent.
        """
        self.report_store_failures()
        if self._status != "running":
            return self.get_snapshot()

        self._remaining = max(0, self._remaining - 1)
        self._emit(TickEvent(phase=self._phase, remaining_seconds=self._remaining))
        if self._remaining == 0:
            self._complete_phase()
        return self.get_snapshot()

    # ------------------------------------------------------------------
    # Phase completion
    # ------------------------------------------------------------------

    def _complete_phase(self) -> None:
        finished = self._phase
        next_phase: Phase = "break" if finished == "work" else "work"
        is_work = finished == "work"
        interval = FocusInterval.create(
            phase=finished,
            duration_seconds=self._phase_duration,
            scope=self.scope,
            date=self._clock(),
        )
        event = PhaseCompletedEvent(
            interval=interval,
            next_phase=next_phase,
            sessions_completed=self._sessions_completed + int(is_work),
        )

        # Listeners see the finished phase at 0 before the store is touched.
        self._emit(event)
        self._persist(interval)

        if is_work:
            self._sessions_completed += 1
            self._total_focus_seconds += self._phase_duration
        self._phase = next_phase
        self._phase_duration = self._config.duration_for(next_phase)
        self._remaining = self._phase_duration
        logger.debug("%s phase complete, starting %s", finished, next_phase)

        self._notify(event)

    def _persist(self, interval: FocusInterval) -> None:
        # Single attempt: a retry after a partial failure could duplicate records.
        if self._store is None:
            return
        try:
            self._store.append(interval)
        except Exception as e:
            logger.error("Could not save %s interval %s: %s", interval.type, interval.id, e)
            self._emit(PersistenceFailedEvent(interval=interval, reason=str(e)))

    def report_store_failures(self) -> int:
        """Emit PersistenceFailedEvent for writes the store failed after accepting.

        Returns the number of failures reported.
        """
        if self._store is None:
            return 0
        failures = self._store.drain_failures()
        for interval, error in failures:
            self._emit(PersistenceFailedEvent(interval=interval, reason=str(error)))
        return len(failures)

    def sync_store(self) -> int:
        """Wait for pending writes, then report any that failed."""
        if self._store is None:
            return 0
        self._store.flush()
        return self.report_store_failures()

    def _notify(self, event: PhaseCompletedEvent) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(event)
        except Exception as e:
            logger.debug("Notifier failed: %s", e)

    def _emit(self, event: TimerEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Timer listener raised on %s", type(event).__name__)

    # ------------------------------------------------------------------
    # Persistence of the timer itself
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialisable state, for resuming the timer in a later process."""
        return {
            "phase": self._phase,
            "remaining_seconds": self._remaining,
            "phase_duration_seconds": self._phase_duration,
            "status": self._status,
            "sessions_completed": self._sessions_completed,
            "total_focus_seconds": self._total_focus_seconds,
        }

    def restore(self, data: Mapping[str, Any]) -> None:
        """
        Restore state saved by ``to_dict``.

        A timer saved while running comes back paused; the host decides
        when to start it again.

        Raises:
            ValueError: The saved state is inconsistent.
        """
        phase = data.get("phase")
        if phase not in PHASES:
            raise ValueError(f"Unknown phase: {phase!r}")
        phase_duration = int(data.get("phase_duration_seconds", 0))
        remaining = int(data.get("remaining_seconds", -1))
        sessions = int(data.get("sessions_completed", 0))
        focus_seconds = int(data.get("total_focus_seconds", 0))
        if phase_duration <= 0 or not 0 < remaining <= phase_duration:
            raise ValueError("Saved countdown is out of range")
        if sessions < 0 or focus_seconds < 0:
            raise ValueError("Saved counters must be non-negative")

        status = data.get("status", "idle")
        if status == "running":
            status = "paused"
        elif status not in ("idle", "paused"):
            raise ValueError(f"Unknown status: {status!r}")

        self._phase = phase
        self._phase_duration = phase_duration
        self._remaining = remaining
        self._status = status
        self._sessions_completed = sessions
        self._total_focus_seconds = focus_seconds
