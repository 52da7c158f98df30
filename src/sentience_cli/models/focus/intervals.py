"""Completed focus/break intervals - the persisted record of the timer."""

import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

Phase = Literal["work", "break"]

PHASES: tuple[Phase, ...] = ("work", "break")


@dataclass(frozen=True)
class FocusInterval:
    """One completed, immutable Work or Break phase."""

    id: str
    scope: str
    date: datetime  # timezone-aware completion time
    duration_seconds: int
    type: Phase

    def __post_init__(self):
        if self.duration_seconds <= 0:
            raise ValueError("duration_seconds must be positive")
        if self.type not in PHASES:
            raise ValueError(f"Unknown interval type: {self.type!r}")

    @property
    def duration_minutes(self) -> int:
        """Duration rounded up to whole minutes (never zero)."""
        return max(1, math.ceil(self.duration_seconds / 60))

    @property
    def is_work(self) -> bool:
        return self.type == "work"

    def to_dict(self) -> dict:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "id": self.id,
            "scope": self.scope,
            "date": self.date.isoformat(),
            "duration_seconds": self.duration_seconds,
            "duration_minutes": self.duration_minutes,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FocusInterval":
        """Create from dictionary.

        Records written with only ``duration_minutes`` (as the web client did)
        are accepted and converted to seconds.
        """
        seconds = data.get("duration_seconds")
        if seconds is None:
            seconds = int(data["duration_minutes"]) * 60
        return cls(
            id=str(data["id"]),
            scope=data.get("scope", "device"),
            date=parse_timestamp(data["date"]),
            duration_seconds=int(seconds),
            type=data["type"],
        )

    @staticmethod
    def create(
        phase: Phase,
        duration_seconds: int,
        scope: str = "device",
        date: datetime | None = None,
    ) -> "FocusInterval":
        """Create a new interval with a fresh id, completed now."""
        return FocusInterval(
            id=str(uuid.uuid4()),
            scope=scope,
            date=date or datetime.now().astimezone(),
            duration_seconds=duration_seconds,
            type=phase,
        )


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO 8601 timestamp into an aware datetime (local tz if naive)."""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt
