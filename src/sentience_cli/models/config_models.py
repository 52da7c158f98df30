"""Configuration models for Sentience CLI.

Timer durations are validated here, at the boundary: out-of-range values are
rejected, never coerced.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, StrictInt, field_validator

from sentience_cli.models.focus.timer import TimerConfig


class FocusSettings(BaseModel):
    """Focus timer preferences."""

    work_minutes: StrictInt = Field(default=25, ge=1, le=120)
    break_minutes: StrictInt = Field(default=5, ge=1, le=60)
    sound_enabled: bool = Field(default=True)
    notifications_enabled: bool = Field(default=True)
    weekly_goal_minutes: StrictInt = Field(default=300, ge=0)

    def to_timer_config(self) -> TimerConfig:
        """Durations in the form the timer engine expects."""
        return TimerConfig.from_minutes(self.work_minutes, self.break_minutes)


class StorageSettings(BaseModel):
    """Where completed focus intervals are stored."""

    backend: Literal["json", "sqlite", "remote", "remote_fallback"] = Field(default="json")
    path: str | None = Field(
        default=None, description="File path for json, sqlite or the remote_fallback copy"
    )
    scope: str = Field(default="device", description="User id or device key")
    background_writes: bool = Field(
        default=False, description="Write intervals on a worker thread"
    )

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("scope cannot be empty")
        return v.strip()


class APIConfig(BaseModel):
    """REST API configuration (remote storage backend)."""

    endpoint: str = Field(default="http://localhost:8000/api")
    timeout: int = Field(default=30)
    token: str | None = Field(default=None)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["table", "json", "yaml"] = Field(default="table")
    color: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main Sentience configuration."""

    focus: FocusSettings = Field(default_factory=FocusSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APIConfig = Field(default_factory=APIConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
