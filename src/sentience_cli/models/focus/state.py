"""Timer state persistence between CLI invocations."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .timer import TimerEngine


class TimerStateManager:
    """Saves and restores the engine's countdown and counters."""

    def __init__(self, state_dir: Path | None = None):
        """Initialize state manager."""
        if state_dir is None:
            from platformdirs import user_data_dir

            state_dir = Path(user_data_dir("sentience_cli")) / "state"

        self.state_dir = state_dir
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.state_file = self.state_dir / "timer_state.json"

    def save(self, engine: TimerEngine) -> None:
        """Save engine state to file."""
        data = engine.to_dict()
        data["saved_at"] = datetime.now().astimezone().isoformat()
        with open(self.state_file, "w") as f:
            json.dump(data, f, indent=2)

        # Set secure permissions
        self.state_file.chmod(0o600)

    def load(self) -> dict[str, Any] | None:
        """Load saved state. Returns None if file missing or invalid."""
        if not self.state_file.exists():
            return None

        try:
            with open(self.state_file) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError):
            return None
        return data if isinstance(data, dict) else None

    def restore_into(self, engine: TimerEngine) -> bool:
        """Restore saved state into ``engine``. Returns False if nothing usable was saved."""
        data = self.load()
        if data is None:
            return False
        try:
            engine.restore(data)
        except (TypeError, ValueError):
            return False
        return True

    def delete(self) -> None:
        """Delete saved state."""
        if self.state_file.exists():
            self.state_file.unlink()
