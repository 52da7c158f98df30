"""Configuration service for managing Sentience CLI configuration.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and saving config.json under the platform config directory
- Dot-notation get/set/reset of individual settings
- Validation of every change through the Pydantic models
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from sentience_cli.models.config_models import AppConfig
from sentience_cli.models.focus.exceptions import ConfigurationError


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("sentience_cli"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("sentience_cli"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run: write the defaults
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (None if unknown)."""
        value: Any = self.config
        for k in key.split("."):
            if not isinstance(value, BaseModel) or k not in type(value).model_fields:
                return None
            value = getattr(value, k)
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by dot-separated key and save.

        Raises:
            ConfigurationError: Unknown key or a value the models reject.
        """
        if not self.has_key(key):
            raise ConfigurationError(f"Unknown configuration key '{key}'")

        keys = key.split(".")
        config_dict = self.config.model_dump()
        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        try:
            self._config = AppConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid value for '{key}': {e}") from e
        self.save_config()

    def has_key(self, key: str) -> bool:
        """Whether a dot-separated key names a configuration field."""
        *parents, leaf = key.split(".")
        model: Any = self.config
        for k in parents:
            if not isinstance(model, BaseModel) or k not in type(model).model_fields:
                return False
            model = getattr(model, k)
        return isinstance(model, BaseModel) and leaf in type(model).model_fields

    def reset(self, key: str | None = None) -> None:
        """Reset the whole configuration, or one key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        default_value: Any = AppConfig()
        for k in key.split("."):
            if not isinstance(default_value, BaseModel):
                raise ConfigurationError(f"Unknown configuration key '{key}'")
            default_value = getattr(default_value, k, None)
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        self.set(key, default_value)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get the cached ConfigService instance."""
    return ConfigService()
