"""Build the session store and timer engine from configuration."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from sentience_cli.adapters.background import BackgroundSessionStore
from sentience_cli.adapters.fallback import FallbackSessionStore
from sentience_cli.adapters.rest_api import RemoteSessionStore
from sentience_cli.adapters.sqlite_store import SqliteSessionStore
from sentience_cli.models.config_models import AppConfig
from sentience_cli.models.focus.notifier import (
    CompositeNotifier,
    ConsoleNotifier,
    DesktopNotifier,
    Notifier,
)
from sentience_cli.models.focus.store import JsonSessionStore, SessionStore
from sentience_cli.models.focus.timer import TimerEngine


def build_session_store(config: AppConfig, data_dir: Path | None = None) -> SessionStore:
    """
    Create the session store selected by ``config.storage``.

    Args:
        config: Application configuration
        data_dir: Default directory for file-based stores

    Returns:
        A SessionStore; wrapped for background writes when configured
    """
    storage = config.storage
    path = Path(storage.path) if storage.path else None

    if storage.backend == "sqlite":
        if path is None and data_dir is not None:
            path = data_dir / "focus_sessions.db"
        store: SessionStore = SqliteSessionStore(db_path=path, scope=storage.scope)
    elif storage.backend in ("remote", "remote_fallback"):
        store = RemoteSessionStore(
            endpoint=config.api.endpoint,
            token=config.api.token,
            timeout=config.api.timeout,
            scope=storage.scope,
        )
        if storage.backend == "remote_fallback":
            if path is None and data_dir is not None:
                path = data_dir / "focus_sessions.json"
            store = FallbackSessionStore(
                store, JsonSessionStore(path=path, scope=storage.scope)
            )
    else:
        if path is None and data_dir is not None:
            path = data_dir / "focus_sessions.json"
        store = JsonSessionStore(path=path, scope=storage.scope)

    if storage.background_writes:
        return BackgroundSessionStore(store)
    return store


def build_notifier(config: AppConfig, console: Console | None = None) -> Notifier | None:
    """Notifier for the live timer, or None when notifications are off."""
    if not config.focus.notifications_enabled:
        return None

    notifiers: list[Notifier] = [
        ConsoleNotifier(
            console=console,
            sound_enabled=config.focus.sound_enabled,
            show_message=False,
        )
    ]
    desktop = DesktopNotifier()
    if desktop.available:
        notifiers.append(desktop)
    return CompositeNotifier(notifiers)


def build_engine(
    config: AppConfig,
    store: SessionStore | None = None,
    notifier: Notifier | None = None,
) -> TimerEngine:
    """Timer engine with the configured durations."""
    return TimerEngine(
        config=config.focus.to_timer_config(),
        store=store,
        notifier=notifier,
    )
