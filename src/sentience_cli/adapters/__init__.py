"""Session store adapters for Sentience CLI."""

from .background import BackgroundSessionStore
from .fallback import FallbackSessionStore
from .rest_api import RemoteSessionStore
from .sqlite_store import SqliteSessionStore

__all__ = [
    "BackgroundSessionStore",
    "FallbackSessionStore",
    "RemoteSessionStore",
    "SqliteSessionStore",
]
