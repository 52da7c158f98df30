"""Custom exceptions for focus mode."""


class FocusError(Exception):
    """Base exception for all focus mode errors."""


class ConfigurationError(FocusError):
    """Raised when timer settings are invalid (e.g. a non-positive duration)."""


class PersistenceError(FocusError):
    """Raised when a session store cannot read or write focus intervals."""


class NetworkError(PersistenceError):
    """Raised when a remote session store cannot be reached."""


class NotifierError(FocusError):
    """Raised when a phase-completion notification cannot be delivered."""
