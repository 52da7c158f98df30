"""Phase-completion notifications (terminal bell, desktop notification)."""

import platform
import shutil
import subprocess
from abc import ABC, abstractmethod

from rich.console import Console

from .events import PhaseCompletedEvent
from .exceptions import NotifierError

MESSAGES = {
    "work": ("Focus Session Complete!", "Time for a break. Great work!"),
    "break": ("Break Complete!", "Time to get back to work!"),
}


def completion_message(event: PhaseCompletedEvent) -> tuple[str, str]:
    """Title and body for a completed phase."""
    return MESSAGES[event.phase]


class Notifier(ABC):
    """Side channel told about every completed phase.

    Implementations raise NotifierError on failure; the timer engine
    swallows it.
    """

    @abstractmethod
    def notify(self, event: PhaseCompletedEvent) -> None:
        """Deliver a notification for a completed phase."""


class ConsoleNotifier(Notifier):
    """Ring the terminal bell and print a one-line message.

    The live timer renders its own completion notice, so it passes
    ``show_message=False`` and only uses the bell.
    """

    def __init__(
        self,
        console: Console | None = None,
        sound_enabled: bool = True,
        show_message: bool = True,
    ):
        self.console = console or Console()
        self.sound_enabled = sound_enabled
        self.show_message = show_message

    def notify(self, event: PhaseCompletedEvent) -> None:
        title, body = completion_message(event)
        color = "green" if event.phase == "work" else "cyan"
        try:
            if self.show_message:
                self.console.print(f"[bold {color}]{title}[/bold {color}] {body}")
            if self.sound_enabled:
                self.console.bell()
        except Exception as e:
            raise NotifierError(f"Console notification failed: {e}") from e


class DesktopNotifier(Notifier):
    """Desktop notification via notify-send (Linux) or osascript (macOS)."""

    def __init__(self):
        system = platform.system()
        if system == "Darwin":
            self.command = shutil.which("osascript")
        else:
            self.command = shutil.which("notify-send")
        self.system = system

    @property
    def available(self) -> bool:
        return self.command is not None

    def _build_args(self, title: str, body: str) -> list[str]:
        if self.system == "Darwin":
            script = f'display notification "{body}" with title "{title}"'
            return [self.command, "-e", script]
        return [self.command, "--app-name=Sentience", title, body]

    def notify(self, event: PhaseCompletedEvent) -> None:
        if not self.available:
            raise NotifierError("No desktop notification command available")
        title, body = completion_message(event)
        try:
            subprocess.run(
                self._build_args(title, body),
                check=True,
                capture_output=True,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise NotifierError(f"Desktop notification failed: {e}") from e


class CompositeNotifier(Notifier):
    """Fan a notification out to several notifiers.

    Every notifier is tried; the first failure is re-raised afterwards.
    """

    def __init__(self, notifiers: list[Notifier]):
        self.notifiers = notifiers

    def notify(self, event: PhaseCompletedEvent) -> None:
        first_error: NotifierError | None = None
        for notifier in self.notifiers:
            try:
                notifier.notify(event)
            except NotifierError as e:
                first_error = first_error or e
        if first_error is not None:
            raise first_error
