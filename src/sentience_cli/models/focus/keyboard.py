"""Non-blocking single-key input for the live timer."""

import sys

KEY_ACTIONS = {
    " ": "toggle",
    "s": "start",
    "p": "pause",
    "r": "reset",
    "q": "quit",
}


class KeyboardHandler:
    """Reads single keypresses without blocking the render loop.

    Puts a POSIX terminal into cbreak mode and restores it on ``stop()``;
    falls back to msvcrt on Windows. When stdin is not a terminal no keys
    are ever reported.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._old_settings = None
        self._msvcrt = None
        self._setup()

    def _setup(self) -> None:
        if sys.platform == "win32":
            import msvcrt

            self._msvcrt = msvcrt
            return
        if not self.stream.isatty():
            return

        import termios
        import tty

        fd = self.stream.fileno()
        self._old_settings = termios.tcgetattr(fd)
        tty.setcbreak(fd)

    def get_key(self) -> str | None:
        """Return the pressed key (lower-cased) or None."""
        if self._msvcrt is not None:
            if not self._msvcrt.kbhit():
                return None
            key = self._msvcrt.getch()
            return key.decode("utf-8", errors="ignore").lower()

        if self._old_settings is None:
            return None

        import select

        if select.select([self.stream], [], [], 0)[0]:
            return self.stream.read(1).lower()
        return None

    def get_action(self) -> str | None:
        """Map the pressed key to a timer action (see KEY_ACTIONS)."""
        key = self.get_key()
        if key is None:
            return None
        return KEY_ACTIONS.get(key)

    def stop(self) -> None:
        """Restore terminal settings."""
        if self._old_settings is None:
            return
        import termios

        termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._old_settings)
        self._old_settings = None
