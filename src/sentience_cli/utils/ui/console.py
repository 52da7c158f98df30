"""Shared Rich consoles for command output."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(color: bool = True) -> Console:
    """Console used by commands; ``color=False`` honours ``output.color = false``.

    Automatic highlighting is off so countdowns and counters keep the styles
    the timer gives them.
    """
    return Console(highlight=False, no_color=not color)
