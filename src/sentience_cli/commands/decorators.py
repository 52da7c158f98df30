"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from sentience_cli.models.focus.exceptions import (
    ConfigurationError,
    NetworkError,
    PersistenceError,
)
from sentience_cli.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NETWORK,
    ERROR_PERSISTENCE,
    get_exit_code_name,
)
from sentience_cli.utils.logger import get_logger
from sentience_cli.utils.ui.formatters import format_error


def command_wrapper(func: Callable) -> Callable:
    """Log a command's lifecycle and turn known errors into semantic exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger("commands")
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            logger.info("command completed: %s (%.3fs)", cmd, time.monotonic() - start)
            return result

        except typer.Exit:
            # Re-raise Typer's own exits (like --help or explicit Exit(0))
            raise

        except ConfigurationError as e:
            logger.warning(
                "command rejected: %s [%s] - %s", cmd, get_exit_code_name(ERROR_INVALID_ARGS), e
            )
            format_error(f"Invalid settings: {e}")
            raise typer.Exit(code=ERROR_INVALID_ARGS) from e

        except NetworkError as e:
            logger.error("command failed: %s [%s] - %s", cmd, get_exit_code_name(ERROR_NETWORK), e)
            format_error(f"Focus server unreachable: {e}")
            raise typer.Exit(code=ERROR_NETWORK) from e

        except PersistenceError as e:
            logger.error(
                "command failed: %s [%s] - %s", cmd, get_exit_code_name(ERROR_PERSISTENCE), e
            )
            format_error(f"Focus history unavailable: {e}")
            raise typer.Exit(code=ERROR_PERSISTENCE) from e

        except Exception as e:
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                time.monotonic() - start,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=ERROR_GENERAL) from e

    return wrapper
