"""Logging configuration for exflock CLI.

The Launcher logs to the caller's terminal. The Holder's stderr is a log
file shared by every Holder that config points at it, so Holder records
are always timestamped and tagged with the Holder's PID.
"""

import logging
from enum import IntEnum
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

HOLDER_FORMAT = "[holder %(process)d] %(message)s"
# Keep Holder records on one line each in the log file
HOLDER_LOG_WIDTH = 200


class LogLevel(IntEnum):
    """Log level enumeration."""

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO | None = None,
    debug: bool = False,
    holder: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=normal, 1=verbose, 2+=debug with time/path)
        quiet: Suppress non-error output (takes precedence over debug/verbosity)
        no_color: Disable colored output
        stream: Output stream for logs (default: stderr at call time)
        debug: Same as verbosity 2, ignored if quiet is set
        holder: Configure for the background Holder (PID tag, timestamps)

    Returns:
        Configured Rich console for output

    Note:
        Flag precedence: quiet > debug > verbosity
    """
    if debug:
        verbosity = max(verbosity, 2)

    if quiet:
        level = LogLevel.QUIET
    elif verbosity >= 1:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    console = Console(
        file=stream,
        stderr=stream is None,
        force_terminal=not no_color,
        no_color=no_color,
        width=HOLDER_LOG_WIDTH if holder else None,
    )

    handler = RichHandler(
        console=console,
        show_time=holder or verbosity >= 2,
        show_path=verbosity >= 2,
    )

    logging.basicConfig(
        level=level,
        format=HOLDER_FORMAT if holder else "%(message)s",
        handlers=[handler],
        force=True,
    )

    return console
