"""Explicit release and status queries for detached locks.

A Holder identity that no longer exists means the lock is already
released; that is an answer, not an error.
"""

import logging

from ..errors import UsageError
from ..services import is_pid_running, process_cmdline, terminate, wait_for_exit

logger = logging.getLogger(__name__)


def is_holder(pid: int) -> bool:
    """Check whether pid is a running exflock Holder."""
    cmdline = process_cmdline(pid)
    return "exflock" in cmdline and "hold" in cmdline


def is_held(pid: int) -> bool:
    """Return True while the Holder pid is alive, i.e. the lock is still held."""
    return is_pid_running(pid) and is_holder(pid)


def release(pid: int, timeout: float) -> bool:
    """Ask the Holder pid to release its lock and wait for it to exit.

    Args:
        pid: Holder identity printed by ``exflock acquire``
        timeout: Seconds to wait for the Holder to exit

    Returns:
        True if the lock is released (including when it already was),
        False if the Holder is still running after timeout

    Raises:
        UsageError: If pid is a running process that is not a Holder
    """
    if not is_pid_running(pid):
        logger.info("Holder %d already gone; lock released", pid)
        return True
    if not is_holder(pid):
        raise UsageError(f"Process {pid} is not an exflock holder")
    if not terminate(pid):
        return True
    released = wait_for_exit(pid, timeout)
    if not released:
        logger.warning("Holder %d still running after %.1fs", pid, timeout)
    return released
