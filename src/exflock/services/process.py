"""Process-table introspection for exflock.

Thin wrappers over psutil that translate its exceptions into plain
answers: a process that vanished or cannot be inspected is "not there".
"""

import logging
import os
import signal

import psutil

logger = logging.getLogger(__name__)


class ProcessRef:
    """A process identity pinned to its creation time.

    Pinning guards against PID reuse: once the original process exits,
    a new process that happens to receive the same PID is not mistaken
    for it.
    """

    def __init__(self, pid: int) -> None:
        self.pid = pid
        try:
            self.create_time: float | None = psutil.Process(pid).create_time()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            self.create_time = None

    def is_alive(self) -> bool:
        """Return True while the original process exists and is not a zombie."""
        if self.create_time is None:
            return False
        try:
            proc = psutil.Process(self.pid)
            if proc.create_time() != self.create_time:
                return False
            return proc.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # Exists but owned by someone else
            return True

    def __repr__(self) -> str:
        return f"ProcessRef(pid={self.pid})"


def is_pid_running(pid: int) -> bool:
    """Check if a process with given PID is running (zombies count as gone)."""
    if pid <= 0:
        return False
    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        return True


def parent_chain(pid: int | None = None, depth: int = 2) -> list[psutil.Process]:
    """Return up to depth ancestors of pid (default: current process), nearest first.

    The chain stops early at the first missing or inaccessible ancestor.
    """
    chain: list[psutil.Process] = []
    try:
        proc = psutil.Process(pid if pid is not None else os.getpid())
        for _ in range(depth):
            parent = proc.parent()
            if parent is None:
                break
            chain.append(parent)
            proc = parent
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        pass
    return chain


def process_name(proc: psutil.Process) -> str | None:
    """Get the executable basename of proc, or None if it cannot be read."""
    try:
        return proc.name()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None


def process_cmdline(pid: int) -> list[str]:
    """Get the command line of pid, or an empty list if unavailable."""
    try:
        return psutil.Process(pid).cmdline()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return []


def terminate(pid: int, sig: int = signal.SIGTERM) -> bool:
    """Send sig to pid.

    Returns:
        True if the signal was delivered, False if the process is already gone
    """
    try:
        os.kill(pid, sig)
    except ProcessLookupError:
        logger.debug("Process %d already gone", pid)
        return False
    return True


def terminate_group(pgid: int, sig: int = signal.SIGTERM) -> bool:
    """Send sig to every process in process group pgid."""
    try:
        os.killpg(pgid, sig)
    except ProcessLookupError:
        logger.debug("Process group %d already gone", pgid)
        return False
    return True


def wait_for_exit(pid: int, timeout: float) -> bool:
    """Wait up to timeout seconds for pid to exit.

    Returns:
        True if the process exited, False if it is still running
    """
    try:
        psutil.Process(pid).wait(timeout=timeout)
    except psutil.NoSuchProcess:
        return True
    except psutil.TimeoutExpired:
        return not is_pid_running(pid)
    return True
