"""Launcher side of the detached lock.

The Launcher is what the caller runs. It starts a provisional watchdog,
hands the lock primitive a Holder command to run once the lock is held,
sleeps until the watchdog goes away and then reports whoever is in the
mailbox. It suspends exactly once, on the watchdog.
"""

import contextlib
import logging
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator
from pathlib import Path
from types import FrameType

from ..config import ExflockConfig
from ..errors import AcquisitionTimeout, ExflockError, MailboxError
from ..models import LockRequest, MailboxEntry
from ..services import LockPrimitive, start_watchdog, terminate_group
from .handshake import Mailbox

logger = logging.getLogger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)

# flock(1) exit status when the lock could not be taken in time
PRIMITIVE_TIMEOUT_STATUS = 1


class LauncherInterrupted(ExflockError):
    """Raised when the Launcher receives a termination signal."""

    def __init__(self, signum: int) -> None:
        super().__init__(f"Interrupted by {signal.Signals(signum).name}")
        self.signum = signum
        self.exit_code = 128 + signum


@contextlib.contextmanager
def interrupt_guard() -> Iterator[None]:
    """Turn the first termination signal into LauncherInterrupted.

    Later signals are ignored so that cleanup triggered by the first one
    runs to completion exactly once. Original handlers are restored on exit.
    """
    fired = False

    def _handle(signum: int, frame: FrameType | None) -> None:
        nonlocal fired
        if fired:
            logger.debug("Ignoring repeated %s during cleanup", signal.Signals(signum).name)
            return
        fired = True
        raise LauncherInterrupted(signum)

    originals = {sig: signal.signal(sig, _handle) for sig in INTERRUPT_SIGNALS}
    try:
        yield
    finally:
        for sig, original in originals.items():
            signal.signal(sig, original)


class PrimitiveReaper(threading.Thread):
    """Waits on the lock primitive and wakes the Launcher if it fails.

    On success the primitive keeps running the Holder and this thread
    simply stays blocked until the Launcher exits.
    """

    def __init__(self, primitive: subprocess.Popen[bytes], watchdog: subprocess.Popen[bytes]):
        super().__init__(name="exflock-reaper", daemon=True)
        self.primitive = primitive
        self.watchdog = watchdog
        self.returncode: int | None = None

    def run(self) -> None:
        self.returncode = self.primitive.wait()
        if self.returncode != 0:
            logger.debug("Lock primitive exited %d, releasing watchdog", self.returncode)
            self.watchdog.terminate()


def holder_argv(
    launcher_pid: int,
    lifetime_seconds: int,
    mailbox: Path,
    watch_pid: int,
    poll_interval: float,
    config_path: Path | None = None,
    verbosity: int = 0,
) -> list[str]:
    """Build the Holder command the lock primitive runs once the lock is held."""
    argv = [sys.executable, "-m", "exflock", "--no-color"]
    if config_path is not None:
        argv += ["--config", str(config_path)]
    argv += ["--verbose"] * verbosity
    argv += [
        "hold",
        str(launcher_pid),
        str(lifetime_seconds),
        str(mailbox),
        "--watch",
        str(watch_pid),
        "--poll-interval",
        str(poll_interval),
    ]
    return argv


def _abort(
    watchdog: subprocess.Popen[bytes] | None,
    primitive: subprocess.Popen[bytes] | None,
) -> None:
    """Tear down spawned processes after an interruption."""
    if watchdog is not None:
        watchdog.terminate()
    if primitive is not None:
        # The primitive leads its own session; the Holder, if any, is in its group
        terminate_group(primitive.pid)


def launch(
    request: LockRequest,
    config: ExflockConfig,
    watch_pid: int,
    poll_interval: float | None = None,
    config_path: Path | None = None,
    verbosity: int = 0,
) -> int:
    """Acquire a detached lock and return the Holder's PID.

    Args:
        request: Validated lock request
        config: Loaded configuration
        watch_pid: Process whose exit releases the lock
        poll_interval: Holder liveness poll interval (default: config)
        config_path: Explicit config file to forward to the Holder
        verbosity: Number of -v flags to forward to the Holder

    Returns:
        PID of the Holder process now holding the lock

    Raises:
        PlatformError: If the lock primitive is unavailable
        MailboxError: If the mailbox cannot be created
        AcquisitionTimeout: If the lock was not acquired in time
        LauncherInterrupted: If a termination signal arrived first
    """
    primitive = LockPrimitive.locate(config.lock.exec)
    interval = poll_interval if poll_interval is not None else config.holder.poll_interval

    with interrupt_guard(), Mailbox.create(config.mailbox.dir, config.mailbox.prefix) as mailbox:
        watchdog: subprocess.Popen[bytes] | None = None
        locker: subprocess.Popen[bytes] | None = None
        try:
            watchdog = start_watchdog(
                config.watchdog.exec, request.wait_seconds + config.watchdog.grace
            )
            mailbox.write_provisional(watchdog.pid)

            argv = holder_argv(
                launcher_pid=os.getpid(),
                lifetime_seconds=request.lifetime_seconds,
                mailbox=mailbox.path,
                watch_pid=watch_pid,
                poll_interval=interval,
                config_path=config_path,
                verbosity=verbosity,
            )
            locker = primitive.spawn(
                request.target, request.wait_seconds, argv, config.holder.log_file
            )
            reaper = PrimitiveReaper(locker, watchdog)
            reaper.start()
            logger.debug(
                "Waiting up to %ds for %s (primitive %d, watchdog %d)",
                request.wait_seconds,
                request.target,
                locker.pid,
                watchdog.pid,
            )

            watchdog.wait()
            entry: MailboxEntry | None
            try:
                entry = mailbox.read()
            except MailboxError as e:
                # Counts as "no Holder published", never as a creation failure
                logger.warning("Mailbox unreadable after watchdog exit: %s", e)
                entry = None
            if (entry is None or not entry.is_final) and reaper.is_alive():
                # Watchdog expired on its own; nobody will learn of a late Holder
                terminate_group(locker.pid)
        except BaseException:
            _abort(watchdog, locker)
            raise

    if entry is not None and entry.is_final:
        logger.debug("Lock on %s held by %d", request.target, entry.pid)
        return entry.pid

    reaper.join(timeout=0.1)
    if reaper.returncode not in (None, PRIMITIVE_TIMEOUT_STATUS):
        logger.error(
            "Holder failed to start for %s (lock primitive exited %d)",
            request.target,
            reaper.returncode,
        )
    else:
        logger.warning(
            "Timed out after %ds waiting for lock on %s", request.wait_seconds, request.target
        )
    raise AcquisitionTimeout(f"Could not acquire lock on {request.target}")
