"""Holder side of the detached lock.

The Holder is the command the lock primitive runs once the exclusive lock
is held. It inherits the locked descriptor, so the lock lasts exactly as
long as this process does. It publishes its identity, then waits until
the watched process exits, its lifetime alarm fires, or it is signalled.
Every one of those paths runs the same cleanup before the process exits.
"""

import logging
import os
import signal
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import Any

from ..constants import (
    EXIT_HOLDER_ARG_COUNT,
    EXIT_HOLDER_LIFETIME,
    EXIT_HOLDER_MAILBOX,
    EXIT_HOLDER_REQUESTER,
    HOLDER_ARG_COUNT,
    MAX_LIFETIME,
)
from ..errors import HolderArgumentError, MailboxError
from ..models import HolderState, LockSession, ReleaseReason
from ..services import ProcessRef, is_pid_running
from .handshake import Mailbox, hand_off

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGHUP)


class HolderExit(Exception):
    """Raised inside the Holder when a release condition fires."""

    def __init__(self, reason: ReleaseReason, signum: int | None = None) -> None:
        super().__init__(reason.value)
        self.reason = reason
        self.signum = signum


@dataclass(frozen=True)
class HolderArgs:
    """Validated Holder arguments."""

    requester_pid: int
    lifetime_seconds: int
    mailbox: Mailbox


def parse_holder_args(args: list[str]) -> HolderArgs:
    """Validate the Holder's positional arguments.

    Each malformed argument fails with its own exit code so protocol bugs
    can be told apart from the lock primitive's exit status.

    Raises:
        HolderArgumentError: With exit code 10 (count), 11 (requester),
            12 (lifetime) or 13 (mailbox)
    """
    if len(args) != HOLDER_ARG_COUNT:
        raise HolderArgumentError(
            f"Expected {HOLDER_ARG_COUNT} arguments, got {len(args)}", EXIT_HOLDER_ARG_COUNT
        )
    requester, lifetime, mailbox_path = args

    if not (requester.isascii() and requester.isdigit()) or not is_pid_running(int(requester)):
        raise HolderArgumentError(
            f"Requester is not a running process: {requester!r}", EXIT_HOLDER_REQUESTER
        )

    if not (lifetime.isascii() and lifetime.isdigit()) or int(lifetime) > MAX_LIFETIME:
        raise HolderArgumentError(f"Invalid max lifetime: {lifetime!r}", EXIT_HOLDER_LIFETIME)

    path = Path(mailbox_path)
    if not path.is_file():
        raise HolderArgumentError(f"Mailbox not found: {mailbox_path}", EXIT_HOLDER_MAILBOX)
    mailbox = Mailbox(path)
    try:
        entry = mailbox.read()
    except MailboxError as e:
        raise HolderArgumentError(str(e), EXIT_HOLDER_MAILBOX) from e
    if entry.is_final:
        raise HolderArgumentError(
            f"Mailbox already holds holder {entry.pid}", EXIT_HOLDER_MAILBOX
        )

    return HolderArgs(
        requester_pid=int(requester),
        lifetime_seconds=int(lifetime),
        mailbox=mailbox,
    )


def _on_termination(signum: int, frame: FrameType | None) -> None:
    raise HolderExit(ReleaseReason.SIGNALLED, signum)


def _on_alarm(signum: int, frame: FrameType | None) -> None:
    raise HolderExit(ReleaseReason.LIFETIME_EXPIRED, signum)


def run_holder(
    args: HolderArgs,
    watch_pid: int,
    poll_interval: float,
    sleep: Callable[[float], None] = time.sleep,
) -> LockSession:
    """Hold the lock until a release condition fires.

    Args:
        args: Validated Holder arguments
        watch_pid: Process whose exit releases the lock
        poll_interval: Seconds between liveness checks of watch_pid
        sleep: Sleep function (injectable for tests)

    Returns:
        The finished session, in the TERMINATED state
    """
    session = LockSession(
        holder_pid=os.getpid(),
        requester_pid=args.requester_pid,
        watched_pid=watch_pid,
        lifetime_seconds=args.lifetime_seconds,
    )
    watched = ProcessRef(watch_pid)

    originals: dict[int, Any] = {}
    try:
        for sig in TERMINATION_SIGNALS:
            originals[sig] = signal.signal(sig, _on_termination)
        originals[signal.SIGALRM] = signal.signal(signal.SIGALRM, _on_alarm)

        session.advance(HolderState.PUBLISHING)
        hand_off(args.mailbox, session.holder_pid)
        session.published = True

        if args.lifetime_seconds > 0:
            signal.alarm(args.lifetime_seconds)
        session.advance(HolderState.HOLDING)
        logger.info(
            "Holding lock as %d for %d (lifetime %s)",
            session.holder_pid,
            watch_pid,
            f"{args.lifetime_seconds}s" if args.lifetime_seconds else "unbounded",
        )

        while watched.is_alive():
            sleep(poll_interval)
        session.release_reason = ReleaseReason.REQUESTER_EXITED
    except HolderExit as e:
        session.release_reason = e.reason
    finally:
        for sig in originals:
            signal.signal(sig, signal.SIG_IGN)
        signal.alarm(0)
        session.advance(HolderState.RELEASING)
        for sig, original in originals.items():
            signal.signal(sig, original)

    logger.info(
        "Releasing lock held by %d: %s",
        session.holder_pid,
        session.release_reason.value if session.release_reason else "error",
    )
    session.advance(HolderState.TERMINATED)
    return session
